"""
Handles the processing of a single episode, from completeness check to tagging.
"""

import asyncio
import logging
from pathlib import Path

from rich.markup import escape

from mfp_downloader.exceptions import DownloadError, TaggingError
from mfp_downloader.media import Completion, CompletionChecker, Downloader, Tagger
from mfp_downloader.models.episode import Episode
from mfp_downloader.models.stats import EpisodeResult, EpisodeStatus, FailureKind
from mfp_downloader.utils.path import episode_path

log = logging.getLogger(__name__)


class EpisodeProcessor:
    """
    Drives one episode through check, fetch and tag.

    Every outcome, including failures, is returned as an `EpisodeResult`;
    nothing raised here escapes to sibling episodes.
    """

    def __init__(
        self,
        output_dir: Path,
        cover_path: Path,
        downloader: Downloader,
        tagger: Tagger,
        checker: CompletionChecker,
    ):
        self.output_dir = output_dir
        self.cover_path = cover_path
        self.downloader = downloader
        self.tagger = tagger
        self.checker = checker

    async def check(self, episode: Episode, target_path: Path) -> Completion:
        """Determines what the episode's target file needs."""
        expected_size = episode.expected_size
        if (
            self.checker.verify_size
            and expected_size is None
            and await asyncio.to_thread(target_path.is_file)
        ):
            expected_size = await self.downloader.probe_size(episode.source_url)
        return await asyncio.to_thread(
            self.checker.assess, str(target_path), expected_size
        )

    async def process(self, episode: Episode) -> EpisodeResult:
        """
        Manages the complete lifecycle of downloading and tagging an episode.
        """
        target_path = episode_path(self.output_dir, episode)
        name = escape(target_path.name)

        try:
            completion = await self.check(episode, target_path)
        except Exception as e:
            log.error(
                f"  [red]✗ Failed:[/] {name} (could not check file: {e})",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return EpisodeResult.failed(episode, FailureKind.CHECK, e)

        if completion is Completion.COMPLETE:
            log.info(f"  [yellow]○ Skipping:[/] [dim]{name}[/dim] (already complete)")
            return EpisodeResult.success(episode, EpisodeStatus.COMPLETE)

        bytes_downloaded = 0
        if completion is Completion.NEEDS_DOWNLOAD:
            log.info(f"  [cyan]↓ Downloading:[/] {name}")
            try:
                bytes_downloaded = await self.downloader.download_file(
                    episode.source_url, str(target_path)
                )
            except DownloadError as e:
                log.error(
                    f"  [red]✗ Failed:[/] {name} ({e})",
                    exc_info=log.getEffectiveLevel() == logging.DEBUG,
                )
                return EpisodeResult.failed(episode, FailureKind.FETCH, e)
        else:
            log.info(f"  [cyan]✎ Updating tags:[/] {name}")

        try:
            await asyncio.to_thread(
                self.tagger.tag_file, str(target_path), str(self.cover_path)
            )
        except TaggingError as e:
            log.error(
                f"  [red]✗ Failed:[/] {name} ({e})",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return EpisodeResult.failed(episode, FailureKind.TAG, e)

        if completion is Completion.NEEDS_DOWNLOAD:
            log.info(f"  [green]✓ Downloaded:[/] {name}")
            return EpisodeResult.success(
                episode, EpisodeStatus.DOWNLOADED, bytes_downloaded
            )

        log.info(f"  [green]✓ Tag updated:[/] {name}")
        return EpisodeResult.success(episode, EpisodeStatus.RETAGGED)
