"""
The main orchestrator: prepares the output directory, fetches the cover and
the feed, then processes every episode under a concurrency cap.
"""

import asyncio
import logging
import time
from pathlib import Path

from rich.markup import escape

from mfp_downloader.exceptions import (
    CoverFetchError,
    DownloadError,
    OutputDirectoryError,
)
from mfp_downloader.feeds import FeedLoader
from mfp_downloader.media import CompletionChecker, Downloader, Tagger
from mfp_downloader.media.downloader import get_connection_pool
from mfp_downloader.models.config import DownloaderConfig
from mfp_downloader.models.episode import Episode
from mfp_downloader.models.stats import EpisodeResult, RunStats
from mfp_downloader.utils.path import create_dir, unique_by_filename

from .episode_processor import EpisodeProcessor

log = logging.getLogger(__name__)


class DownloadManager:
    """Orchestrates the entire download session."""

    def __init__(
        self,
        config: DownloaderConfig,
        downloader: Downloader | None = None,
        feed_loader: FeedLoader | None = None,
        tagger: Tagger | None = None,
        checker: CompletionChecker | None = None,
    ):
        self.config = config
        self.output_dir = Path(config.output_dir)
        self.cover_path = self.output_dir / config.cover_filename
        self.downloader = downloader or Downloader()
        self.feed_loader = feed_loader or FeedLoader()
        self.episode_processor = EpisodeProcessor(
            self.output_dir,
            self.cover_path,
            self.downloader,
            tagger or Tagger(config.album),
            checker or CompletionChecker(config.album, config.verify_size),
        )
        self.semaphore = asyncio.Semaphore(config.max_workers)
        self.active_count = 0
        self.peak_concurrent = 0

    def prepare_output(self) -> None:
        """Ensures the output directory exists."""
        try:
            create_dir(self.output_dir)
        except OSError as e:
            raise OutputDirectoryError(
                f"Could not create output directory '{self.output_dir}': {e}"
            ) from e

    async def fetch_cover(self) -> None:
        """Downloads the shared cover image unless it is already present."""
        try:
            downloaded = await self.downloader.download_asset(
                self.config.cover_url, str(self.cover_path)
            )
        except DownloadError as e:
            raise CoverFetchError(f"Could not fetch cover image: {e}") from e
        if downloaded:
            log.info("Cover image downloaded.")
        else:
            log.debug(f"Using existing cover image '{self.cover_path}'")

    async def load_episodes(self) -> list[Episode]:
        """Loads the feed and drops episodes that would share a target file."""
        episodes = await self.feed_loader.load(self.config.feed_url)
        unique, duplicates = unique_by_filename(episodes)
        for episode in duplicates:
            log.warning(
                f"[yellow]Duplicate file name, skipping:[/yellow] "
                f"{escape(episode.filename)}"
            )
        return unique

    async def _process_in_slot(self, episode: Episode) -> EpisodeResult:
        """Processes an episode once one of the worker slots is free."""
        async with self.semaphore:
            self.active_count += 1
            self.peak_concurrent = max(self.peak_concurrent, self.active_count)
            try:
                return await self.episode_processor.process(episode)
            finally:
                self.active_count -= 1

    async def process_episodes(self, episodes: list[Episode]) -> list[EpisodeResult]:
        """
        Processes all episodes concurrently and waits until each one has
        reached a terminal state.
        """
        tasks = [self._process_in_slot(episode) for episode in episodes]
        return list(await asyncio.gather(*tasks))

    async def run(self) -> RunStats:
        """
        Executes the whole session.

        Raises:
            OutputDirectoryError, CoverFetchError, FeedError: Fatal setup
            errors. Per-episode failures are only reported in the stats.
        """
        start_time = time.monotonic()
        await get_connection_pool(
            self.config.max_workers,
            self.config.connect_timeout,
            self.config.read_timeout,
        )

        self.prepare_output()
        await self.fetch_cover()
        episodes = await self.load_episodes()

        if not episodes:
            log.warning("[yellow]No episodes to process.[/yellow]")

        results = await self.process_episodes(episodes)

        return RunStats.from_results(
            results,
            episodes_found=len(episodes),
            peak_concurrent=self.peak_concurrent,
            duration_seconds=time.monotonic() - start_time,
        )
