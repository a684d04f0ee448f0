"""
Utilities for handling the output directory and the files inside it.
"""

from pathlib import Path

from mfp_downloader.models.episode import Episode


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def episode_path(output_dir: Path, episode: Episode) -> Path:
    """The target file of an episode inside the output directory."""
    return output_dir / episode.filename


def unique_by_filename(episodes: list[Episode]) -> tuple[list[Episode], list[Episode]]:
    """
    Splits episodes into those with a unique target file name and the
    duplicates that would overwrite an earlier episode's file.

    The first episode claiming a name wins; order is preserved. Names are
    compared case-insensitively because on macOS and Windows volumes
    "01 - Intro.mp3" and "01 - intro.mp3" are the same file.
    """
    seen: set[str] = set()
    unique, duplicates = [], []
    for episode in episodes:
        key = episode.filename.casefold()
        if key in seen:
            duplicates.append(episode)
        else:
            seen.add(key)
            unique.append(episode)
    return unique, duplicates
