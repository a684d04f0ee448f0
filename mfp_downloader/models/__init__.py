"""
Data Models Layer.

This package contains the models that define the core data structures
used throughout the application, such as configuration, episodes and
session statistics.
"""

from .config import DownloaderConfig
from .episode import Episode
from .stats import EpisodeResult, EpisodeStatus, FailureKind, RunStats

__all__ = [
    "DownloaderConfig",
    "Episode",
    "EpisodeResult",
    "EpisodeStatus",
    "FailureKind",
    "RunStats",
]
