"""
Result and statistics types for a download session.
"""

from dataclasses import dataclass, field
from enum import Enum

from .episode import Episode


class EpisodeStatus(Enum):
    """Terminal states of an episode's processing."""

    COMPLETE = "complete"  # Already downloaded and tagged, nothing done
    DOWNLOADED = "downloaded"  # Fetched and tagged
    RETAGGED = "retagged"  # Content present, only metadata rewritten
    FAILED = "failed"


class FailureKind(Enum):
    """The stage at which an episode failed."""

    CHECK = "check"
    FETCH = "fetch"
    TAG = "tag"


@dataclass(frozen=True)
class EpisodeResult:
    """The outcome of processing a single episode."""

    episode: Episode
    status: EpisodeStatus
    failure: FailureKind | None = None
    error: str | None = None
    bytes_downloaded: int = 0

    @property
    def ok(self) -> bool:
        return self.status is not EpisodeStatus.FAILED

    @classmethod
    def success(
        cls, episode: Episode, status: EpisodeStatus, bytes_downloaded: int = 0
    ) -> "EpisodeResult":
        return cls(episode, status, bytes_downloaded=bytes_downloaded)

    @classmethod
    def failed(
        cls, episode: Episode, kind: FailureKind, cause: BaseException
    ) -> "EpisodeResult":
        return cls(
            episode, EpisodeStatus.FAILED, failure=kind, error=str(cause) or repr(cause)
        )


@dataclass
class RunStats:
    """Tracks statistics for a download session."""

    episodes_found: int = 0
    downloaded: int = 0
    retagged: int = 0
    already_complete: int = 0
    failed: int = 0
    total_size_downloaded: int = 0
    peak_concurrent: int = 0
    duration_seconds: float = 0.0
    failures: list[EpisodeResult] = field(default_factory=list)

    def record(self, result: EpisodeResult) -> None:
        """Adds a single episode result to the counters."""
        if result.status is EpisodeStatus.DOWNLOADED:
            self.downloaded += 1
            self.total_size_downloaded += result.bytes_downloaded
        elif result.status is EpisodeStatus.RETAGGED:
            self.retagged += 1
        elif result.status is EpisodeStatus.COMPLETE:
            self.already_complete += 1
        else:
            self.failed += 1
            self.failures.append(result)

    @classmethod
    def from_results(cls, results: list[EpisodeResult], **kwargs) -> "RunStats":
        stats = cls(**kwargs)
        for result in results:
            stats.record(result)
        return stats

    @property
    def processed(self) -> int:
        return self.downloaded + self.retagged + self.already_complete + self.failed
