"""
Pydantic model for a single podcast episode taken from the feed.
"""

from pathvalidate import sanitize_filename
from pydantic import BaseModel, Field


class Episode(BaseModel):
    """An immutable episode record derived from an `Episode <N>: <T>` feed title."""

    number: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    source_url: str = Field(..., min_length=1)
    expected_size: int | None = Field(default=None, gt=0)

    class Config:
        """Pydantic model configuration."""

        frozen = True
        str_strip_whitespace = True

    @property
    def filename(self) -> str:
        """The target file name, e.g. '07 - Night Drive.mp3'."""
        return sanitize_filename(f"{self.number} - {self.title}.mp3", platform="auto")

    def __str__(self) -> str:
        return f"{self.number} - {self.title}"
