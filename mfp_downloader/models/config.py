"""
Pydantic model for application configuration.
Provides validation for all settings, each of which has a working default.
"""

from pydantic import BaseModel, Field, field_validator

DEFAULT_FEED_URL = "https://musicforprogramming.net/rss.php"
DEFAULT_COVER_URL = "https://musicforprogramming.net/img/folder.jpg"
DEFAULT_ALBUM = "Music For Programming"
DEFAULT_OUTPUT_DIR = "downloaded_music"


class DownloaderConfig(BaseModel):
    """A validated configuration model for the application."""

    # Content source
    feed_url: str = DEFAULT_FEED_URL
    cover_url: str = DEFAULT_COVER_URL
    album: str = DEFAULT_ALBUM

    # Output
    output_dir: str = DEFAULT_OUTPUT_DIR
    cover_filename: str = "cover.jpg"

    # Download Settings
    max_workers: int = 3
    verify_size: bool = False
    connect_timeout: float = 15.0
    read_timeout: float = 90.0

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("feed_url", "cover_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Only plain HTTP(S) sources are supported."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://, got: {v!r}")
        return v

    @field_validator("album", "output_dir", "cover_filename")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Value cannot be empty.")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < 1 or v > 32:
            raise ValueError("Max workers must be between 1 and 32.")
        return v

    @field_validator("connect_timeout", "read_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """A timeout of 0 disables it; negative values are rejected."""
        if v < 0:
            raise ValueError("Timeouts cannot be negative.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are accepted in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
