"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class MfpDownloaderError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(MfpDownloaderError):
    """Raised for issues related to configuration loading or validation."""


class OutputDirectoryError(MfpDownloaderError):
    """Raised when the output directory cannot be created."""


class CoverFetchError(MfpDownloaderError):
    """Raised when the shared cover image cannot be downloaded."""


class FeedError(MfpDownloaderError):
    """Raised when the RSS feed cannot be retrieved or parsed."""


class DownloadError(MfpDownloaderError):
    """Raised when an episode's audio file cannot be downloaded."""


class TaggingError(MfpDownloaderError):
    """Raised when metadata cannot be written to a downloaded file."""
