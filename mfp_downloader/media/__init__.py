"""
Media Processing Layer.

This package is responsible for all media file operations, including
downloading, metadata tagging, and completeness checks.
"""

from .downloader import Downloader
from .integrity import Completion, CompletionChecker
from .tagger import Tagger

__all__ = ["Completion", "CompletionChecker", "Downloader", "Tagger"]
