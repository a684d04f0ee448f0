"""
Feed Layer.

This package retrieves the podcast RSS feed and normalizes its items into
episode records.
"""

from .loader import FeedLoader, parse_title

__all__ = ["FeedLoader", "parse_title"]
