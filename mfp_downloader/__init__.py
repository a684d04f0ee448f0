"""
mfp-downloader: fetches a podcast feed, downloads every episode and tags it
with a shared album name and cover image.
"""

__version__ = "1.0.0"
