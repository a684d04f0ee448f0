"""
Fetches the podcast RSS feed and turns its items into an ordered episode list.
"""

import asyncio
import logging
import re
from typing import Any, Optional, Tuple

import aiohttp
import feedparser
from rich.markup import escape

from mfp_downloader.exceptions import FeedError
from mfp_downloader.media.downloader import get_connection_pool
from mfp_downloader.models.episode import Episode

log = logging.getLogger(__name__)

TITLE_PATTERN = re.compile(r"^Episode\s+(\d+):\s*(.+)$")


def parse_title(raw: str) -> Optional[Tuple[str, str]]:
    """
    Splits a feed title of the form 'Episode <N>: <T>' into its number and title.

    The number is returned as a string so leading zeros survive.

    >>> parse_title("Episode 07: Night Drive")
    ('07', 'Night Drive')
    """
    match = TITLE_PATTERN.match(raw.strip())
    if not match:
        return None
    number, title = match.group(1), match.group(2).strip()
    if not title:
        return None
    return number, title


def parse_size(length: Any) -> Optional[int]:
    """Parses an enclosure length; anything unusable means 'unknown'."""
    try:
        size = int(str(length).strip())
    except (TypeError, ValueError):
        return None
    return size if size > 0 else None


def extract_episodes(entries: list) -> list[Episode]:
    """
    Builds episodes from parsed feed entries, earliest first.

    Entries without an enclosure or with an unrecognized title are skipped.
    Feeds list the newest item first, so the result is the reverse of the
    feed order.
    """
    episodes = []
    for entry in entries:
        title = entry.get("title", "")
        enclosures = entry.get("enclosures") or []
        if not enclosures or not enclosures[0].get("href"):
            log.debug(f"No audio enclosure, skipping: {escape(title)}")
            continue

        parsed = parse_title(title)
        if parsed is None:
            log.warning(f"Unrecognized title format, skipping: {escape(title)}")
            continue

        number, episode_title = parsed
        enclosure = enclosures[0]
        episodes.append(
            Episode(
                number=number,
                title=episode_title,
                source_url=enclosure["href"],
                expected_size=parse_size(enclosure.get("length")),
            )
        )

    episodes.reverse()
    return episodes


class FeedLoader:
    """Loads the episode list from an RSS feed URL."""

    async def fetch(self, feed_url: str) -> bytes:
        """Retrieves the raw feed document."""
        try:
            session = await get_connection_pool()
            async with session.get(feed_url, allow_redirects=True) as response:
                response.raise_for_status()
                return await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FeedError(
                f"Failed to fetch feed '{feed_url}': {e or type(e).__name__}"
            ) from e

    async def load(self, feed_url: str) -> list[Episode]:
        """
        Fetches and parses the feed.

        Returns:
            The recognized episodes in chronological order.

        Raises:
            FeedError: If the feed cannot be fetched or is not a parseable feed.
        """
        content = await self.fetch(feed_url)
        feed = await asyncio.to_thread(feedparser.parse, content)

        if feed.bozo:
            if not feed.entries:
                raise FeedError(
                    f"Failed to parse feed '{feed_url}': {feed.get('bozo_exception')}"
                )
            log.warning(
                f"[yellow]Feed has formatting problems, continuing:[/yellow] "
                f"{escape(str(feed.get('bozo_exception')))}"
            )

        episodes = extract_episodes(feed.entries)
        log.info(f"Found {len(episodes)} episodes.")
        return episodes
