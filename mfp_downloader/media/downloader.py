"""
Handles the low-level downloading of files over HTTP, streaming each body to a
temporary file that only replaces the destination once fully written.
"""

import asyncio
import logging
import os

import aiofiles
import aiohttp

from mfp_downloader.exceptions import DownloadError

log = logging.getLogger(__name__)

_connection_pool: aiohttp.ClientSession | None = None
_pool_lock = asyncio.Lock()


async def get_connection_pool(
    max_workers: int = 3, connect_timeout: float = 15.0, read_timeout: float = 90.0
) -> aiohttp.ClientSession:
    """
    Returns the process-wide aiohttp session, creating it on first use.

    Feed, cover and episode requests all share this session. The arguments
    are only honoured by the call that creates it.

    Args:
        max_workers: Maximum concurrent downloads (should match config.max_workers).
        connect_timeout: Socket connect timeout in seconds, 0 disables it.
        read_timeout: Socket read timeout in seconds, 0 disables it.
    """
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            return _connection_pool

        connector = aiohttp.TCPConnector(
            limit=max_workers * 2,  # Feed/cover requests plus episode downloads
            limit_per_host=max_workers + 1,
            ttl_dns_cache=600,
            keepalive_timeout=30,
        )
        timeout = aiohttp.ClientTimeout(
            total=None,
            sock_connect=connect_timeout or None,
            sock_read=read_timeout or None,
        )
        _connection_pool = aiohttp.ClientSession(connector=connector, timeout=timeout)
        log.debug(f"Created download pool with limit_per_host={max_workers + 1}")

    return _connection_pool


async def close_connection_pool() -> None:
    """Closes the process-wide session; the next request opens a fresh one."""
    global _connection_pool
    async with _pool_lock:
        if _connection_pool and not _connection_pool.closed:
            await _connection_pool.close()
            _connection_pool = None
            log.debug("HTTP session closed.")


class Downloader:
    """A low-level file downloader. Failed downloads are reported, not retried."""

    CHUNK_SIZE = 262144  # 256 KB
    PART_SUFFIX = ".part"

    def __init__(self, chunk_size: int = CHUNK_SIZE):
        self.chunk_size = chunk_size

    async def download_file(self, url: str, destination_path: str) -> int:
        """
        Downloads a file from a URL to `destination_path`.

        The body is written to '<destination>.part' and moved into place with
        os.replace() once complete, so the destination is never observed half
        written.

        Returns:
            The number of bytes written.

        Raises:
            DownloadError: On any HTTP, transport or file system error.
        """
        temp_path = destination_path + self.PART_SUFFIX
        try:
            session = await get_connection_pool()
            async with session.get(url, allow_redirects=True) as response:
                response.raise_for_status()

                bytes_downloaded = 0
                async with aiofiles.open(temp_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.chunk_size):
                        await f.write(chunk)
                        bytes_downloaded += len(chunk)

            await asyncio.to_thread(os.replace, temp_path, destination_path)
            log.debug(
                f"Wrote {bytes_downloaded} bytes to "
                f"'{os.path.basename(destination_path)}'"
            )
            return bytes_downloaded
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise DownloadError(
                f"Failed to download '{url}': {e or type(e).__name__}"
            ) from e
        finally:
            if os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError:
                    pass

    async def download_asset(self, url: str, destination_path: str) -> bool:
        """
        Downloads an asset (like the cover image) if it doesn't already exist.

        Returns:
            True if the asset was downloaded, False if it was already present.
        """
        if await asyncio.to_thread(os.path.isfile, destination_path):
            return False

        await self.download_file(url, destination_path)
        return True

    async def probe_size(self, url: str) -> int | None:
        """
        Asks the server for the resource size with a HEAD request.

        Returns:
            The declared Content-Length, or None when the server does not send
            one or the request fails.
        """
        try:
            session = await get_connection_pool()
            async with session.head(url, allow_redirects=True) as response:
                response.raise_for_status()
                if response.content_length and response.content_length > 0:
                    return response.content_length
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.debug(f"HEAD request for '{url}' failed: {e}")
        return None
