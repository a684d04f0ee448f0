"""Shared fixtures for the test suite."""

import asyncio
from pathlib import Path

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from mfp_downloader.exceptions import DownloadError
from mfp_downloader.media.downloader import close_connection_pool
from mfp_downloader.models.episode import Episode

ALBUM = "Music For Programming"

# A run of MPEG-1 Layer III frame headers padded with silence.
AUDIO_PAYLOAD = (b"\xff\xfb\x90\x64" + b"\x00" * 413) * 8
COVER_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x42" * 64 + b"\xff\xd9"


def make_episode(number: str, title: str | None = None, **kwargs) -> Episode:
    """Builds an episode pointing at a fake host URL."""
    return Episode(
        number=number,
        title=title or f"Title {number}",
        source_url=kwargs.pop("source_url", f"https://host/ep{number}.mp3"),
        **kwargs,
    )


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Create the output directory."""
    directory = tmp_path / "music"
    directory.mkdir()
    return directory


@pytest.fixture
def cover_path(output_dir: Path) -> Path:
    """Write a small JPEG-looking cover image."""
    path = output_dir / "cover.jpg"
    path.write_bytes(COVER_BYTES)
    return path


@pytest.fixture
def audio_file(output_dir: Path) -> Path:
    """Write an untagged audio file."""
    path = output_dir / "01 - First.mp3"
    path.write_bytes(AUDIO_PAYLOAD)
    return path


class FakeDownloader:
    """In-memory stand-in for `Downloader` that records its calls."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.downloads: list[str] = []
        self.probes: list[str] = []
        self.failing: set[str] = set()
        self.sizes: dict[str, int] = {}
        self.cover_fails = False
        self.active = 0
        self.peak_active = 0

    async def download_file(self, url: str, destination_path: str) -> int:
        self.downloads.append(url)
        self.active += 1
        self.peak_active = max(self.peak_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if url in self.failing:
                raise DownloadError(f"Failed to download '{url}': 404, Not Found")
            Path(destination_path).write_bytes(AUDIO_PAYLOAD)
            return len(AUDIO_PAYLOAD)
        finally:
            self.active -= 1

    async def download_asset(self, url: str, destination_path: str) -> bool:
        if self.cover_fails:
            raise DownloadError(f"Failed to download '{url}': 500, Server Error")
        if Path(destination_path).is_file():
            return False
        Path(destination_path).write_bytes(COVER_BYTES)
        return True

    async def probe_size(self, url: str) -> int | None:
        self.probes.append(url)
        return self.sizes.get(url)


@pytest.fixture
def fake_downloader() -> FakeDownloader:
    return FakeDownloader()


class FakeHost:
    """Serves registered byte bodies from a local aiohttp server."""

    def __init__(self):
        self.resources: dict[str, tuple[bytes, int]] = {}
        self.requests: list[tuple[str, str]] = []
        self.server: TestServer | None = None

    def add(self, path: str, body: bytes, status: int = 200) -> str:
        self.resources[path] = (body, status)
        return self.url(path)

    def url(self, path: str) -> str:
        return str(self.server.make_url(path))

    async def handle(self, request: web.Request) -> web.Response:
        self.requests.append((request.method, request.path))
        if request.path not in self.resources:
            return web.Response(status=404, text="not found")
        body, status = self.resources[request.path]
        return web.Response(body=body, status=status)


@pytest_asyncio.fixture
async def fake_host():
    """Start a local HTTP server and release the shared pool afterwards."""
    host = FakeHost()
    app = web.Application()
    app.router.add_route("*", "/{tail:.*}", host.handle)
    server = TestServer(app)
    await server.start_server()
    host.server = server
    yield host
    await close_connection_pool()
    await server.close()


@pytest_asyncio.fixture
async def connection_pool_cleanup():
    """Close the shared connection pool created during a test."""
    yield
    await close_connection_pool()
