"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest

from mfp_downloader.exceptions import ConfigurationError
from mfp_downloader.models import DownloaderConfig
from mfp_downloader.storage import ConfigManager


class TestDownloaderConfig:
    """Test DownloaderConfig model."""

    def test_defaults(self) -> None:
        config = DownloaderConfig()

        assert config.feed_url == "https://musicforprogramming.net/rss.php"
        assert config.cover_url == "https://musicforprogramming.net/img/folder.jpg"
        assert config.album == "Music For Programming"
        assert config.output_dir == "downloaded_music"
        assert config.max_workers == 3
        assert config.verify_size is False

    @pytest.mark.parametrize("workers", [0, 33])
    def test_rejects_worker_count(self, workers: int) -> None:
        with pytest.raises(ValueError, match="Max workers"):
            DownloaderConfig(max_workers=workers)

    def test_rejects_non_http_feed(self) -> None:
        with pytest.raises(ValueError, match="http"):
            DownloaderConfig(feed_url="ftp://example.org/feed.xml")

    def test_rejects_empty_album(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            DownloaderConfig(album="   ")


class TestConfigManager:
    """Test ConfigManager class."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = ConfigManager(tmp_path / "config.ini").load_config()

        assert config == DownloaderConfig(config_path=str(tmp_path))

    def test_reads_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.ini"
        config_file.write_text(
            "[DEFAULT]\n"
            "feed_url = https://example.org/feed.xml\n"
            "album = My Mixes\n"
            "max_workers = 5\n"
            "verify_size = yes\n"
            "read_timeout = 0\n"
        )

        config = ConfigManager(config_file).load_config()

        assert config.feed_url == "https://example.org/feed.xml"
        assert config.album == "My Mixes"
        assert config.max_workers == 5
        assert config.verify_size is True
        assert config.read_timeout == 0

    def test_cli_options_override_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.ini"
        config_file.write_text("[DEFAULT]\noutput_dir = from_file\n")

        config = ConfigManager(config_file).load_config({"output_dir": "from_cli"})

        assert config.output_dir == "from_cli"

    def test_unknown_keys_are_ignored(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.ini"
        config_file.write_text("[DEFAULT]\ncolour = blue\n")

        config = ConfigManager(config_file).load_config()

        assert config.album == "Music For Programming"

    def test_invalid_value(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.ini"
        config_file.write_text("[DEFAULT]\nmax_workers = 100\n")

        with pytest.raises(ConfigurationError, match="validation failed"):
            ConfigManager(config_file).load_config()

    def test_unparseable_value(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.ini"
        config_file.write_text("[DEFAULT]\nmax_workers = many\n")

        with pytest.raises(ConfigurationError, match="Error parsing"):
            ConfigManager(config_file).load_config()

    def test_malformed_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.ini"
        config_file.write_text("this is not ini\n")

        with pytest.raises(ConfigurationError):
            ConfigManager(config_file).load_config()
