"""
Manages loading and validation of the optional INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from mfp_downloader.exceptions import ConfigurationError
from mfp_downloader.models.config import DownloaderConfig

log = logging.getLogger(__name__)

_BOOL_KEYS = {"verify_size"}
_INT_KEYS = {"max_workers"}
_FLOAT_KEYS = {"connect_timeout", "read_timeout"}


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(
        self, cli_options: dict[str, Any] | None = None
    ) -> DownloaderConfig:
        """
        Loads configuration from the INI file (if present), applies CLI
        overrides, and validates it.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated DownloaderConfig object. Settings missing from both the
            file and the command line keep their defaults.

        Raises:
            ConfigurationError: If the config file is invalid or validation fails.
        """
        config_from_file: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
                config_from_file = self._get_config_as_dict()
            except (configparser.Error, ValueError) as e:
                raise ConfigurationError(
                    f"Error parsing configuration file '{self.config_file_path}': {e}"
                ) from e
            log.debug(f"Loaded configuration from '{self.config_file_path}'")
        else:
            log.debug(
                f"No configuration file at '{self.config_file_path}', using defaults."
            )

        if cli_options:
            config_from_file.update(cli_options)

        try:
            return DownloaderConfig(
                **config_from_file, config_path=str(self.config_file_path.parent)
            )
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the known keys of the 'DEFAULT' section into a dictionary."""
        section = self._parser["DEFAULT"]
        known_keys = DownloaderConfig.get_ini_keys()
        values: dict[str, Any] = {}

        for key in section:
            if key not in known_keys:
                log.warning(
                    f"[yellow]Ignoring unknown configuration key '{key}'.[/yellow]"
                )
                continue
            if key in _BOOL_KEYS:
                values[key] = section.getboolean(key)
            elif key in _INT_KEYS:
                values[key] = section.getint(key)
            elif key in _FLOAT_KEYS:
                values[key] = section.getfloat(key)
            else:
                values[key] = section.get(key)
        return values
