"""
Storage Layer.

This package handles reading the application's configuration file.
"""

from .config_manager import ConfigManager

__all__ = ["ConfigManager"]
