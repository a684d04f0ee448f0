"""
Main entry point for the mfp-downloader application.
Sets up the console, runs the CLI and turns fatal errors into exit codes.
"""

import logging
import os
import sys

import typer
from rich.console import Console

from mfp_downloader.cli.app import app
from mfp_downloader.cli.formatters import format_error_with_suggestions
from mfp_downloader.exceptions import MfpDownloaderError

log = logging.getLogger("mfp_downloader")


def _force_utf8_console() -> None:
    """Episode titles and status symbols need UTF-8 on Windows consoles."""
    if os.name != "nt":
        return
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass


def main() -> None:
    """Main entry point function."""
    _force_utf8_console()
    console = Console(stderr=True)

    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except MfpDownloaderError as e:
        # Fatal setup errors; per-episode failures never reach this point.
        console.print(format_error_with_suggestions(e))
        sys.exit(1)
    except Exception as e:
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
