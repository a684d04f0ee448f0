"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from mfp_downloader import __version__
from mfp_downloader.core.download_manager import DownloadManager
from mfp_downloader.media.downloader import close_connection_pool
from mfp_downloader.models.config import DEFAULT_OUTPUT_DIR
from mfp_downloader.models.stats import RunStats
from mfp_downloader.storage.config_manager import ConfigManager

from .formatters import print_summary_panel

console = Console()
log = logging.getLogger("mfp_downloader")


def configure_logging(verbosity: int = 0) -> None:
    """Routes log records through Rich; -vv switches to debug output."""
    logging.basicConfig(
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                show_path=False,
                show_level=False,
                markup=True,
            )
        ],
    )
    log.setLevel(logging.DEBUG if verbosity >= 2 else logging.INFO)


configure_logging()

app = typer.Typer(
    name="mfp-downloader",
    help="Download every Music For Programming episode and tag it consistently.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    """Per-user config location: %APPDATA% on Windows, XDG elsewhere."""
    if os.name == "nt":
        root = os.environ.get("APPDATA") or Path.home() / "AppData" / "Roaming"
    else:
        root = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(root) / "mfp-downloader"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _version_callback(value: bool) -> None:
    if not value:
        return
    console.print(f"mfp-downloader {__version__}")
    raise typer.Exit()


async def run_session(manager: DownloadManager) -> RunStats:
    """Runs a download session and releases the shared connection pool."""
    try:
        return await manager.run()
    finally:
        await close_connection_pool()


@app.command()
def download(
    output_dir: str | None = typer.Argument(
        None,
        help=f"Directory to store the episodes in (default: {DEFAULT_OUTPUT_DIR}).",
        show_default=False,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        is_eager=True,
        callback=_version_callback,
    ),
):
    """Download all episodes of the feed and tag them."""
    configure_logging(verbose)

    cli_options = {"output_dir": output_dir} if output_dir else {}
    config = ConfigManager(CONFIG_FILE).load_config(cli_options)

    console.print("[bold cyan]🎵 Starting download session...[/bold cyan]")
    manager = DownloadManager(config)
    try:
        stats = asyncio.run(run_session(manager))
    except KeyboardInterrupt:
        # Click would otherwise turn this into "Aborted!" and exit 130.
        console.print("\n[yellow]⚠️  Download cancelled by user.[/yellow]")
        raise typer.Exit(0)

    print_summary_panel(stats, console)
