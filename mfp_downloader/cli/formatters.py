"""
Functions for formatting and displaying data in the console using Rich.
"""

from rich import box
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from mfp_downloader.exceptions import (
    ConfigurationError,
    CoverFetchError,
    FeedError,
    OutputDirectoryError,
)
from mfp_downloader.models.stats import RunStats
from mfp_downloader.utils.formatting import format_duration, format_size

# Checked in order; the first matching class wins.
SUGGESTIONS: list[tuple[type[Exception], tuple[str, ...]]] = [
    (
        OutputDirectoryError,
        (
            "Check that the parent directory exists and is writable.",
            "Pass a different output directory as the first argument.",
        ),
    ),
    (
        CoverFetchError,
        (
            "The cover image may have moved; set `cover_url` in config.ini.",
            "Check your internet connection.",
        ),
    ),
    (
        FeedError,
        (
            "The feed may be temporarily unavailable. Try again later.",
            "Verify that `feed_url` in config.ini points to an RSS feed.",
        ),
    ),
    (
        ConfigurationError,
        (
            "Fix or remove the offending key in config.ini.",
            "Delete config.ini to fall back to the defaults.",
        ),
    ),
]

GENERIC_SUGGESTIONS = ("Re-run with -vv to see debug logs.",)


def suggestions_for(error: Exception) -> tuple[str, ...]:
    for error_class, hints in SUGGESTIONS:
        if isinstance(error, error_class):
            return hints
    return GENERIC_SUGGESTIONS


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Builds a red panel naming the error and what the user can try next."""
    headline = Text.assemble((f"{type(error).__name__}: ", "bold red"), str(error))
    hints = Text("\n".join(f"• {hint}" for hint in suggestions_for(error)))

    parts = [headline, Text(), Text("What to try", style="bold yellow"), hints]
    if context:
        parts += [Text(), Text(f"Context: {context}", style="dim")]

    return Panel(
        Group(*parts),
        title="[bold red]mfp-downloader failed[/bold red]",
        border_style="red",
        expand=False,
    )


def _summary_rows(stats: RunStats) -> list[tuple[str, str]]:
    rows = [
        ("Episodes in Feed:", str(stats.episodes_found)),
        ("✓ Downloaded:", f"[bold green]{stats.downloaded}[/bold green]"),
    ]
    if stats.retagged:
        rows.append(("✎ Tags Updated:", f"[green]{stats.retagged}[/green]"))
    if stats.already_complete:
        rows.append(
            ("○ Already Complete:", f"[yellow]{stats.already_complete}[/yellow]")
        )
    if stats.failed:
        rows.append(("✗ Failed:", f"[bold red]{stats.failed}[/bold red]"))
    rows += [
        ("", ""),
        ("Downloaded Size:", f"[cyan]{format_size(stats.total_size_downloaded)}[/cyan]"),
        ("Elapsed:", f"[blue]{format_duration(stats.duration_seconds)}[/blue]"),
        ("Peak Concurrency:", f"[green]{stats.peak_concurrent}[/green]"),
    ]
    return rows


def print_summary_panel(stats: RunStats, console: Console | None = None):
    """Prints the end-of-run panel, followed by a table of failed episodes."""
    console = console or Console()

    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold cyan", justify="right", min_width=20)
    grid.add_column()
    for label, value in _summary_rows(stats):
        grid.add_row(label, value)

    if stats.failed:
        title, border = "⚠ [bold]Finished with Errors[/bold]", "yellow"
    else:
        title, border = "🎵 [bold]All Episodes Up To Date[/bold]", "green"

    console.print()
    console.print(
        Panel(
            grid,
            title=title,
            border_style=border,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )

    if stats.failures:
        failures = Table(title="Failed Episodes", box=box.SIMPLE)
        failures.add_column("Episode", style="cyan")
        failures.add_column("Stage", style="magenta")
        failures.add_column("Reason", style="red")
        for result in stats.failures:
            failures.add_row(
                escape(result.episode.filename),
                result.failure.value if result.failure else "",
                escape(result.error or ""),
            )
        console.print(failures)

    console.print()
