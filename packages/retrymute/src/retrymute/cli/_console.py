"""Shared console and formatting utilities."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

from retrymute.config import LogFormat, get_settings
from retrymute.logging import configure_logging

# Force colors unless explicitly disabled (NO_COLOR standard)
no_color = os.environ.get("NO_COLOR", "").lower() in ("1", "true", "yes")

console = Console(
    highlight=False,
    force_terminal=not no_color,
    no_color=no_color,
)


def success(msg: str) -> None:
    """Print success message."""
    console.print(f"  [green]✓[/green] {msg}")


def error(msg: str) -> None:
    """Print error message."""
    console.print(f"  [red]✗[/red] {msg}")


def info(msg: str) -> None:
    """Print info message."""
    console.print(f"  [dim]→[/dim] {msg}")


def nl() -> None:
    """Print newline."""
    console.print()


def setup_logging(verbose: bool = False) -> None:
    """Configure clean logging for the retrymute CLI.

    RETRYMUTE_LOG_FORMAT=json switches to structured logs; RETRYMUTE_DEBUG
    behaves like --verbose.
    """
    settings = get_settings()
    debug = verbose or settings.debug
    if settings.log_format == LogFormat.JSON:
        configure_logging(log_format=LogFormat.JSON, debug=debug)
        return

    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
        keywords=[],
    )

    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    logging.getLogger("retrymute").setLevel(level)
