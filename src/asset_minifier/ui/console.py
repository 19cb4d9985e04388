"""Rich console utilities for output formatting."""

from __future__ import annotations

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from asset_minifier import __version__


def create_console() -> Console:
    """Create a configured Rich console."""
    # Windows-specific console settings
    if platform.system() == "Windows":
        return Console(legacy_windows=True, emoji=False)
    return Console()


def configure_logging(console: Console, debug: bool = False) -> None:
    """Route library log records through the Rich console."""
    handler = RichHandler(console=console, show_time=False, show_path=debug, markup=False)
    root = logging.getLogger("asset_minifier")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if debug else logging.WARNING)
    root.propagate = False


def print_banner(console: Console) -> None:
    """Print the Asset Minifier banner."""
    banner_text = Text()
    banner_text.append("ASSET ", style="bold green")
    banner_text.append("MINIFIER", style="bold yellow")

    tagline = Text("Minify JavaScript, CSS, and HTML in place or into a build tree", style="dim italic")

    panel = Panel(
        Text.assemble(banner_text, "\n", tagline),
        border_style="blue",
        padding=(0, 2),
        subtitle=f"v{__version__}",
        subtitle_align="right",
    )

    console.print(panel)
    console.print()


def print_success(console: Console, message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_warning(console: Console, message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]{message}[/yellow]")


def print_error(console: Console, message: str) -> None:
    """Print an error message."""
    console.print(f"[red]{message}[/red]")
