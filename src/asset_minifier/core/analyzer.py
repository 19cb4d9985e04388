"""Summary rendering for minification runs."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from asset_minifier.core.models import FileStatus, RunSummary, format_size


class Analyzer:
    """Displays the results of a minification run."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def display_results(self, summary: RunSummary, show_all: bool = True) -> None:
        """Display per-file results and totals in a formatted table."""
        if not summary.results:
            self.console.print("[yellow]No JavaScript, CSS, or HTML files found.[/yellow]")
            return

        counts = summary.status_counts
        lines = [
            f"[bold]Files:[/bold] {len(summary.results)}",
            f"[bold]Original:[/bold] {format_size(summary.total_original)}",
            f"[bold]Minified:[/bold] {format_size(summary.total_minified)}",
            f"[bold]Saved:[/bold] {format_size(summary.total_reduction)} "
            f"({summary.total_reduction_percent:.1f}%)",
        ]
        breakdown = ", ".join(f"{status.value}: {count}" for status, count in counts.items())
        lines.append(f"[bold]Status:[/bold] {escape(breakdown)}")
        self.console.print(Panel("\n".join(lines), title="Minification Summary", border_style="blue"))
        self.console.print()

        table = Table(
            title="Minified Files",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("#", style="dim", width=4)
        table.add_column("File", style="white", overflow="fold")
        table.add_column("Status", width=20)
        table.add_column("Original", justify="right", style="cyan")
        table.add_column("Minified", justify="right", style="cyan")
        table.add_column("Reduction", justify="right", style="green")
        table.add_column("Error", style="red", overflow="fold")

        results = summary.results
        if not show_all:
            results = [r for r in results if not r.status.is_quiet]

        for i, result in enumerate(results, 1):
            processed = result.status not in (FileStatus.IGNORED, FileStatus.SKIPPED)
            table.add_row(
                str(i),
                escape(result.file_path),
                escape(result.status.value),
                format_size(result.original_size) if processed else "-",
                format_size(result.minified_size) if processed else "-",
                f"{result.reduction_percent:.1f}%" if processed else "-",
                escape(result.error or ""),
            )

        table.add_section()
        table.add_row(
            "",
            "[bold]Total[/bold]",
            "",
            format_size(summary.total_original),
            format_size(summary.total_minified),
            f"{summary.total_reduction_percent:.1f}%",
            "",
        )
        self.console.print(table)

        if summary.scan_errors:
            self.console.print(
                f"\n[yellow]Skipped {len(summary.scan_errors)} directories due to errors.[/yellow]"
            )

    def display_dry_run_notice(self) -> None:
        """Explain that nothing was written."""
        self.console.print("\n[yellow]Dry run mode - no files were written.[/yellow]")
        self.console.print("[dim]Run without --dry-run to write minified files.[/dim]")
