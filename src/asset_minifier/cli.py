"""Asset Minifier CLI - Main entry point."""

from __future__ import annotations

from pathlib import Path
from typing import TypeVar, cast

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from asset_minifier import __version__
from asset_minifier.config import (
    DEFAULT_CONFIG_TEMPLATE,
    SECTION_TYPES,
    Config,
    get_config_paths,
    load_config,
    load_config_from_file,
)
from asset_minifier.core.analyzer import Analyzer
from asset_minifier.core.errors import MinifierError
from asset_minifier.core.exporter import VALID_EXPORT_FORMATS, ExportFormat, export_result
from asset_minifier.core.models import HtmlOptions
from asset_minifier.core.runner import Minifier, build_options, resolve_target
from asset_minifier.ui.console import (
    configure_logging,
    create_console,
    print_banner,
    print_error,
    print_success,
    print_warning,
)

app = typer.Typer(
    name="minifier",
    help="Minify .js, .css, and .html files recursively in a directory.",
    no_args_is_help=True,
)
console = create_console()

T = TypeVar("T")


class State:
    """Global state container for CLI."""

    def __init__(self) -> None:
        self.config: Config = Config()  # Default until loaded


state = State()


def _pick(cli_value: T | None, config_value: T) -> T:
    """Command-line value if given, otherwise the configured one."""
    return config_value if cli_value is None else cli_value


def _print_config_locations(xdg_path: Path, cwd_path: Path, *, verbose: bool = False) -> None:
    """Print config file locations and their status.

    Args:
        xdg_path: Path to the global XDG config file.
        cwd_path: Path to the local CWD config file.
        verbose: If True, use detailed format with spacing (for config_path).
                 If False, use compact format (for config_show).
    """
    if verbose:
        console.print("[bold]Config file locations:[/bold]\n")

        xdg_status = "[green]exists[/green]" if xdg_path.exists() else "[dim]not found[/dim]"
        console.print(f"  Global (XDG): {xdg_path}")
        console.print(f"                {xdg_status}\n")

        cwd_status = (
            "[green]exists (overrides global)[/green]"
            if cwd_path.exists()
            else "[dim]not found[/dim]"
        )
        console.print(f"  Local (CWD):  {cwd_path}")
        console.print(f"                {cwd_status}")
    else:
        console.print("\n[bold]Config locations:[/bold]")
        xdg_status = "[green]exists[/green]" if xdg_path.exists() else "[dim]not found[/dim]"
        console.print(f"  Global: {xdg_path} ({xdg_status})")

        cwd_status = "[green]exists[/green]" if cwd_path.exists() else "[dim]not found[/dim]"
        console.print(f"  Local:  {cwd_path} ({cwd_status})")


@app.command()
def minify(
    path: Path = typer.Argument(..., help="The path to the directory or file to minify."),
    drop_console: bool | None = typer.Option(
        None,
        "--drop-console/--keep-console",
        "-d",
        help="Drop console.* statements in JavaScript (default: keep)",
    ),
    mangle: bool | None = typer.Option(
        None,
        "--mangle/--no-mangle",
        "-m",
        help="Mangle local variable and function names in JavaScript (default: mangle)",
    ),
    collapse_whitespace: bool | None = typer.Option(
        None,
        "--collapse-whitespace/--no-collapse-whitespace",
        help="Collapse whitespace in HTML",
    ),
    remove_comments: bool | None = typer.Option(
        None,
        "--remove-comments/--no-remove-comments",
        help="Remove comments in HTML",
    ),
    remove_redundant_attributes: bool | None = typer.Option(
        None,
        "--remove-redundant-attributes/--no-remove-redundant-attributes",
        help="Remove redundant attributes in HTML",
    ),
    use_short_doctype: bool | None = typer.Option(
        None,
        "--use-short-doctype/--no-use-short-doctype",
        help="Replace the doctype with the short HTML5 doctype",
    ),
    minify_css: bool | None = typer.Option(
        None,
        "--minify-css/--no-minify-css",
        help="Minify CSS in <style> tags within HTML",
    ),
    minify_js: bool | None = typer.Option(
        None,
        "--minify-js/--no-minify-js",
        help="Minify JS in <script> tags within HTML",
    ),
    ignore: list[str] | None = typer.Option(
        None,
        "--ignore",
        "-i",
        help="Glob pattern to ignore (repeatable, comma-separated)",
    ),
    ignore_path: Path | None = typer.Option(
        None,
        "--ignore-path",
        help="Ignore file to use instead of .minifierignore in the target directory",
    ),
    source_map: bool | None = typer.Option(
        None,
        "--source-map/--no-source-map",
        help="Write source maps for JavaScript",
    ),
    source_map_dir: str | None = typer.Option(
        None,
        "--source-map-dir",
        help="Directory for source maps, relative to each source file",
    ),
    output_dir: str | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Write into this directory instead of overwriting (e.g. dist or 'dist/**/*.min.js')",
    ),
    dry_run: bool | None = typer.Option(
        None,
        "--dry-run/--no-dry-run",
        "-n",
        help="Report what would change without writing anything",
    ),
    verbose: bool | None = typer.Option(
        None,
        "--verbose/--quiet",
        help="Also report ignored and unchanged files (default: verbose)",
    ),
    jobs: int | None = typer.Option(
        None,
        "--jobs",
        "-j",
        min=1,
        help="Number of files minified in parallel",
    ),
    export: Path | None = typer.Option(
        None,
        "--export",
        "-e",
        help="Write results to a JSON or CSV file",
    ),
    export_format: str = typer.Option(
        "json",
        "--format",
        "-f",
        help="Export format: json, csv",
    ),
) -> None:
    """Minify .js, .css, and .html files in a file or directory tree."""
    print_banner(console)

    if export_format not in VALID_EXPORT_FORMATS:
        print_error(console, f"Invalid export format: {export_format}")
        console.print(f"[dim]Valid options: {', '.join(VALID_EXPORT_FORMATS)}[/dim]")
        raise typer.Exit(1)

    try:
        target, base_path = resolve_target(path)
    except MinifierError as e:
        print_error(console, f"Error: {escape(str(e))}")
        raise typer.Exit(1) from e

    config = state.config
    configured_ignore_path = config.ignore.ignore_path or None
    html = HtmlOptions(
        collapse_whitespace=_pick(collapse_whitespace, config.html.collapse_whitespace),
        remove_comments=_pick(remove_comments, config.html.remove_comments),
        remove_redundant_attributes=_pick(
            remove_redundant_attributes, config.html.remove_redundant_attributes
        ),
        use_short_doctype=_pick(use_short_doctype, config.html.use_short_doctype),
        minify_css=_pick(minify_css, config.html.minify_css),
        minify_js=_pick(minify_js, config.html.minify_js),
    )
    options = build_options(
        base_path,
        ignore=[*config.ignore.patterns, *(ignore or [])],
        ignore_path=_pick(ignore_path, Path(configured_ignore_path) if configured_ignore_path else None),
        output_dir=_pick(output_dir, config.output.output_dir or None),
        html=html,
        drop_console=_pick(drop_console, config.js.drop_console),
        mangle=_pick(mangle, config.js.mangle),
        source_map=_pick(source_map, config.output.source_map),
        source_map_dir=_pick(source_map_dir, config.output.source_map_dir or None),
        dry_run=_pick(dry_run, config.defaults.dry_run),
        verbose=_pick(verbose, config.defaults.verbose),
        jobs=_pick(jobs, config.defaults.jobs),
    )

    console.print(f"[dim]Targeting path: {escape(str(target))}[/dim]")
    if options.output_dir:
        console.print(f"[dim]Output: {escape(options.output_dir)}[/dim]")
    console.print()

    summary = Minifier(options, console=console).run(target)

    console.print()
    analyzer = Analyzer(console=console)
    analyzer.display_results(summary, show_all=options.verbose)

    if summary.error_count:
        print_warning(console, f"\n{summary.error_count} file(s) could not be minified.")

    if options.dry_run:
        analyzer.display_dry_run_notice()

    if export:
        try:
            export_result(summary, export, cast(ExportFormat, export_format))
        except OSError as e:
            print_error(console, f"Could not write export file {export}: {e}")
            raise typer.Exit(1) from e
        print_success(console, f"Exported results to {export}")

    console.print("\n[bold]Minification complete.[/bold]")


# Config subcommand group
config_app = typer.Typer(
    name="config",
    help="Manage Asset Minifier configuration.",
    no_args_is_help=True,
)
app.add_typer(config_app)


@config_app.command("init")
def config_init(
    global_config: bool = typer.Option(
        True,
        "--global/--local",
        help="Create in XDG config (--global) or current directory (--local)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing config file",
    ),
) -> None:
    """Generate a default configuration file with comments."""
    xdg_path, cwd_path = get_config_paths()
    target = xdg_path if global_config else cwd_path

    if target.exists() and not force:
        console.print(f"[yellow]Config already exists: {target}[/yellow]")
        console.print("[dim]Use --force to overwrite[/dim]")
        raise typer.Exit(1)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Permission denied: {target}[/red]")
        console.print(f"[dim]Check write permissions for {target.parent}[/dim]")
        raise typer.Exit(1) from e

    location = "global" if global_config else "local"
    console.print(f"[green]Created {location} config:[/green] {target}")


@config_app.command("show")
def config_show(
    resolved: bool = typer.Option(
        True,
        "--resolved/--raw",
        help="Show merged config (--resolved) or raw file (--raw)",
    ),
) -> None:
    """Display the active configuration and its source."""
    config = state.config
    xdg_path, cwd_path = get_config_paths()

    source_text = str(config._source) if config._source else "[dim]defaults only[/dim]"
    console.print(
        Panel.fit(
            f"[bold]Active config:[/bold] {source_text}",
            title="Configuration Source",
        )
    )

    if resolved:
        table = Table(title="Resolved Configuration", show_header=True)
        table.add_column("Section", style="cyan")
        table.add_column("Key", style="green")
        table.add_column("Value")

        for section_name in SECTION_TYPES:
            section = getattr(config, section_name)
            for key, value in vars(section).items():
                if not key.startswith("_"):
                    table.add_row(section_name, key, escape(str(value)))

        console.print(table)
    else:
        if config._source and config._source.exists():
            console.print(escape(config._source.read_text(encoding="utf-8")))
        else:
            console.print("[dim]No config file found[/dim]")

    _print_config_locations(xdg_path, cwd_path, verbose=False)


@config_app.command("path")
def config_path() -> None:
    """Show configuration file locations and status."""
    xdg_path, cwd_path = get_config_paths()
    _print_config_locations(xdg_path, cwd_path, verbose=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"Asset Minifier v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (overrides default locations)",
        exists=True,
        readable=True,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Show diagnostic log messages",
    ),
) -> None:
    """Asset Minifier - minify JavaScript, CSS, and HTML assets."""
    configure_logging(console, debug=debug)

    # Load config (custom file or default locations)
    try:
        if config_file:
            state.config = load_config_from_file(config_file)
        else:
            state.config = load_config()
    except ValueError as e:
        console.print(f"[red]Config error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e


if __name__ == "__main__":
    app()
