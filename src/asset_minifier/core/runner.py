"""Top-level run orchestration: target resolution, options, progress output."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn

from asset_minifier.core.errors import InvalidTargetError, TargetNotFoundError
from asset_minifier.core.ignore import build_ignore_patterns, merge_patterns, relative_posix
from asset_minifier.core.models import FileResult, FileStatus, HtmlOptions, MinifyOptions, RunSummary
from asset_minifier.core.planner import parse_output_dir
from asset_minifier.core.processor import process_file
from asset_minifier.core.walker import traverse

logger = logging.getLogger(__name__)

STATUS_STYLES: dict[FileStatus, str] = {
    FileStatus.MINIFIED: "green",
    FileStatus.DRY_RUN: "cyan",
    FileStatus.NO_CHANGE: "dim",
    FileStatus.IGNORED: "dim",
    FileStatus.SKIPPED: "dim",
    FileStatus.ERROR: "red",
}


def resolve_target(path: Path, cwd: Path | None = None) -> tuple[Path, Path]:
    """
    Resolve the command-line path to (target, base_path).

    For a directory the base path is the directory itself; for a file it
    is the file's parent.

    Raises:
        TargetNotFoundError: If the path does not exist
        InvalidTargetError: If the path is neither a file nor a directory
    """
    cwd = cwd if cwd is not None else Path.cwd()
    target = Path(os.path.normpath(os.path.join(cwd, path)))
    if not target.exists():
        raise TargetNotFoundError(path)
    if target.is_dir():
        return target, target
    if target.is_file():
        return target, target.parent
    raise InvalidTargetError(path)


def output_exclusions(base_path: Path, output_dir: str | None, cwd: Path | None = None) -> list[str]:
    """
    Ignore patterns keeping a run from picking up its own output.

    A literal output directory inside the base path is excluded as a whole.
    A rename pattern writing into the base path excludes files with the new
    extension below its root.
    """
    if not output_dir:
        return []

    spec = parse_output_dir(output_dir, cwd)
    relative = relative_posix(spec.root, base_path)
    if relative == ".." or relative.startswith("../") or os.path.isabs(relative):
        return []

    if spec.renames:
        prefix = "" if relative == "." else f"{relative}/"
        return [f"{prefix}**/*{spec.extension}"]
    if relative == ".":
        return []
    return [f"{relative}/"]


def build_options(
    base_path: Path,
    *,
    ignore: Iterable[str] | None = None,
    ignore_path: Path | None = None,
    output_dir: str | None = None,
    html: HtmlOptions | None = None,
    drop_console: bool = False,
    mangle: bool = True,
    source_map: bool = False,
    source_map_dir: str | None = None,
    dry_run: bool = False,
    verbose: bool = True,
    jobs: int = 1,
    cwd: Path | None = None,
) -> MinifyOptions:
    """
    Build the options for one run.

    Merges the default, ignore-file, and command-line ignore patterns and
    excludes the output location. Relative output directories are made
    absolute here so later working-directory changes do not move them.
    """
    if output_dir and parse_output_dir(output_dir, cwd).malformed:
        logger.warning(
            "Output pattern %r has no recognizable extension; keeping original file names",
            output_dir,
        )
    patterns = merge_patterns(
        build_ignore_patterns(base_path, ignore, ignore_path),
        output_exclusions(base_path, output_dir, cwd),
    )
    if output_dir and not os.path.isabs(output_dir):
        output_dir = os.path.join(cwd if cwd is not None else Path.cwd(), output_dir)
    return MinifyOptions(
        base_path=base_path,
        ignore_patterns=patterns,
        output_dir=output_dir or None,
        html=html or HtmlOptions(),
        drop_console=drop_console,
        mangle=mangle,
        source_map=source_map,
        source_map_dir=source_map_dir or None,
        dry_run=dry_run,
        verbose=verbose,
        jobs=jobs,
    )


class Minifier:
    """Runs minification over a file or directory with console reporting."""

    def __init__(self, options: MinifyOptions, console: Console | None = None):
        self.options = options
        self.console = console or Console()

    def run(self, target: Path) -> RunSummary:
        """
        Minify a single file or every supported file below a directory.

        Args:
            target: Absolute path of the file or directory

        Returns:
            RunSummary with one result per processed file
        """
        summary = RunSummary(root_path=target)

        if target.is_file():
            result = process_file(target, self.options)
            self._report(result)
            summary.results.append(result)
            return summary

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task("Minifying...", total=None)

            def _on_result(result: FileResult) -> None:
                progress.update(task, description=f"Minifying: {result.file_path[-40:]}")
                self._report(result)

            summary.results = traverse(
                target,
                self.options,
                on_result=_on_result,
                scan_errors=summary.scan_errors,
            )

        return summary

    def _report(self, result: FileResult) -> None:
        """Print one line for a finished file."""
        if result.status.is_quiet and not self.options.verbose:
            return

        style = STATUS_STYLES[result.status]
        line = f"[{style}]{escape(result.status.value)}:[/{style}] {escape(result.file_path)}"
        if result.status in (FileStatus.MINIFIED, FileStatus.DRY_RUN):
            line += f" [dim]({result.reduction_percent:.1f}% smaller)[/dim]"
        if result.error:
            line += f" [red]- {escape(result.error)}[/red]"
        self.console.print(line)
