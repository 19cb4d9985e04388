"""Directory traversal: discover candidate files and process them in order."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

from asset_minifier.core.ignore import IgnoreContext
from asset_minifier.core.minifiers import SUPPORTED_EXTENSIONS, AssetKind
from asset_minifier.core.models import FileResult, MinifyOptions
from asset_minifier.core.parallel import ParallelConfig, run_ordered
from asset_minifier.core.processor import plan_for, process_file

logger = logging.getLogger(__name__)

ResultCallback = Callable[[FileResult], None]


def _sorted_entries(
    directory: Path,
    scan_errors: list[str] | None,
) -> Iterator[os.DirEntry[str]]:
    """Directory entries in name order; unreadable directories yield nothing."""
    try:
        with os.scandir(directory) as entries:
            ordered = sorted(entries, key=lambda e: e.name)
    except OSError as e:
        logger.warning("Failed to read directory %s: %s", directory, e)
        if scan_errors is not None:
            scan_errors.append(f"{directory}: {e}")
        return iter(())
    return iter(ordered)


def collect_files(
    directory: Path,
    ignore: IgnoreContext,
    scan_errors: list[str] | None = None,
) -> list[Path]:
    """
    Find every supported file below a directory, in enumeration order.

    Ignored directories are pruned without being read. Ignored files are
    still returned so they can be reported. Files with other extensions
    and symlinked directories are skipped. Uses an explicit stack, so
    nesting depth is not limited by the recursion limit.

    Args:
        directory: Directory to walk
        ignore: Ignore patterns for this run
        scan_errors: List to append directory read errors to

    Returns:
        Paths of ``.js``, ``.css`` and ``.html`` files
    """
    if ignore.is_ignored(directory):
        return []

    files: list[Path] = []
    stack = [_sorted_entries(directory, scan_errors)]
    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue

        path = Path(entry.path)
        try:
            if entry.is_dir(follow_symlinks=False):
                if not ignore.is_ignored(path):
                    stack.append(_sorted_entries(path, scan_errors))
            elif entry.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS:
                files.append(path)
        except OSError as e:
            logger.warning("Failed to inspect %s: %s", path, e)
            if scan_errors is not None:
                scan_errors.append(f"{path}: {e}")

    return files


def _has_output_collisions(files: list[Path], options: MinifyOptions) -> bool:
    """True if two files would write the same output or source map path."""
    targets: list[Path] = []
    for path in files:
        planned = plan_for(path, options)
        targets.append(planned.output_path)
        if options.source_map and AssetKind.from_path(path) is AssetKind.JS:
            targets.append(planned.source_map_path)
    return len(set(targets)) != len(targets)


def traverse(
    directory: Path,
    options: MinifyOptions,
    *,
    on_result: ResultCallback | None = None,
    scan_errors: list[str] | None = None,
) -> list[FileResult]:
    """
    Minify every supported file below a directory.

    Results are returned in directory enumeration order, also when files
    are processed in parallel (``options.jobs > 1``). ``on_result`` sees
    each result as soon as it is ready.

    Args:
        directory: Directory to walk
        options: Options for this run
        on_result: Optional per-file callback
        scan_errors: List to append directory read errors to

    Returns:
        One FileResult per supported file
    """
    files = collect_files(directory, options.ignore_context, scan_errors)

    config = ParallelConfig(max_workers=options.jobs)
    if config.enabled and _has_output_collisions(files, options):
        logger.warning("Several files share an output path; processing sequentially")
        config = ParallelConfig(max_workers=1)

    def _done(_: int, result: FileResult) -> None:
        if on_result is not None:
            on_result(result)

    return run_ordered(lambda path: process_file(path, options), files, config, on_done=_done)
