"""Per-file pipeline: ignore check, read, minify, write."""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path

from asset_minifier.core.errors import MinifyError
from asset_minifier.core.ignore import relative_posix
from asset_minifier.core.minifiers import AssetKind, minify_content
from asset_minifier.core.models import FileResult, FileStatus, MinifyOptions
from asset_minifier.core.planner import OutputPlan, ensure_parent_dir, plan

logger = logging.getLogger(__name__)

# Stale references left by a previous run, in line and block comment form
SOURCE_MAP_COMMENT_RE = re.compile(
    r"[ \t]*(?://[#@][ \t]*sourceMappingURL=[^\r\n]*|/\*[#@][ \t]*sourceMappingURL=.*?\*/)[ \t]*\r?\n?",
    re.DOTALL,
)


def strip_source_map_comments(content: str) -> str:
    """Remove embedded ``sourceMappingURL`` comments."""
    if "sourceMappingURL" not in content:
        return content
    return SOURCE_MAP_COMMENT_RE.sub("", content)


def byte_size(text: str) -> int:
    """Size of text once encoded as UTF-8."""
    return len(text.encode("utf-8"))


def plan_for(path: Path, options: MinifyOptions) -> OutputPlan:
    """Output plan for a file under the given options."""
    return plan(path, options.base_path, options.output_dir, options.source_map_dir)


def _write_outputs(plan_: OutputPlan, code: str, source_map: dict | None) -> None:
    # Output last; it may overwrite the source
    if source_map is not None:
        ensure_parent_dir(plan_.source_map_path)
        plan_.source_map_path.write_text(json.dumps(source_map), encoding="utf-8")
    ensure_parent_dir(plan_.output_path)
    plan_.output_path.write_bytes(code.encode("utf-8"))


def process_file(path: Path, options: MinifyOptions) -> FileResult:
    """
    Minify one file and record the outcome.

    Ignored files are not read. Minifier and I/O failures become an Error
    result; the source file is never modified unless it is also the output.

    Args:
        path: Absolute path of the file
        options: Options for this run

    Returns:
        FileResult describing what happened
    """
    display = relative_posix(path, options.base_path)

    if options.ignore_context.is_ignored(path):
        return FileResult(file_path=display, status=FileStatus.IGNORED)

    kind = AssetKind.from_path(path)
    if kind is AssetKind.UNSUPPORTED:
        return FileResult(file_path=display, status=FileStatus.SKIPPED)

    try:
        content = path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return FileResult(file_path=display, status=FileStatus.ERROR, error=f"Read failed: {e}")

    original_size = byte_size(content)
    output_plan = plan_for(path, options)

    try:
        asset = minify_content(
            kind,
            strip_source_map_comments(content),
            options,
            source_name=os.path.relpath(path, output_plan.source_map_path.parent).replace(os.sep, "/"),
            file_name=output_plan.output_path.name,
        )
    except MinifyError as e:
        return FileResult(
            file_path=display,
            status=FileStatus.ERROR,
            original_size=original_size,
            minified_size=original_size,
            error=str(e),
        )
    except Exception as e:
        logger.debug("Minifier crashed on %s", path, exc_info=True)
        return FileResult(
            file_path=display,
            status=FileStatus.ERROR,
            original_size=original_size,
            minified_size=original_size,
            error=f"{type(e).__name__}: {e}",
        )

    source_map = asset.source_map if options.source_map else None
    code = asset.code
    if source_map is not None:
        code += kind.source_map_comment(output_plan.source_map_url)

    minified_size = byte_size(code)
    if code == content:
        return FileResult(
            file_path=display,
            status=FileStatus.NO_CHANGE,
            original_size=original_size,
            minified_size=minified_size,
        )

    output_display = str(output_plan.output_path)
    if options.dry_run:
        return FileResult(
            file_path=display,
            status=FileStatus.DRY_RUN,
            original_size=original_size,
            minified_size=minified_size,
            output_file_path=output_display,
        )

    try:
        _write_outputs(output_plan, code, source_map)
    except OSError as e:
        return FileResult(
            file_path=display,
            status=FileStatus.ERROR,
            original_size=original_size,
            minified_size=original_size,
            error=f"Write failed: {e}",
        )

    return FileResult(
        file_path=display,
        status=FileStatus.MINIFIED,
        original_size=original_size,
        minified_size=minified_size,
        output_file_path=output_display,
        source_map_generated=source_map is not None,
    )
