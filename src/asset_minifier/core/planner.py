"""Output and source-map path planning."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

GLOB_CHARS = frozenset("*?[{")


@dataclass(frozen=True)
class OutputSpec:
    """Parsed ``--output-dir`` value."""

    root: Path
    extension: str | None = None
    malformed: bool = False

    @property
    def renames(self) -> bool:
        """True when produced files get a new extension."""
        return self.extension is not None


@dataclass(frozen=True)
class OutputPlan:
    """Where a minified file and its source map are written."""

    output_path: Path
    source_map_path: Path

    @property
    def source_map_url(self) -> str:
        """Map location relative to the output file's directory."""
        return source_map_url(self.source_map_path, self.output_path)


def _absolute(path: str | Path, start: Path | None = None) -> Path:
    """Absolute, normalized path without resolving symlinks."""
    start = start if start is not None else Path.cwd()
    return Path(os.path.normpath(os.path.join(start, path)))


def _has_glob(segment: str) -> bool:
    return any(char in GLOB_CHARS for char in segment)


def parse_output_dir(output_dir: str, cwd: Path | None = None) -> OutputSpec:
    """
    Split an output directory into its literal root and rename extension.

    ``dist`` keeps file names, ``dist/**/*.min.js`` writes ``<stem>.min.js``
    files under ``dist``. A starred last segment without an extension is
    marked ``malformed`` and falls back to the original file names.

    Args:
        output_dir: Directory or rename pattern from the command line
        cwd: Directory relative values are resolved against

    Returns:
        OutputSpec with the absolute root and optional new extension
    """
    return _parse_output_dir(output_dir, cwd if cwd is not None else Path.cwd())


@lru_cache(maxsize=32)
def _parse_output_dir(output_dir: str, cwd: Path) -> OutputSpec:
    segments = output_dir.replace("\\", "/").rstrip("/").split("/")
    last = segments[-1]
    if "*" not in last:
        return OutputSpec(root=_absolute(output_dir, cwd))

    root_segments: list[str] = []
    for segment in segments[:-1]:
        if _has_glob(segment):
            break
        root_segments.append(segment)
    root_text = "/".join(root_segments)
    if not root_text:
        root_text = "/" if output_dir.startswith("/") else "."
    root = _absolute(root_text, cwd)

    extension = last[1:]
    valid = last.startswith("*") and extension.startswith(".") and len(extension) > 1
    if valid and not _has_glob(extension):
        return OutputSpec(root=root, extension=extension)

    return OutputSpec(root=root, malformed=True)


def plan_output_path(
    input_file: Path,
    base_path: Path,
    output_dir: str | None,
    cwd: Path | None = None,
) -> Path:
    """
    Compute where the minified version of a file is written.

    Without an output directory the file is overwritten in place. Otherwise
    the file's subtree below base_path is replicated under the output root,
    with the extension swapped when a rename pattern is given.
    """
    if not output_dir:
        return input_file

    spec = parse_output_dir(output_dir, cwd)
    relative = Path(os.path.relpath(input_file, base_path))
    if not spec.renames:
        return spec.root / relative

    return spec.root / relative.parent / f"{input_file.stem}{spec.extension}"


def plan_source_map_path(
    input_file: Path,
    output_path: Path,
    source_map_dir: str | None = None,
) -> Path:
    """
    Compute where a source map is written.

    ``source_map_dir`` is resolved against the input file's directory;
    without it the map sits next to the output file.
    """
    if source_map_dir:
        map_dir = _absolute(source_map_dir, input_file.parent)
    else:
        map_dir = output_path.parent
    return map_dir / f"{output_path.name}.map"


def source_map_url(map_path: Path, output_path: Path) -> str:
    """Reference to the map from the output file, with forward slashes."""
    return os.path.relpath(map_path, output_path.parent).replace(os.sep, "/")


def plan(
    input_file: Path,
    base_path: Path,
    output_dir: str | None = None,
    source_map_dir: str | None = None,
    cwd: Path | None = None,
) -> OutputPlan:
    """Plan both the output file and its source map."""
    output_path = plan_output_path(input_file, base_path, output_dir, cwd)
    return OutputPlan(
        output_path=output_path,
        source_map_path=plan_source_map_path(input_file, output_path, source_map_dir),
    )


def ensure_parent_dir(path: Path) -> None:
    """Create all missing parent directories of a path."""
    path.parent.mkdir(parents=True, exist_ok=True)
