"""Ignore pattern loading, merging, and per-path exclusion."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from asset_minifier.core.matcher import compile_patterns, normalize_path, spec_matches

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_FILE = ".minifierignore"

# Build and tool configuration files that should never be minified
DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    # Bundlers
    "**/webpack.config.{js,cjs,mjs}",
    "**/webpack.*.config.{js,cjs,mjs}",
    "**/rollup.config.{js,cjs,mjs}",
    "**/vite.config.{js,cjs,mjs}",
    "**/esbuild.config.{js,cjs,mjs}",
    "**/parcel.config.js",
    # Linters and formatters
    "**/.eslintrc.{js,cjs}",
    "**/eslint.config.{js,cjs,mjs}",
    "**/.prettierrc.{js,cjs}",
    "**/prettier.config.{js,cjs,mjs}",
    "**/.stylelintrc.{js,cjs}",
    "**/stylelint.config.{js,cjs,mjs}",
    # Transpilers and CSS tooling
    "**/babel.config.{js,cjs,mjs}",
    "**/.babelrc.{js,cjs}",
    "**/postcss.config.{js,cjs,mjs}",
    "**/tailwind.config.{js,cjs,mjs}",
    # Task runners
    "**/{gulpfile,Gulpfile}.js",
    "**/{gruntfile,Gruntfile}.js",
    # Test frameworks
    "**/jest.config.{js,cjs,mjs}",
    "**/karma.conf.js",
    "**/vitest.config.{js,cjs,mjs}",
    "**/playwright.config.js",
    "**/cypress.config.js",
    "**/.mocharc.{js,cjs}",
)


@dataclass(frozen=True)
class IgnoreContext:
    """Merged ignore patterns bound to the directory they are relative to."""

    base_path: Path
    patterns: tuple[str, ...] = ()

    def is_ignored(self, path: Path) -> bool:
        """Check whether a path is excluded by any pattern."""
        return is_ignored(path, self.patterns, self.base_path)


def relative_posix(path: Path | str, base_dir: Path | str) -> str:
    """Path relative to base_dir, with forward slashes."""
    return normalize_path(os.path.relpath(path, base_dir).replace(os.sep, "/"))


def is_ignored(path: Path | str, patterns: Iterable[str], base_dir: Path | str) -> bool:
    """
    Decide whether a path is excluded by the merged patterns.

    Patterns use gitignore glob syntax rooted at base_dir. A pattern naming
    a directory also covers everything beneath it, and a later ``!pattern``
    re-includes what an earlier one excluded. The base directory itself is
    never ignored.

    Args:
        path: Absolute path of the candidate file or directory
        patterns: Merged ignore patterns
        base_dir: Directory the patterns are relative to

    Returns:
        True if the path is ignored
    """
    relative = relative_posix(path, base_dir)
    if relative in ("", "."):
        return False

    return spec_matches(compile_patterns(tuple(patterns)), relative)


def parse_ignore_lines(text: str) -> list[str]:
    """Extract patterns from ignore-file text, skipping blanks and comments."""
    patterns = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        patterns.append(stripped)
    return patterns


def load_ignore_file(path: Path) -> list[str]:
    """
    Load patterns from an ignore file.

    A missing file yields no patterns. Any other read failure is logged
    and also yields no patterns.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read ignore file %s: %s", path, e)
        return []
    return parse_ignore_lines(text)


def split_cli_patterns(values: Iterable[str] | None) -> list[str]:
    """Flatten repeated and comma-separated ``--ignore`` values."""
    patterns: list[str] = []
    for value in values or []:
        for part in value.split(","):
            part = part.strip()
            if part:
                patterns.append(part)
    return patterns


def merge_patterns(*sources: Iterable[str]) -> tuple[str, ...]:
    """Concatenate pattern sources in order, dropping exact duplicates."""
    merged: list[str] = []
    seen: set[str] = set()
    for source in sources:
        for pattern in source:
            if pattern not in seen:
                seen.add(pattern)
                merged.append(pattern)
    return tuple(merged)


def build_ignore_patterns(
    base_path: Path,
    cli_patterns: Iterable[str] | None = None,
    ignore_path: Path | None = None,
) -> tuple[str, ...]:
    """
    Merge default, ignore-file, and command-line patterns.

    Args:
        base_path: Directory where the default ignore file is looked up
        cli_patterns: Raw ``--ignore`` values (repeatable, comma-separated)
        ignore_path: Explicit ignore file overriding the default location

    Returns:
        Merged patterns: defaults, then file patterns, then CLI patterns
    """
    ignore_file = ignore_path if ignore_path is not None else base_path / DEFAULT_IGNORE_FILE
    file_patterns = load_ignore_file(ignore_file)
    if file_patterns:
        logger.debug("Loaded %d ignore patterns from %s", len(file_patterns), ignore_file)
    return merge_patterns(
        DEFAULT_IGNORE_PATTERNS,
        file_patterns,
        split_cli_patterns(cli_patterns),
    )
