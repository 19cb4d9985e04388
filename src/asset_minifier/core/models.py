"""Options and result types shared by the minification pipeline."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from asset_minifier.core.ignore import IgnoreContext


class FileStatus(str, Enum):
    """Outcome of processing a single file."""

    SKIPPED = "Skipped"
    IGNORED = "Ignored"
    MINIFIED = "Minified"
    DRY_RUN = "[DRY RUN] Minified"
    NO_CHANGE = "No Change"
    ERROR = "Error"

    @property
    def is_quiet(self) -> bool:
        """Statuses only reported when running verbose."""
        return self in (FileStatus.SKIPPED, FileStatus.IGNORED, FileStatus.NO_CHANGE)


@dataclass(frozen=True)
class HtmlOptions:
    """Sub-behaviors of the HTML minifier."""

    collapse_whitespace: bool = True
    remove_comments: bool = True
    remove_redundant_attributes: bool = True
    use_short_doctype: bool = True
    minify_css: bool = True
    minify_js: bool = True


@dataclass(frozen=True)
class MinifyOptions:
    """Settings for one invocation, built once before traversal."""

    base_path: Path
    drop_console: bool = False
    mangle: bool = True
    html: HtmlOptions = field(default_factory=HtmlOptions)
    source_map: bool = False
    source_map_dir: str | None = None
    output_dir: str | None = None
    dry_run: bool = False
    verbose: bool = True
    ignore_patterns: tuple[str, ...] = ()
    jobs: int = 1

    @property
    def ignore_context(self) -> IgnoreContext:
        """Ignore patterns bound to the base path."""
        return IgnoreContext(base_path=self.base_path, patterns=self.ignore_patterns)


@dataclass(frozen=True)
class FileResult:
    """Result of processing one candidate file."""

    file_path: str
    status: FileStatus
    original_size: int = 0
    minified_size: int = 0
    output_file_path: str | None = None
    source_map_generated: bool = False
    error: str | None = None

    @property
    def reduction(self) -> int:
        """Bytes saved by minification."""
        return self.original_size - self.minified_size

    @property
    def reduction_percent(self) -> float:
        """Reduction as a percentage of the original size."""
        if self.original_size == 0:
            return 0.0
        return self.reduction / self.original_size * 100


@dataclass
class RunSummary:
    """Results of a whole minification run."""

    root_path: Path
    results: list[FileResult] = field(default_factory=list)
    scan_errors: list[str] = field(default_factory=list)

    @property
    def total_original(self) -> int:
        return sum(r.original_size for r in self.results)

    @property
    def total_minified(self) -> int:
        return sum(r.minified_size for r in self.results)

    @property
    def total_reduction(self) -> int:
        return self.total_original - self.total_minified

    @property
    def total_reduction_percent(self) -> float:
        if self.total_original == 0:
            return 0.0
        return self.total_reduction / self.total_original * 100

    @property
    def status_counts(self) -> Counter[FileStatus]:
        """Number of results per status."""
        return Counter(r.status for r in self.results)

    @property
    def error_count(self) -> int:
        return self.status_counts[FileStatus.ERROR]


def format_size(size_bytes: int) -> str:
    """Convert bytes to human-readable format."""
    size = float(size_bytes)
    sign = "-" if size < 0 else ""
    size = abs(size)
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{sign}{size:.1f} {unit}"
        size /= 1024
    return f"{sign}{size:.1f} TB"
