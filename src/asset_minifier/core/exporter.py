"""Export run results to JSON and CSV formats."""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Literal

from asset_minifier.core.models import FileResult, RunSummary, format_size

ExportFormat = Literal["json", "csv"]
VALID_EXPORT_FORMATS: tuple[ExportFormat, ...] = ("json", "csv")

CSV_FIELDS = [
    "file_path",
    "status",
    "original_size",
    "minified_size",
    "reduction",
    "reduction_percent",
    "output_file_path",
    "source_map_generated",
    "error",
]


def _result_to_dict(result: FileResult) -> dict[str, Any]:
    """Convert FileResult to serializable dict."""
    return {
        "file_path": result.file_path,
        "status": result.status.value,
        "original_size": result.original_size,
        "minified_size": result.minified_size,
        "reduction": result.reduction,
        "reduction_percent": round(result.reduction_percent, 2),
        "output_file_path": result.output_file_path,
        "source_map_generated": result.source_map_generated,
        "error": result.error,
    }


def summary_to_dict(summary: RunSummary) -> dict[str, Any]:
    """Convert RunSummary to serializable dict."""
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "root_path": str(summary.root_path),
        "file_count": len(summary.results),
        "total_original_bytes": summary.total_original,
        "total_minified_bytes": summary.total_minified,
        "total_reduction_bytes": summary.total_reduction,
        "total_reduction_human": format_size(summary.total_reduction),
        "total_reduction_percent": round(summary.total_reduction_percent, 2),
        "status_counts": {status.value: count for status, count in summary.status_counts.items()},
        "results": [_result_to_dict(r) for r in summary.results],
        "scan_errors": summary.scan_errors,
    }


def export_json(summary: RunSummary, output_path: Path, *, indent: int = 2) -> None:
    """
    Export run results to a JSON file.

    Args:
        summary: Run results to export
        output_path: Path to write JSON file
        indent: JSON indentation level (default: 2)
    """
    data = summary_to_dict(summary)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)


def export_csv(summary: RunSummary, output_path: Path) -> None:
    """Export run results to a CSV file, one row per file."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for result in summary.results:
            writer.writerow(_result_to_dict(result))


def export_result(
    summary: RunSummary,
    output_path: Path,
    format: ExportFormat = "json",
) -> None:
    """
    Export run results to file in specified format.

    Raises:
        ValueError: If format is not supported
    """
    if format == "json":
        export_json(summary, output_path)
    elif format == "csv":
        export_csv(summary, output_path)
    else:
        raise ValueError(f"Unsupported export format: {format}")
