"""Export analysis results to JSON and CSV formats."""

from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from context_pack.core.classifier import Suggestion
    from context_pack.core.results import AnalysisResult
    from context_pack.core.scanner import FileRecord, ScanResult

ExportFormat = Literal["json", "csv"]

SUGGESTION_FIELDS = [
    "pattern",
    "category",
    "priority",
    "reason",
    "token_savings",
    "file_count",
]


def _suggestion_to_dict(suggestion: Suggestion) -> dict[str, Any]:
    """Convert Suggestion to serializable dict."""
    return {name: getattr(suggestion, name) for name in SUGGESTION_FIELDS}


def _file_to_dict(file: FileRecord) -> dict[str, Any]:
    """Convert FileRecord to serializable dict."""
    return {
        "path": file.rel_path,
        "size_bytes": file.size_bytes,
        "tokens": file.tokens,
        "is_binary": file.is_binary,
    }


def result_to_dict(scan: ScanResult, result: AnalysisResult) -> dict[str, Any]:
    """Convert a scan and its analysis to a serializable dict."""
    return {
        "type": "analysis",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "root_path": str(scan.root_path),
        "files_scanned": len(scan.files),
        "ignored_count": scan.ignored_count,
        "binary_count": scan.binary_count,
        "total_size_bytes": scan.total_size,
        "total_tokens": result.total_tokens,
        "bloat_tokens": result.bloat_tokens,
        "clean_tokens": result.clean_tokens,
        "reduction_percent": result.reduction_percent,
        "suggestions": [_suggestion_to_dict(s) for s in result.suggestions],
        "large_files": [_file_to_dict(f) for f in result.large_files],
        "bloat_files": [
            {**_file_to_dict(b.file), "category": b.category}
            for b in result.bloat_files
        ],
        "scan_errors": scan.scan_errors,
    }


def export_json(
    scan: ScanResult,
    result: AnalysisResult,
    output_path: Path,
    *,
    indent: int = 2,
) -> None:
    """
    Export an analysis to a JSON file.

    Args:
        scan: Scan the analysis was built from
        result: Analysis to export
        output_path: Path to write JSON file
        indent: JSON indentation level (default: 2)
    """
    data = result_to_dict(scan, result)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)


def export_csv(result: AnalysisResult, output_path: Path) -> None:
    """Export suggestions to a CSV file, one row per suggestion."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=SUGGESTION_FIELDS)
        writer.writeheader()
        for suggestion in result.suggestions:
            writer.writerow(_suggestion_to_dict(suggestion))


def export_result(
    scan: ScanResult,
    result: AnalysisResult,
    output_path: Path,
    format: ExportFormat = "json",
) -> None:
    """
    Export an analysis to file in the specified format.

    Raises:
        ValueError: If format is not supported
    """
    if format == "json":
        export_json(scan, result, output_path)
    elif format == "csv":
        export_csv(result, output_path)
    else:
        raise ValueError(f"Unsupported export format: {format}")
