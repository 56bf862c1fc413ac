"""Final analysis snapshot handed to reporting, export and generation."""

from __future__ import annotations

from dataclasses import dataclass, field

from context_pack.core.classifier import (
    LARGE_FILE_THRESHOLD,
    BloatFile,
    Classification,
    Suggestion,
    classify,
)
from context_pack.core.scanner import FileRecord, ScanResult
from context_pack.patterns import BLOAT_RULES


@dataclass(frozen=True)
class AnalysisResult:
    """Immutable analysis of one scan."""

    suggestions: tuple[Suggestion, ...]
    bloat_files: tuple[BloatFile, ...]
    large_files: tuple[FileRecord, ...]
    bloat_tokens: int
    clean_tokens: int
    total_tokens: int
    reduction_percent: int

    def is_bloat(self, rel_path: str) -> bool:
        """Check if a relative path was claimed by a bloat rule."""
        return any(b.rel_path == rel_path for b in self.bloat_files)


@dataclass
class CategoryStats:
    """Suggestion totals for one category."""

    token_savings: int = 0
    file_count: int = 0
    patterns: list[str] = field(default_factory=list)


def percent_of(part: int, whole: int) -> int:
    """Return part/whole as a whole percentage, rounding halves up; 0 if whole is 0."""
    if whole <= 0:
        return 0
    return (part * 200 + whole) // (whole * 2)


def assemble_result(classification: Classification, total_tokens: int) -> AnalysisResult:
    """
    Package a classification into an AnalysisResult.

    Args:
        classification: Output of classify
        total_tokens: Token total of the whole inventory

    Returns:
        AnalysisResult where total_tokens == bloat_tokens + clean_tokens
    """
    bloat_tokens = sum(b.tokens for b in classification.bloat_files)
    return AnalysisResult(
        suggestions=tuple(classification.suggestions),
        bloat_files=tuple(classification.bloat_files),
        large_files=tuple(classification.large_files),
        bloat_tokens=bloat_tokens,
        clean_tokens=total_tokens - bloat_tokens,
        total_tokens=total_tokens,
        reduction_percent=percent_of(bloat_tokens, total_tokens),
    )


def analyze(
    scan: ScanResult,
    large_file_threshold: int = LARGE_FILE_THRESHOLD,
) -> AnalysisResult:
    """Classify a scan's files and assemble the result."""
    classification = classify(
        scan.files, BLOAT_RULES, large_file_threshold=large_file_threshold
    )
    return assemble_result(classification, scan.total_tokens)


def category_breakdown(result: AnalysisResult) -> dict[str, CategoryStats]:
    """Group suggestions by category, keeping suggestion order."""
    breakdown: dict[str, CategoryStats] = {}
    for suggestion in result.suggestions:
        stats = breakdown.setdefault(suggestion.category, CategoryStats())
        stats.token_savings += suggestion.token_savings
        stats.file_count += suggestion.file_count
        stats.patterns.append(suggestion.pattern)
    return breakdown
