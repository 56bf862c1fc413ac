"""Bloat classification and per-rule aggregation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from context_pack.core.scanner import FileRecord
from context_pack.patterns import BLOAT_RULES, PRIORITY_ORDER, BloatRule, Priority

# Unclaimed text files above this size are listed for manual review
LARGE_FILE_THRESHOLD = 10 * 1024

# Cap on the large-file list
MAX_LARGE_FILES = 20


@dataclass(frozen=True)
class Suggestion:
    """One ignore recommendation, aggregated over every file a rule claimed."""

    pattern: str
    category: str
    priority: Priority
    reason: str
    token_savings: int
    file_count: int


@dataclass(frozen=True)
class BloatFile:
    """A file claimed by a bloat rule."""

    file: FileRecord
    category: str
    reason: str

    @property
    def rel_path(self) -> str:
        return self.file.rel_path

    @property
    def tokens(self) -> int:
        return self.file.tokens


@dataclass
class _Tally:
    """Running totals for one rule while classifying."""

    rule: BloatRule
    order: int
    pattern: str
    token_savings: int = 0
    file_count: int = 0


@dataclass
class Classification:
    """Output of classify: bloat, suggestions and large files."""

    bloat_files: list[BloatFile] = field(default_factory=list)
    suggestions: list[Suggestion] = field(default_factory=list)
    large_files: list[FileRecord] = field(default_factory=list)


def match_rule(rel_path: str, rules: Sequence[BloatRule]) -> tuple[int, BloatRule] | None:
    """Return the index and rule of the first rule matching the path."""
    for index, rule in enumerate(rules):
        if rule.matches(rel_path):
            return index, rule
    return None


def classify(
    files: Iterable[FileRecord],
    rules: Sequence[BloatRule] = BLOAT_RULES,
    large_file_threshold: int = LARGE_FILE_THRESHOLD,
) -> Classification:
    """
    Tag files with bloat categories and aggregate suggestions per rule.

    Args:
        files: File inventory from a walk
        rules: Ordered rule table; the first match wins
        large_file_threshold: Byte size above which unclaimed text files
            are reported as large

    Returns:
        Classification with suggestions sorted by priority tier, then by
        descending token savings
    """
    result = Classification()
    tallies: dict[int, _Tally] = {}
    large: list[FileRecord] = []

    for file in files:
        matched = match_rule(file.rel_path, rules)
        if matched is None:
            if not file.is_binary and file.size_bytes > large_file_threshold:
                large.append(file)
            continue

        index, rule = matched
        tally = tallies.get(index)
        if tally is None:
            tally = _Tally(rule=rule, order=index, pattern=rule.display_pattern(file.rel_path))
            tallies[index] = tally
        tally.token_savings += file.tokens
        tally.file_count += 1
        result.bloat_files.append(BloatFile(file=file, category=rule.category, reason=rule.reason))

    ordered = sorted(
        tallies.values(),
        key=lambda t: (PRIORITY_ORDER[t.rule.priority], -t.token_savings, t.order),
    )
    result.suggestions = [
        Suggestion(
            pattern=t.pattern,
            category=t.rule.category,
            priority=t.rule.priority,
            reason=t.rule.reason,
            token_savings=t.token_savings,
            file_count=t.file_count,
        )
        for t in ordered
    ]

    large.sort(key=lambda f: (-f.tokens, f.rel_path))
    result.large_files = large[:MAX_LARGE_FILES]
    return result
