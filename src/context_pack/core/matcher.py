"""Ignore-file parsing and gitignore-style path matching.

Only a practical subset of the gitignore grammar is understood:

- ``name`` or ``*.ext`` (no slash) matches any path segment
- ``**/rest`` matches ``rest`` at any depth
- ``dir/*`` matches direct children of ``dir``
- ``dir/**`` matches ``dir`` and everything below it
- anything else matches the exact path or anything below it

A trailing ``/`` only marks a directory and is dropped before matching.
Negation (``!``), leading-slash anchoring and escapes are not supported.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

# Always applied, ahead of any ignore file
DEFAULT_IGNORE: tuple[str, ...] = (
    ".git",
    ".DS_Store",
    "Thumbs.db",
)


def parse_ignore_file(path: Path) -> list[str]:
    """
    Read an ignore file into a list of rules.

    Blank lines and lines starting with '#' are skipped; every other line
    is stripped of surrounding whitespace.

    Args:
        path: Ignore file to read

    Returns:
        List of rules, empty if the file is missing or unreadable
    """
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("No rules loaded from %s: %s", path, e)
        return []

    rules = []
    for line in content.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            rules.append(line)
    return rules


@lru_cache(maxsize=512)
def _segment_regex(pattern: str) -> re.Pattern[str]:
    """Compile a single-segment wildcard where '*' stays within the segment."""
    escaped = re.escape(pattern).replace(r"\*", "[^/]*")
    return re.compile(escaped)


def match_segment(segment: str, pattern: str) -> bool:
    """Check one path segment against a rule that contains no '/'."""
    if pattern == "*":
        return True
    if "*" not in pattern:
        return segment == pattern
    return _segment_regex(pattern).fullmatch(segment) is not None


def matches_pattern(rel_path: str, pattern: str) -> bool:
    """
    Check if a relative path matches a single ignore rule.

    Args:
        rel_path: Path relative to the scan root
        pattern: Raw rule from an ignore file

    Returns:
        True if the rule covers the path
    """
    path = rel_path.replace("\\", "/")
    rule = pattern.replace("\\", "/")
    if len(rule) > 1 and rule.endswith("/") and not rule.endswith("//"):
        rule = rule[:-1]

    if "/" not in rule:
        return any(match_segment(part, rule) for part in path.split("/"))

    if rule.startswith("**/"):
        rest = rule[3:]
        return path.endswith(rest) or f"/{rest}" in path

    if rule.endswith("/**"):
        prefix = rule[:-3]
        return path == prefix or path.startswith(prefix + "/")

    if rule.endswith("/*"):
        prefix = rule[:-2]
        if not path.startswith(prefix + "/"):
            return False
        return "/" not in path[len(prefix) + 1:]

    return path == rule or path.startswith(rule + "/")


def is_ignored(rel_path: str, rules: Iterable[str]) -> bool:
    """Check if any rule matches the relative path."""
    return any(matches_pattern(rel_path, rule) for rule in rules)
