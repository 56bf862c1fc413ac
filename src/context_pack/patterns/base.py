"""Base bloat rule definition."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

Priority = Literal["critical", "high", "medium", "low"]

# Lower index sorts first
PRIORITY_ORDER: dict[str, int] = {"critical": 0, "high": 1, "medium": 2, "low": 3}

# A rule whose whole regex is "\.ext$" is rendered as "*.ext"
_EXTENSION_RULE = re.compile(r"\\\.(\w+)\$")


@dataclass(frozen=True)
class BloatRule:
    """Definition of a kind of generated or noise content."""

    pattern: re.Pattern[str]  # Searched against the '/'-separated relative path
    category: str
    reason: str
    priority: Priority

    def matches(self, rel_path: str) -> bool:
        """Check if a relative path matches this rule."""
        return self.pattern.search(rel_path) is not None

    @property
    def extension(self) -> str | None:
        """Return the extension for extension-only rules, else None."""
        match = _EXTENSION_RULE.fullmatch(self.pattern.pattern)
        return match.group(1) if match else None

    def display_pattern(self, rel_path: str) -> str:
        """
        Derive the ignore-file pattern shown for this rule.

        Args:
            rel_path: Relative path of the first file the rule matched

        Returns:
            "*.ext" for extension rules, otherwise the top-level segment of
            the path, with a trailing "/" when the file sits below it
        """
        ext = self.extension
        if ext:
            return f"*.{ext}"
        parts = rel_path.split("/")
        return parts[0] + ("/" if len(parts) > 1 else "")


def rule(regex: str, category: str, reason: str, priority: Priority) -> BloatRule:
    """Build a BloatRule from a regex source string."""
    return BloatRule(
        pattern=re.compile(regex),
        category=category,
        reason=reason,
        priority=priority,
    )
