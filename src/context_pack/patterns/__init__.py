"""Bloat rule definitions, in the order they are evaluated."""

from __future__ import annotations

from .base import PRIORITY_ORDER, BloatRule, Priority
from .cache import CACHE_RULES
from .dev import DEV_RULES
from .system import SYSTEM_RULES

# First matching rule wins, so order matters
BLOAT_RULES: tuple[BloatRule, ...] = DEV_RULES + SYSTEM_RULES + CACHE_RULES


def get_all_rules() -> tuple[BloatRule, ...]:
    """Get all registered bloat rules in evaluation order."""
    return BLOAT_RULES


def get_categories() -> list[str]:
    """Get rule categories in first-seen order."""
    return list(dict.fromkeys(r.category for r in BLOAT_RULES))


__all__ = [
    "BloatRule",
    "Priority",
    "PRIORITY_ORDER",
    "BLOAT_RULES",
    "get_all_rules",
    "get_categories",
]
