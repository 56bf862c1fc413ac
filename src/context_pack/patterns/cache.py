"""Cache and temporary output bloat rules."""

from __future__ import annotations

from .base import BloatRule, rule

CACHE_RULES: tuple[BloatRule, ...] = (
    rule(r"^\.cache(/|$)", "cache", "generic cache directory", "high"),
    rule(r"^tmp(/|$)", "cache", "temp files", "high"),
    rule(r"^\.temp(/|$)", "cache", "temp files", "high"),
    rule(r"^public/build(/|$)", "build", "compiled public assets", "high"),
)
