"""Runtime and environment bloat rules: logs, editors, OS files, fixtures."""

from __future__ import annotations

from .base import BloatRule, rule

SYSTEM_RULES: tuple[BloatRule, ...] = (
    # Logs
    rule(r"^(logs?|\.logs?)(/|$)", "logs", "log files, runtime output, not source", "high"),
    rule(r"\.log$", "logs", "log file", "high"),

    # IDE/Editor
    rule(r"^\.idea(/|$)", "ide", "JetBrains IDE config, not project code", "medium"),
    rule(r"^\.vscode(/|$)", "ide", "VS Code config, not project code", "medium"),
    rule(r"^\.cursor(/|$)", "ide", "Cursor editor config", "medium"),

    # OS metadata
    rule(r"^\.DS_Store$", "os", "macOS metadata file", "medium"),
    rule(r"^Thumbs\.db$", "os", "Windows thumbnail cache", "medium"),

    # Test snapshots and fixtures
    rule(r"^__snapshots__(/|$)", "test", "Jest snapshots, often very large", "medium"),
    rule(r"^fixtures?(/|$)", "test", "test fixtures, usually large data files", "low"),
)
