"""Generate ignore-file and project-notes content from an analysis."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path

from context_pack.core.analyzer import format_tokens
from context_pack.core.results import AnalysisResult, category_breakdown, percent_of
from context_pack.core.scanner import PROJECT_IGNORE_FILE, ScanResult

logger = logging.getLogger(__name__)

NOTES_FILE = "CLAUDE.md"

# Manifest file -> stack entry
STACK_MARKERS: dict[str, str] = {
    "package.json": "Node.js",
    "tsconfig.json": "TypeScript",
    "deno.json": "Deno",
    "pyproject.toml": "Python",
    "setup.py": "Python",
    "requirements.txt": "Python",
    "Pipfile": "Python",
    "Cargo.toml": "Rust",
    "go.mod": "Go",
    "Gemfile": "Ruby",
    "composer.json": "PHP",
    "pom.xml": "Java (Maven)",
    "build.gradle": "Java (Gradle)",
    "build.gradle.kts": "Kotlin (Gradle)",
    "Package.swift": "Swift",
    "Dockerfile": "Docker",
    "docker-compose.yml": "Docker Compose",
}

# Extension -> language
EXT_LANG: dict[str, str] = {
    ".py": "Python", ".pyi": "Python",
    ".js": "JavaScript", ".mjs": "JavaScript", ".cjs": "JavaScript", ".jsx": "JavaScript",
    ".ts": "TypeScript", ".tsx": "TypeScript", ".mts": "TypeScript",
    ".rs": "Rust",
    ".go": "Go",
    ".java": "Java", ".kt": "Kotlin", ".kts": "Kotlin",
    ".rb": "Ruby",
    ".php": "PHP",
    ".swift": "Swift",
    ".c": "C", ".h": "C/C++",
    ".cpp": "C++", ".cc": "C++", ".hpp": "C++",
    ".cs": "C#",
    ".vue": "Vue",
    ".svelte": "Svelte",
    ".sql": "SQL",
    ".sh": "Shell", ".bash": "Shell",
    ".html": "HTML",
    ".css": "CSS", ".scss": "SCSS",
}


def generate_ignore_file(result: AnalysisResult, scan: ScanResult) -> str:
    """
    Render ignore-file content for the suggestions.

    Patterns are grouped by category in suggestion order, each preceded by
    a comment with its reason and approximate savings. Large files are
    appended as commented-out entries for manual review.
    """
    savings = sum(s.token_savings for s in result.suggestions)
    lines = [
        f"# {PROJECT_IGNORE_FILE} generated by context-pack",
        f"# Project: {scan.root_path.name}",
        f"# Excludes ~{format_tokens(savings)} tokens "
        f"({percent_of(savings, result.total_tokens)}% of {format_tokens(result.total_tokens)})",
        "",
    ]

    for category, stats in category_breakdown(result).items():
        lines.append(f"# --- {category} (~{format_tokens(stats.token_savings)} tokens) ---")
        for s in result.suggestions:
            if s.category != category:
                continue
            lines.append(f"# {s.reason} ({s.file_count} files, ~{format_tokens(s.token_savings)} tokens)")
            lines.append(s.pattern)
        lines.append("")

    if result.large_files:
        lines.append("# --- large files, review manually ---")
        lines.append("# Uncomment to exclude")
        for f in result.large_files:
            lines.append(f"# {f.rel_path}")
        lines.append("")

    return "\n".join(lines)


def detect_stack(scan: ScanResult) -> list[str]:
    """Detect the project stack from manifest files at the root."""
    names = {f.rel_path for f in scan.files if "/" not in f.rel_path}
    stack = [label for marker, label in STACK_MARKERS.items() if marker in names]
    return list(dict.fromkeys(stack))


def detect_languages(scan: ScanResult, result: AnalysisResult, limit: int = 5) -> list[tuple[str, int]]:
    """Return (language, percent of clean tokens) pairs, largest first."""
    bloat = {b.rel_path for b in result.bloat_files}
    counts: Counter[str] = Counter()
    for f in scan.files:
        lang = EXT_LANG.get(f.extension)
        if lang and f.tokens and f.rel_path not in bloat:
            counts[lang] += f.tokens

    total = sum(counts.values())
    return [(lang, percent_of(tokens, total)) for lang, tokens in counts.most_common(limit)]


def source_directories(scan: ScanResult, result: AnalysisResult, limit: int = 8) -> list[tuple[str, int]]:
    """Return top-level directories ranked by clean tokens."""
    bloat = {b.rel_path for b in result.bloat_files}
    counts: Counter[str] = Counter()
    for f in scan.files:
        if "/" in f.rel_path and f.rel_path not in bloat:
            counts[f.rel_path.split("/", 1)[0]] += f.tokens
    return [(name, tokens) for name, tokens in counts.most_common(limit) if tokens > 0]


def generate_notes(scan: ScanResult, result: AnalysisResult) -> str:
    """Render project-notes content with the detected stack and context summary."""
    lines = [f"# {scan.root_path.name}", "", "## Stack", ""]

    stack = detect_stack(scan)
    languages = detect_languages(scan, result)
    if stack:
        lines.extend(f"- {item}" for item in stack)
    if languages:
        langs = ", ".join(f"{lang} ({pct}%)" for lang, pct in languages)
        lines.append(f"- Languages: {langs}")
    if not stack and not languages:
        lines.append("- Not detected")

    lines += [
        "",
        "## Context",
        "",
        f"- Source context: ~{format_tokens(result.clean_tokens)} tokens "
        f"across {len(scan.files) - len(result.bloat_files)} files",
        f"- Excluded via {PROJECT_IGNORE_FILE}: ~{format_tokens(result.bloat_tokens)} tokens "
        f"({result.reduction_percent}%)",
    ]

    dirs = source_directories(scan, result)
    if dirs:
        lines += ["", "## Layout", ""]
        lines.extend(f"- `{name}/` (~{format_tokens(tokens)} tokens)" for name, tokens in dirs)

    lines += [
        "",
        "## Conventions",
        "",
        "<!-- Describe build, test and style conventions here -->",
        "",
    ]
    return "\n".join(lines)


def write_files(
    root: Path,
    files: dict[str, str | None],
    overwrite: bool = False,
) -> tuple[list[str], list[str]]:
    """
    Write generated files into a project root.

    Args:
        root: Directory to write into
        files: File name -> content; None entries are not written
        overwrite: Replace files that already exist

    Returns:
        Tuple of (written, skipped) file names

    Raises:
        OSError: If a file cannot be written
    """
    written: list[str] = []
    skipped: list[str] = []

    for name, content in files.items():
        if content is None:
            continue
        target = root / name
        if target.exists() and not overwrite:
            logger.debug("Keeping existing %s", target)
            skipped.append(name)
            continue
        target.write_text(content, encoding="utf-8")
        written.append(name)

    return written, skipped
