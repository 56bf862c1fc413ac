"""Filesystem walker that inventories files and estimates their token cost."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from context_pack.core.matcher import DEFAULT_IGNORE, is_ignored, parse_ignore_file
from context_pack.core.tokens import estimate_tokens, is_binary_extension

logger = logging.getLogger(__name__)

PROJECT_IGNORE_FILE = ".claudeignore"
GIT_IGNORE_FILE = ".gitignore"


class ScanError(Exception):
    """Error that prevents a scan from running."""

    pass


class InvalidRootError(ScanError):
    """The scan root does not exist or is not a directory."""

    pass


@dataclass(frozen=True)
class FileRecord:
    """A single file kept by the walker."""

    path: Path
    rel_path: str  # '/'-separated, relative to the scan root
    name: str
    extension: str  # Lower-cased, with leading dot, "" if none
    size_bytes: int
    tokens: int
    is_binary: bool

    @property
    def size_human(self) -> str:
        """Return human-readable size."""
        return format_size(self.size_bytes)


@dataclass
class WalkResult:
    """Raw output of a single walk."""

    files: list[FileRecord] = field(default_factory=list)
    ignored_count: int = 0
    binary_count: int = 0
    scan_errors: list[str] = field(default_factory=list)


@dataclass
class ScanResult:
    """Results from scanning a project root."""

    root_path: Path
    files: list[FileRecord] = field(default_factory=list)
    ignored_count: int = 0
    binary_count: int = 0
    has_project_ignore: bool = False
    has_gitignore: bool = False
    rules: list[str] = field(default_factory=list)
    scan_errors: list[str] = field(default_factory=list)

    @property
    def total_tokens(self) -> int:
        """Return the token estimate over all kept files."""
        return sum(f.tokens for f in self.files)

    @property
    def total_size(self) -> int:
        """Return the byte size over all kept files."""
        return sum(f.size_bytes for f in self.files)

    @property
    def total_size_human(self) -> str:
        """Return human-readable total size."""
        return format_size(self.total_size)


def format_size(size_bytes: int) -> str:
    """Convert bytes to human-readable format."""
    size = float(size_bytes)
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} PB"


def parse_size(size_str: str) -> int:
    """
    Parse human-readable size string to bytes.

    Args:
        size_str: Size string like "1KB", "10MB", "1.5GB"

    Returns:
        Size in bytes

    Raises:
        ValueError: If the size string is invalid
    """
    size_str = size_str.strip().upper()

    # Check longer units first to avoid "KB" matching "B"
    units = [
        ("TB", 1024 * 1024 * 1024 * 1024),
        ("GB", 1024 * 1024 * 1024),
        ("MB", 1024 * 1024),
        ("KB", 1024),
        ("B", 1),
    ]

    for unit, multiplier in units:
        if size_str.endswith(unit):
            try:
                value = float(size_str[: -len(unit)])
            except ValueError:
                raise ValueError(f"Invalid size value: {size_str}") from None
            if value < 0:
                raise ValueError(f"Size cannot be negative: {size_str}")
            return int(value * multiplier)

    # No unit specified, assume bytes
    try:
        value = float(size_str)
    except ValueError:
        raise ValueError(f"Invalid size string: {size_str}") from None
    if value < 0:
        raise ValueError(f"Size cannot be negative: {size_str}")
    return int(value)


def read_file_record(path: Path, rel_path: str) -> FileRecord:
    """
    Build a FileRecord for a kept file.

    Binary files are only stat'ed; text files are read to count characters,
    with line endings left untranslated.

    Raises:
        OSError: If the file cannot be stat'ed or read
    """
    extension = path.suffix.lower()
    is_binary = is_binary_extension(extension)
    size = path.stat().st_size

    tokens = 0
    if not is_binary:
        with path.open(encoding="utf-8", errors="replace", newline="") as f:
            text = f.read()
        tokens = estimate_tokens(len(text))

    return FileRecord(
        path=path,
        rel_path=rel_path,
        name=path.name,
        extension=extension,
        size_bytes=size,
        tokens=tokens,
        is_binary=is_binary,
    )


def walk(
    root: Path,
    rules: Sequence[str],
    on_directory: Callable[[str], None] | None = None,
) -> WalkResult:
    """
    Walk a directory tree, pruning ignored entries.

    Ignored directories are never entered. Entries that fail with an
    OSError are dropped and the walk moves on. Symlinks are not followed.

    Args:
        root: Directory to walk
        rules: Ignore rules checked against each entry's relative path
        on_directory: Called with each directory's relative path as it is entered

    Returns:
        WalkResult with files sorted by descending token count

    Raises:
        InvalidRootError: If root does not exist or is not a directory
    """
    if not root.is_dir():
        raise InvalidRootError(f"Cannot scan {root}: not an existing directory")

    result = WalkResult()
    stack: list[tuple[Path, str]] = [(root, "")]

    while stack:
        directory, rel_dir = stack.pop()
        if on_directory is not None:
            on_directory(rel_dir or ".")

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", directory, e)
            result.scan_errors.append(f"{directory}: {e}")
            continue

        subdirs: list[tuple[Path, str]] = []
        for entry in entries:
            rel_path = f"{rel_dir}/{entry.name}" if rel_dir else entry.name

            if is_ignored(rel_path, rules):
                result.ignored_count += 1
                continue

            try:
                if entry.is_symlink():
                    continue
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append((Path(entry.path), rel_path))
                elif entry.is_file(follow_symlinks=False):
                    record = read_file_record(Path(entry.path), rel_path)
                    result.files.append(record)
                    if record.is_binary:
                        result.binary_count += 1
            except OSError as e:
                logger.debug("Skipping %s: %s", rel_path, e)
                result.scan_errors.append(f"{rel_path}: {e}")

        # Reversed so the first sibling is popped first
        stack.extend(reversed(subdirs))

    result.files.sort(key=lambda f: (-f.tokens, f.rel_path))
    return result


def load_rules(
    root: Path,
    respect_gitignore: bool = True,
    use_project_ignore: bool = True,
    extra: Sequence[str] = (),
) -> list[str]:
    """
    Combine ignore rules for a root.

    Order is built-in defaults, extra rules, .gitignore, then .claudeignore.
    """
    rules = list(DEFAULT_IGNORE) + list(extra)
    if respect_gitignore:
        rules += parse_ignore_file(root / GIT_IGNORE_FILE)
    if use_project_ignore:
        rules += parse_ignore_file(root / PROJECT_IGNORE_FILE)
    return rules


class Scanner:
    """Scans a project root and inventories what would enter the context."""

    def __init__(
        self,
        console: Console | None = None,
        respect_gitignore: bool = True,
        use_project_ignore: bool = True,
        extra_ignore: Sequence[str] = (),
    ):
        self.console = console or Console()
        self.respect_gitignore = respect_gitignore
        self.use_project_ignore = use_project_ignore
        self.extra_ignore = list(extra_ignore)

    def scan(self, root: Path) -> ScanResult:
        """
        Scan a directory.

        Args:
            root: Project root to scan

        Returns:
            ScanResult with files sorted by descending token count

        Raises:
            InvalidRootError: If root does not exist or is not a directory
        """
        rules = load_rules(
            root,
            respect_gitignore=self.respect_gitignore,
            use_project_ignore=self.use_project_ignore,
            extra=self.extra_ignore,
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task("Scanning files...", total=None)
            walked = walk(
                root,
                rules,
                on_directory=lambda rel: progress.update(
                    task, description=f"Scanning: {rel[-40:]}"
                ),
            )

        result = ScanResult(
            root_path=root,
            files=walked.files,
            ignored_count=walked.ignored_count,
            binary_count=walked.binary_count,
            has_project_ignore=(root / PROJECT_IGNORE_FILE).is_file(),
            has_gitignore=(root / GIT_IGNORE_FILE).is_file(),
            rules=rules,
            scan_errors=walked.scan_errors,
        )
        logger.info(
            "Scanned %s: %d files, %d ignored, %d binary, %d tokens",
            root,
            len(result.files),
            result.ignored_count,
            result.binary_count,
            result.total_tokens,
        )
        return result
