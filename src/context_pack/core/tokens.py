"""Token estimation and binary file detection."""

from __future__ import annotations

# Heuristic: one token per four characters
CHARS_PER_TOKEN = 4

# Extensions treated as binary; no content sniffing is done
BINARY_EXTENSIONS: frozenset[str] = frozenset({
    # Images
    ".png", ".jpg", ".jpeg", ".gif", ".webp", ".ico", ".bmp", ".tiff", ".svg",
    # Audio/video
    ".mp4", ".mp3", ".wav", ".ogg", ".mov", ".avi", ".mkv",
    # Documents and archives
    ".pdf", ".zip", ".tar", ".gz", ".7z", ".rar",
    # Fonts
    ".woff", ".woff2", ".ttf", ".eot", ".otf",
    # Native objects
    ".exe", ".dll", ".so", ".dylib", ".bin",
    # Bytecode
    ".pyc", ".pyo", ".class",
    # Databases
    ".db", ".sqlite", ".sqlite3",
})


def estimate_tokens(char_count: int) -> int:
    """Estimate tokens for a character count, rounding up."""
    return -(-char_count // CHARS_PER_TOKEN)


def is_binary_extension(extension: str) -> bool:
    """Check if a file extension (with leading dot) denotes a binary file."""
    return extension.lower() in BINARY_EXTENSIONS
