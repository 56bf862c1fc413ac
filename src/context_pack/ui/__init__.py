"""UI components for console output and prompts."""

from __future__ import annotations

from .console import (
    create_console,
    print_banner,
    print_error,
    print_success,
    print_warning,
    setup_logging,
)
from .prompts import confirm_overwrite, select_suggestions

__all__ = [
    "create_console",
    "print_banner",
    "setup_logging",
    "print_success",
    "print_warning",
    "print_error",
    "confirm_overwrite",
    "select_suggestions",
]
