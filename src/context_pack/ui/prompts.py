"""Interactive prompts for user input."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer
from InquirerPy import inquirer
from InquirerPy.base.control import Choice

from context_pack.core.analyzer import format_tokens

if TYPE_CHECKING:
    from context_pack.core.classifier import Suggestion


def confirm_overwrite(names: list[str]) -> bool:
    """
    Prompt user to confirm replacing existing files.

    Args:
        names: File names that already exist

    Returns:
        True if user confirms, False otherwise
    """
    return typer.confirm(
        f"\n{', '.join(names)} already exist(s). Overwrite?",
        default=False,
    )


def select_suggestions(suggestions: list["Suggestion"]) -> list["Suggestion"]:
    """
    Let user interactively pick which suggestions go into the ignore file.

    Args:
        suggestions: Suggestions in report order

    Returns:
        Selected suggestions, in their original order
    """
    choices = [
        Choice(
            value=index,
            name=(
                f"{s.pattern:<25} | {s.priority:<8} | "
                f"~{format_tokens(s.token_savings):>6} tokens | {s.reason}"
            ),
            enabled=True,
        )
        for index, s in enumerate(suggestions)
    ]

    selected = inquirer.checkbox(
        message="Select patterns to ignore (Space to toggle, Enter to confirm):",
        choices=choices,
        cycle=True,
    ).execute()

    picked = set(selected or [])
    return [s for index, s in enumerate(suggestions) if index in picked]
