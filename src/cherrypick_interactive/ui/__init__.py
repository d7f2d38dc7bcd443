"""Interactive terminal UI."""

from __future__ import annotations

from cherrypick_interactive.ui.prompts import RichPromptProvider, parse_selection

__all__ = [
    "RichPromptProvider",
    "parse_selection",
]
