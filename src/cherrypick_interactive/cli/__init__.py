"""Command-line interface for cherrypick-interactive."""

from __future__ import annotations

from cherrypick_interactive.cli.app import main

__all__ = ["main"]
