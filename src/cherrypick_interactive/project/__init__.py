"""Project file handling."""

from __future__ import annotations

from cherrypick_interactive.project.version_file import read_version, write_version

__all__ = [
    "read_version",
    "write_version",
]
