"""Version-control and code-hosting adapters."""

from __future__ import annotations

from cherrypick_interactive.vcs.git import Commit, GitRepository

__all__ = [
    "Commit",
    "GitRepository",
]
