"""Core business logic for cherrypick-interactive.

This module contains the fundamental building blocks:
- Subject-based branch comparison
- Conventional commit classification and version bumping
- Release changelog generation
- Sequential cherry-picking with conflict resolution
- Release orchestration
"""

from __future__ import annotations

from cherrypick_interactive.core.changelog import (
    ChangelogDocument,
    build_changelog,
    write_changelog,
)
from cherrypick_interactive.core.cherry_pick import (
    CherryPicker,
    CherryPickOutcome,
    CherryPickResult,
)
from cherrypick_interactive.core.commits import calculate_bump, classify_message, collapse_bumps
from cherrypick_interactive.core.differ import (
    MissingCommits,
    commits_of,
    fetch_branch_state,
    find_missing,
    subjects_of,
)
from cherrypick_interactive.core.release import ReleaseController, ReleaseOutcome, ReleaseStatus
from cherrypick_interactive.core.version import BumpType, Version, parse_version

__all__ = [
    # Version
    "BumpType",
    # Changelog
    "ChangelogDocument",
    # Cherry-pick
    "CherryPickOutcome",
    "CherryPickResult",
    "CherryPicker",
    # Differ
    "MissingCommits",
    # Release
    "ReleaseController",
    "ReleaseOutcome",
    "ReleaseStatus",
    "Version",
    "build_changelog",
    # Commits
    "calculate_bump",
    "classify_message",
    "collapse_bumps",
    "commits_of",
    "fetch_branch_state",
    "find_missing",
    "parse_version",
    "subjects_of",
    "write_changelog",
]
