"""Conventional commit classification.

A commit message maps to the version bump it implies:

- ``BREAKING CHANGE`` anywhere in the message: major
- a line starting with ``feat``: minor
- a line starting with ``fix`` or ``perf``: patch

Rules are checked in that order and the first match wins.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from cherrypick_interactive.core.version import BumpType

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from cherrypick_interactive.vcs.git import GitRepository

logger = logging.getLogger(__name__)

BREAKING_PATTERN = re.compile(r"\bBREAKING[- _]CHANGE(?:\([^)]+\))?\s*:?", re.IGNORECASE)

# Optional indentation and "*" bullet, the type, optional scope, optional colon.
FEATURE_PATTERN = re.compile(
    r"^\s*(?:\*?\s*)?feat(?:\([^)]+\))?\s*:?",
    re.IGNORECASE | re.MULTILINE,
)
FIX_PATTERN = re.compile(
    r"^\s*(?:\*?\s*)?(?:fix|perf)(?:\([^)]+\))?\s*:?",
    re.IGNORECASE | re.MULTILINE,
)


def normalize_message(message: str | None) -> str:
    """Convert CRLF line endings to LF."""
    return (message or "").replace("\r\n", "\n")


def classify_message(message: str | None) -> BumpType:
    """Return the bump implied by a single commit message."""
    body = normalize_message(message)

    if BREAKING_PATTERN.search(body):
        return BumpType.MAJOR
    if FEATURE_PATTERN.search(body):
        return BumpType.MINOR
    if FIX_PATTERN.search(body):
        return BumpType.PATCH
    return BumpType.NONE


def collapse_bumps(levels: Iterable[BumpType]) -> BumpType:
    """Pick the strongest bump among ``levels`` (``NONE`` if empty)."""
    return max(levels, key=lambda level: level.priority, default=BumpType.NONE)


def calculate_bump(repo: GitRepository, hashes: Sequence[str]) -> BumpType:
    """Compute the bump for the commits about to be applied.

    Messages are read in order and scanning stops at the first major bump,
    since nothing later can raise it further.

    Args:
        repo: Repository to read commit messages from
        hashes: Commit hashes, oldest first

    Returns:
        Collapsed bump type
    """
    levels: list[BumpType] = []
    for sha in hashes:
        level = classify_message(repo.commit_message(sha))
        logger.debug("%s classified as %s", sha[:7], level)
        levels.append(level)
        if level == BumpType.MAJOR:
            break
    return collapse_bumps(levels)
