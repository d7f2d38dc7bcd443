"""Operator decisions requested by the release flow.

The release controller and the cherry-pick orchestrator never render prompts
themselves. They ask a ``SelectionProvider`` and act on the answer, which
lets tests script the operator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cherrypick_interactive.vcs.git import Commit


class ConflictAction(StrEnum):
    """Choice offered when a commit does not apply cleanly."""

    SKIP = "skip"
    RESOLVE = "resolve"
    ABORT = "abort"


class ResolutionAction(StrEnum):
    """Choice offered inside the conflict resolution loop."""

    FILE = "file"
    OURS_ALL = "ours-all"
    THEIRS_ALL = "theirs-all"
    STAGE_ALL = "stage-all"
    MERGETOOL = "mergetool"
    CONTINUE = "continue"
    BACK = "back"


class FileAction(StrEnum):
    """Choice offered for a single conflicted file."""

    OURS = "ours"
    THEIRS = "theirs"
    EDIT = "edit"
    DIFF = "diff"
    STAGE = "stage"
    BACK = "back"


BULK_ACTIONS = frozenset(
    {
        ResolutionAction.OURS_ALL,
        ResolutionAction.THEIRS_ALL,
        ResolutionAction.STAGE_ALL,
        ResolutionAction.MERGETOOL,
    }
)


@dataclass(frozen=True)
class ResolutionChoice:
    """An action from the resolution menu; ``path`` is set for ``FILE``."""

    action: ResolutionAction
    path: str | None = None


@dataclass(frozen=True)
class ConflictContext:
    """The commit being applied and its unmerged paths."""

    sha: str
    files: Sequence[str] = field(default_factory=tuple)


class SelectionProvider(Protocol):
    """Source of operator decisions."""

    def choose_commits(self, candidates: Sequence[Commit]) -> list[str]:
        """Pick hashes to cherry-pick from ``candidates`` (newest first)."""
        ...

    def choose_conflict_action(self, context: ConflictContext) -> ConflictAction: ...

    def choose_resolution(self, context: ConflictContext) -> ResolutionChoice: ...

    def choose_file_action(self, path: str) -> FileAction: ...

    def confirm(self, message: str, *, default: bool = True) -> bool: ...
