"""Shared fixtures for the cherrypick-interactive test suite."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

import pytest
from rich.console import Console

from cherrypick_interactive.core.selection import (
    ConflictAction,
    FileAction,
    ResolutionChoice,
)
from cherrypick_interactive.exceptions import VcsCommandError
from cherrypick_interactive.vcs.git import Commit, GitRepository

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from pathlib import Path

    from cherrypick_interactive.core.selection import ConflictContext

# Newest first, as git log returns them
C3 = Commit("c3" + "3" * 38, "feat: x")
C2 = Commit("c2" + "2" * 38, "fix: y")
C1 = Commit("c1" + "1" * 38, "chore: z")


class FakeGitRepository(GitRepository):
    """A GitRepository that replays scripted output instead of running git.

    Each command maps to a queue of responses. Responses are consumed in
    order and the last one repeats. A response that is an exception is
    raised. Unscripted commands return an empty string.
    """

    def __init__(self, path: Path) -> None:
        self.git_binary = "git"
        self.path = path
        self.calls: list[tuple[str, ...]] = []
        self.envs: dict[tuple[str, ...], Mapping[str, str] | None] = {}
        self._responses: dict[tuple[str, ...], list[str | Exception]] = {}

    def script(self, args: Sequence[str], *responses: str | Exception) -> None:
        self._responses[tuple(args)] = list(responses)

    def fail(self, args: Sequence[str], stderr: str = "error") -> VcsCommandError:
        """Build the error git would raise for ``args``."""
        return VcsCommandError(args, 1, stderr)

    def run(self, args: Sequence[str], *, env: Mapping[str, str] | None = None) -> str:
        key = tuple(args)
        self.calls.append(key)
        self.envs[key] = env
        queue = self._responses.get(key)
        if not queue:
            return ""
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response

    def run_interactive(self, args: Sequence[str]) -> None:
        self.calls.append(("interactive", *args))

    def open_in_editor(self, path: str, editor: str | None = None) -> None:
        self.calls.append(("editor", path))

    def called(self, *args: str) -> bool:
        return tuple(args) in self.calls

    def count(self, *args: str) -> int:
        return self.calls.count(tuple(args))

    def calls_starting_with(self, *prefix: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[: len(prefix)] == prefix]


class ScriptedProvider:
    """A SelectionProvider that answers from prepared lists.

    Running out of answers raises IndexError, which flags an unexpected prompt.
    """

    def __init__(
        self,
        commits: Iterable[str] | None = None,
        conflict_actions: Iterable[ConflictAction] = (),
        resolutions: Iterable[ResolutionChoice] = (),
        file_actions: Iterable[FileAction] = (),
        confirms: Iterable[bool] = (),
    ) -> None:
        self.commits = None if commits is None else list(commits)
        self.conflict_actions = list(conflict_actions)
        self.resolutions = list(resolutions)
        self.file_actions = list(file_actions)
        self.confirms = list(confirms)
        self.candidates: list[Commit] = []
        self.contexts: list[ConflictContext] = []

    def choose_commits(self, candidates: Sequence[Commit]) -> list[str]:
        self.candidates = list(candidates)
        if self.commits is None:
            return [commit.sha for commit in candidates]
        return list(self.commits)

    def choose_conflict_action(self, context: ConflictContext) -> ConflictAction:
        self.contexts.append(context)
        return self.conflict_actions.pop(0)

    def choose_resolution(self, context: ConflictContext) -> ResolutionChoice:
        self.contexts.append(context)
        return self.resolutions.pop(0)

    def choose_file_action(self, path: str) -> FileAction:
        return self.file_actions.pop(0)

    def confirm(self, message: str, *, default: bool = True) -> bool:
        return self.confirms.pop(0)


@pytest.fixture
def fake_repo(tmp_path: Path) -> FakeGitRepository:
    """A scripted repository rooted at a temporary directory."""
    return FakeGitRepository(tmp_path)


@pytest.fixture
def console() -> Console:
    """A console that records output instead of printing it."""
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)


def output_of(console: Console) -> str:
    return console.file.getvalue()
