"""Git repository handle.

Every git invocation in the package goes through ``GitRepository.run`` (or
``run_interactive`` when the operator needs the terminal). The handle is
passed explicitly to the differ, the classifier, the changelog builder and the
cherry-pick orchestrator; there is no module-level repository.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from cherrypick_interactive.exceptions import (
    NotAGitRepositoryError,
    VcsCommandError,
    VcsError,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)

SHORT_SHA_LENGTH = 7


@dataclass(frozen=True)
class Commit:
    """A commit as read from ``git log``.

    Attributes:
        sha: Full object id
        subject: First line of the message
        body: Full message, when it was fetched
    """

    sha: str
    subject: str
    body: str = ""

    @property
    def short_sha(self) -> str:
        return self.sha[:SHORT_SHA_LENGTH]


class GitRepository:
    """Thin wrapper around the git command line for one work tree."""

    def __init__(self, path: Path | None = None, *, git_binary: str = "git") -> None:
        """Open the repository containing ``path``.

        Args:
            path: Directory inside the work tree (defaults to the cwd)
            git_binary: Name or path of the git executable

        Raises:
            NotAGitRepositoryError: If ``path`` is not inside a work tree
        """
        self.git_binary = git_binary
        self.path = (path or Path.cwd()).resolve()
        if not self.path.is_dir():
            raise NotAGitRepositoryError(f"Not a git repository: {self.path} does not exist")

        try:
            toplevel = self.run(["rev-parse", "--show-toplevel"])
        except VcsCommandError as e:
            raise NotAGitRepositoryError(f"Not a git repository: {self.path}") from e
        self.path = Path(toplevel)

    def run(self, args: Sequence[str], *, env: Mapping[str, str] | None = None) -> str:
        """Run a git subcommand and return its stripped stdout.

        Args:
            args: Arguments after ``git``
            env: Extra environment variables for this call

        Returns:
            Standard output with surrounding whitespace removed

        Raises:
            VcsCommandError: If git exits with a non-zero status
            VcsError: If the git executable cannot be found
        """
        logger.debug("git %s", " ".join(args))
        process_env = {**os.environ, **env} if env else None

        try:
            result = subprocess.run(
                [self.git_binary, *args],
                cwd=self.path,
                capture_output=True,
                text=True,
                check=False,
                env=process_env,
            )
        except FileNotFoundError as e:
            raise VcsError(f"{self.git_binary} executable not found") from e

        if result.returncode != 0:
            raise VcsCommandError(args, result.returncode, result.stderr.strip())
        return result.stdout.strip()

    def run_interactive(self, args: Sequence[str]) -> None:
        """Run a git subcommand attached to the operator's terminal."""
        logger.debug("git %s (interactive)", " ".join(args))
        run_attached([self.git_binary, *args], cwd=self.path, name="git")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def current_branch(self) -> str:
        return self.run(["rev-parse", "--abbrev-ref", "HEAD"]) or "HEAD"

    def commit_message(self, sha: str) -> str:
        """Full message of ``sha``."""
        return self.run(["show", "--format=%B", "-s", sha])

    def commit_subject(self, sha: str) -> str:
        return self.run(["show", "--format=%s", "-s", sha])

    def conflicted_files(self) -> list[str]:
        """Paths with unmerged entries in the index."""
        out = self.run(["diff", "--name-only", "--diff-filter=U"])
        return [line for line in out.splitlines() if line]

    def diff_file(self, path: str) -> str:
        return self.run(["diff", path])

    def local_branch_exists(self, name: str) -> bool:
        return bool(self.run(["branch", "--list", name]))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def fetch(self, *, prune: bool = True) -> None:
        self.run(["fetch", "--prune"] if prune else ["fetch"])

    def cherry_pick(self, sha: str) -> None:
        self.run(["cherry-pick", sha])

    def cherry_pick_continue(self) -> None:
        # Keep the picked commit's message instead of opening an editor.
        self.run(["cherry-pick", "--continue"], env={"GIT_EDITOR": "true"})

    def cherry_pick_skip(self) -> None:
        self.run(["cherry-pick", "--skip"])

    def cherry_pick_abort(self) -> None:
        self.run(["cherry-pick", "--abort"])

    def checkout_side(self, path: str, side: Literal["ours", "theirs"]) -> None:
        """Replace ``path`` with one side of the conflict."""
        self.run(["checkout", f"--{side}", path])

    def add(self, paths: Sequence[str]) -> None:
        self.run(["add", "--", *paths])

    def commit(self, message: str, *, no_verify: bool = True) -> None:
        args = ["commit"]
        if no_verify:
            args.append("--no-verify")
        self.run([*args, "-m", message])

    def create_branch(self, name: str, start_point: str) -> None:
        """Create ``name`` from ``start_point`` and check it out."""
        self.run(["checkout", "-b", name, start_point])

    def push(self, branch: str, remote: str = "origin", *, no_verify: bool = True) -> None:
        args = ["push", "-u", remote, branch]
        if no_verify:
            args.append("--no-verify")
        self.run(args)

    def mergetool(self) -> None:
        self.run_interactive(["mergetool"])

    def open_in_editor(self, path: str, editor: str | None = None) -> None:
        """Open ``path`` in ``editor`` (``$EDITOR``, falling back to vi)."""
        editor = editor or os.environ.get("EDITOR") or "vi"
        logger.debug("%s %s", editor, path)
        run_attached([*editor.split(), path], cwd=self.path, name=editor)


def run_attached(command: Sequence[str], *, cwd: Path, name: str) -> None:
    """Run a program with inherited stdio and fail on a non-zero exit.

    Raises:
        VcsError: If the program is missing or exits non-zero
    """
    try:
        result = subprocess.run(list(command), cwd=cwd, check=False)
    except FileNotFoundError as e:
        raise VcsError(f"{name} executable not found") from e

    if result.returncode != 0:
        raise VcsError(f"{name} exited with code {result.returncode}")
