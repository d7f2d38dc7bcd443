"""Sequential cherry-picking with interactive conflict resolution.

Commits are applied one at a time, oldest first. When git stops on a
conflict the operator chooses to skip the commit, resolve it, or abort the
whole sequence:

    Applying --> Applied
        |
        +--> conflict menu --skip--> Skipped
                  |  ^
           resolve|  |back
                  v  |
             resolution loop --continue ok--> Applied
                  |
                abort --> SequenceAbortedError

Git's own cherry-pick state carries the sequence across skip, resolve and
continue, so the orchestrator keeps no state beyond the running counts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from rich.markup import escape

from cherrypick_interactive.core.selection import (
    BULK_ACTIONS,
    ConflictAction,
    ConflictContext,
    FileAction,
    ResolutionAction,
)
from cherrypick_interactive.exceptions import (
    NothingAppliedError,
    SequenceAbortedError,
    VcsError,
)
from cherrypick_interactive.vcs.git import SHORT_SHA_LENGTH

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rich.console import Console

    from cherrypick_interactive.core.selection import ResolutionChoice, SelectionProvider
    from cherrypick_interactive.vcs.git import GitRepository

logger = logging.getLogger(__name__)


class CherryPickOutcome(StrEnum):
    """Terminal state of one commit."""

    APPLIED = "applied"
    SKIPPED = "skipped"


@dataclass
class CherryPickResult:
    """Counts of applied and skipped commits."""

    applied: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.applied + self.skipped

    def record(self, outcome: CherryPickOutcome) -> None:
        if outcome == CherryPickOutcome.APPLIED:
            self.applied += 1
        else:
            self.skipped += 1


def _short(sha: str) -> str:
    return f"[dim]({sha[:SHORT_SHA_LENGTH]})[/]"


class CherryPicker:
    """Apply commits in order, asking the operator what to do on conflicts."""

    def __init__(
        self,
        repo: GitRepository,
        provider: SelectionProvider,
        console: Console,
        err_console: Console | None = None,
        *,
        editor: str | None = None,
    ) -> None:
        self.repo = repo
        self.provider = provider
        self.console = console
        self.err_console = err_console or console
        self.editor = editor

    def run(self, hashes: Sequence[str]) -> CherryPickResult:
        """Cherry-pick ``hashes`` in the given order.

        Args:
            hashes: Commits to apply, oldest first

        Returns:
            Applied and skipped counts; they add up to ``len(hashes)``

        Raises:
            SequenceAbortedError: If the operator aborts
            NothingAppliedError: If every commit was skipped
        """
        result = CherryPickResult()

        for sha in hashes:
            try:
                outcome = self._apply(sha)
            except SequenceAbortedError:
                self.err_console.print(f"[red]✖ Cherry-pick aborted on {sha}[/]")
                raise
            result.record(outcome)

        self.console.print(
            f"\n[dim]Summary → applied: {result.applied}, skipped: {result.skipped}[/]"
        )

        if result.applied == 0:
            self.err_console.print(
                "\n[yellow]No commits were cherry-picked "
                "(all were skipped or unresolved). Aborting.[/]"
            )
            try:
                self.repo.cherry_pick_abort()
            except VcsError as e:
                # nothing left to abort
                logger.debug("cleanup abort failed: %s", e)
            raise NothingAppliedError(result)

        return result

    def _apply(self, sha: str) -> CherryPickOutcome:
        try:
            self.repo.cherry_pick(sha)
        except VcsError as e:
            logger.debug("cherry-pick %s stopped: %s", sha, e)
            return self._handle_conflict(sha)

        self._report_applied(sha)
        return CherryPickOutcome.APPLIED

    def _report_applied(self, sha: str) -> None:
        subject = self.repo.commit_subject(sha)
        self.console.print(f"[green]✓[/] cherry-picked {_short(sha)} {escape(subject)}")

    # -------------------------------------------------------------------------
    # Conflict menu
    # -------------------------------------------------------------------------

    def _handle_conflict(self, sha: str) -> CherryPickOutcome:
        while True:
            self.err_console.print(
                f"\n[red]✖ Cherry-pick has conflicts on {sha} "
                f"({sha[:SHORT_SHA_LENGTH]}).[/]"
            )
            files = self._show_conflicts()
            action = self.provider.choose_conflict_action(ConflictContext(sha, tuple(files)))

            if action == ConflictAction.SKIP:
                self.repo.cherry_pick_skip()
                self.console.print(f"[yellow]↷ Skipped commit[/] {_short(sha)}")
                return CherryPickOutcome.SKIPPED

            if action == ConflictAction.ABORT:
                self.repo.cherry_pick_abort()
                raise SequenceAbortedError(sha)

            if self._resolve(sha):
                return CherryPickOutcome.APPLIED

    def _show_conflicts(self) -> list[str]:
        files = self.repo.conflicted_files()
        if not files:
            self.console.print("[green]No conflicted files reported by git.[/]")
            return files

        self.err_console.print("[yellow]Conflicted files:[/]")
        for path in files:
            self.err_console.print(f"  - {escape(path)}")
        return files

    # -------------------------------------------------------------------------
    # Resolution loop
    # -------------------------------------------------------------------------

    def _resolve(self, sha: str) -> bool:
        """Run the resolution loop; False means the operator went back."""
        while True:
            files = self._show_conflicts()
            if not files and self._try_continue(sha):
                return True

            choice = self.provider.choose_resolution(ConflictContext(sha, tuple(files)))

            if choice.action == ResolutionAction.BACK:
                return False

            if choice.action == ResolutionAction.CONTINUE:
                if self.repo.conflicted_files():
                    self.err_console.print("[yellow]There are still unmerged files.[/]")
                elif self._try_continue(sha):
                    return True
                continue

            if choice.action == ResolutionAction.FILE:
                self._resolve_file(choice)
            elif choice.action in BULK_ACTIONS:
                self._resolve_all(choice.action, files)

    def _try_continue(self, sha: str) -> bool:
        try:
            self.repo.cherry_pick_continue()
        except VcsError as e:
            self.err_console.print("[red]`git cherry-pick --continue` failed:[/]")
            self.err_console.print(escape(str(e)))
            return False

        self._report_applied(sha)
        return True

    def _resolve_file(self, choice: ResolutionChoice) -> None:
        path = choice.path
        if path is None:
            return
        action = self.provider.choose_file_action(path)

        try:
            if action == FileAction.OURS or action == FileAction.THEIRS:
                self.repo.checkout_side(path, str(action))
                self.repo.add([path])
                self.console.print(f'[green]✓ Applied "{action}" and staged:[/] {escape(path)}')
            elif action == FileAction.EDIT:
                self.console.print(f"[cyan]Opening {escape(path)} in editor...[/]")
                self.repo.open_in_editor(path, self.editor)
                if self.provider.confirm("File edited. Stage it now?", default=True):
                    self.repo.add([path])
                    self.console.print(f"[green]✓ Staged:[/] {escape(path)}")
            elif action == FileAction.DIFF:
                diff = self.repo.diff_file(path)
                self.err_console.print(
                    f"\n[dim]--- diff: {escape(path)} ---\n{escape(diff)}\n--- end diff ---[/]\n"
                )
            elif action == FileAction.STAGE:
                self.repo.add([path])
                self.console.print(f"[green]✓ Staged:[/] {escape(path)}")
        except VcsError as e:
            self.err_console.print(f"[red]Action failed on {escape(path)}:[/] {escape(str(e))}")

    def _resolve_all(self, action: ResolutionAction, files: Sequence[str]) -> None:
        try:
            if action == ResolutionAction.MERGETOOL:
                # mergetool walks every conflicted file itself
                self.repo.mergetool()
                return
            for path in files:
                if action == ResolutionAction.OURS_ALL:
                    self.repo.checkout_side(path, "ours")
                elif action == ResolutionAction.THEIRS_ALL:
                    self.repo.checkout_side(path, "theirs")
                self.repo.add([path])
        except VcsError as e:
            self.err_console.print(f"[red]{action} failed:[/] {escape(str(e))}")
