"""Terminal prompts built on rich.

``RichPromptProvider`` implements ``SelectionProvider`` for an operator at a
terminal. Menus are numbered lists answered by typing a number; the commit
picker accepts numbers and ranges.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from rich.markup import escape
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from cherrypick_interactive.core.selection import (
    ConflictAction,
    FileAction,
    ResolutionAction,
    ResolutionChoice,
)
from cherrypick_interactive.vcs.git import SHORT_SHA_LENGTH

if TYPE_CHECKING:
    from collections.abc import Sequence

    from rich.console import Console

    from cherrypick_interactive.core.selection import ConflictContext
    from cherrypick_interactive.vcs.git import Commit

T = TypeVar("T")

CONFLICT_CHOICES = [
    (ConflictAction.SKIP, "Skip this commit"),
    (ConflictAction.RESOLVE, "Resolve conflicts now"),
    (ConflictAction.ABORT, "Revoke and cancel (abort entire sequence)"),
]

RESOLUTION_ACTIONS = [
    (ResolutionAction.OURS_ALL, "Use ours for ALL"),
    (ResolutionAction.THEIRS_ALL, "Use theirs for ALL"),
    (ResolutionAction.STAGE_ALL, "Stage ALL"),
    (ResolutionAction.MERGETOOL, "Launch mergetool (all)"),
    (ResolutionAction.CONTINUE, "Try to continue (run --continue)"),
    (ResolutionAction.BACK, "Back to main conflict menu"),
]

FILE_CHOICES = [
    (FileAction.OURS, "Use ours (current branch)"),
    (FileAction.THEIRS, "Use theirs (picked commit)"),
    (FileAction.EDIT, "Open in editor"),
    (FileAction.DIFF, "Show diff"),
    (FileAction.STAGE, "Mark resolved (stage file)"),
    (FileAction.BACK, "Back"),
]


def parse_selection(text: str, count: int) -> list[int]:
    """Parse a selection like ``1,3-5`` into zero-based indexes.

    ``all`` selects everything; an empty answer or ``none`` selects nothing.
    Indexes are returned in first-mentioned order without duplicates.

    Raises:
        ValueError: If the text is malformed or out of range
    """
    text = text.strip().lower()
    if text == "all":
        return list(range(count))
    if text in ("", "none"):
        return []

    indexes: list[int] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        start_text, dash, end_text = part.partition("-")
        start = int(start_text)
        end = int(end_text) if dash else start
        if start > end:
            raise ValueError(f"Invalid range: {part}")
        for number in range(start, end + 1):
            if not 1 <= number <= count:
                raise ValueError(f"{number} is out of range (1-{count})")
            if number - 1 not in indexes:
                indexes.append(number - 1)
    return indexes


class RichPromptProvider:
    """Ask the operator through rich prompts."""

    def __init__(self, console: Console) -> None:
        self.console = console

    def choose_commits(self, candidates: Sequence[Commit]) -> list[str]:
        table = Table(title=f"Select commits to cherry-pick ({len(candidates)} missing)")
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Commit", style="dim")
        table.add_column("Subject")
        for number, commit in enumerate(candidates, start=1):
            subject = commit.subject.lstrip(" \t\u00a0")
            table.add_row(str(number), commit.sha[:SHORT_SHA_LENGTH], escape(subject))
        table.caption = "Newest first"
        self.console.print(table)

        while True:
            answer = Prompt.ask(
                "Commits to pick ([cyan]all[/], e.g. [cyan]1,3-5[/], or Enter for none)",
                console=self.console,
            )
            try:
                indexes = parse_selection(answer, len(candidates))
            except ValueError as e:
                self.console.print(f"[red]{escape(str(e))}[/]")
                continue
            return [candidates[index].sha for index in indexes]

    def choose_conflict_action(self, context: ConflictContext) -> ConflictAction:
        return self._menu("Choose how to proceed:", CONFLICT_CHOICES)

    def choose_resolution(self, context: ConflictContext) -> ResolutionChoice:
        self.console.print("\n[bold]Select a file to resolve or a global action:[/]")
        options: list[ResolutionChoice] = []
        for path in context.files:
            options.append(ResolutionChoice(ResolutionAction.FILE, path))
            self.console.print(f"  [cyan]{len(options)}[/]) {escape(path)}")
        self.console.print("  [dim]─ Actions ─[/]")
        for action, label in RESOLUTION_ACTIONS:
            options.append(ResolutionChoice(action))
            self.console.print(f"  [cyan]{len(options)}[/]) {label}")

        return options[self._ask_number(len(options)) - 1]

    def choose_file_action(self, path: str) -> FileAction:
        return self._menu(f'How to resolve "{escape(path)}"?', FILE_CHOICES)

    def confirm(self, message: str, *, default: bool = True) -> bool:
        return Confirm.ask(message, console=self.console, default=default)

    def _menu(self, title: str, choices: Sequence[tuple[T, str]]) -> T:
        self.console.print(f"\n[bold]{title}[/]")
        for number, (_, label) in enumerate(choices, start=1):
            self.console.print(f"  [cyan]{number}[/]) {label}")
        return choices[self._ask_number(len(choices)) - 1][0]

    def _ask_number(self, count: int) -> int:
        while True:
            number = IntPrompt.ask("Choice", console=self.console)
            if 1 <= number <= count:
                return number
            self.console.print(f"[red]Pick a number between 1 and {count}.[/]")
