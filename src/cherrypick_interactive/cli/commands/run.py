"""Implementation of the main command.

Compares the branches, cherry-picks the chosen commits onto a release
branch and publishes it.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.panel import Panel

from cherrypick_interactive.config import apply_overrides, load_config
from cherrypick_interactive.core.release import ReleaseController, ReleaseStatus
from cherrypick_interactive.exceptions import (
    CherrypickError,
    ConfigError,
    NothingSelectedError,
    VcsError,
)
from cherrypick_interactive.logging_config import configure_logging
from cherrypick_interactive.ui import RichPromptProvider
from cherrypick_interactive.vcs import GitRepository

if TYPE_CHECKING:
    from rich.console import Console

    from cherrypick_interactive.core.release import ReleaseOutcome


def run_cherrypick(
    path: str | None,
    overrides: dict[str, Any],
    verbose: bool,
    console: Console,
    err_console: Console,
) -> None:
    """Run the cherry-pick release flow.

    Args:
        path: Optional path to the repository
        overrides: Nested config values given on the command line
        verbose: Log every git command
        console: Console for standard output
        err_console: Console for error output
    """
    project_path = Path(path) if path else Path.cwd()
    configure_logging(verbose, err_console)

    # Load configuration
    try:
        config = apply_overrides(load_config(project_path), overrides)
    except ConfigError as e:
        err_console.print(f"[red]Error loading config:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    # Initialize git repository
    try:
        repo = GitRepository(project_path)
    except VcsError as e:
        err_console.print(f"[red]Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    controller = ReleaseController(
        repo,
        config,
        RichPromptProvider(console),
        console,
        err_console,
    )

    try:
        outcome = controller.run()
    except NothingSelectedError as e:
        console.print(f"[yellow]{escape(str(e))}[/]")
        raise SystemExit(1) from e
    except CherrypickError as e:
        err_console.print(f"\n[red]❌ Error:[/] {escape(str(e))}")
        raise SystemExit(1) from e

    if outcome.status == ReleaseStatus.COMPLETED:
        _print_summary(outcome, console)


def _print_summary(outcome: ReleaseOutcome, console: Console) -> None:
    result = outcome.result
    lines = [f"[green]Cherry-picked {result.applied if result else 0} commit(s)[/]"]
    if result and result.skipped:
        lines.append(f"[yellow]Skipped {result.skipped} commit(s)[/]")
    if outcome.next_version is not None:
        lines.append(
            f"Version: [cyan]{outcome.current_version}[/] → [green]{outcome.next_version}[/] "
            f"({outcome.bump})"
        )
    if outcome.release_branch:
        lines.append(f"Release branch: [cyan]{escape(outcome.release_branch)}[/]")

    console.print(
        Panel(
            "\n".join(lines),
            title="[green]Release Complete[/]",
            border_style="green",
        )
    )
