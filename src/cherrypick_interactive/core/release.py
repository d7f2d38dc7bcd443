"""Release orchestration.

``ReleaseController.run`` sequences a full release:

1. fetch remotes (optional)
2. find commits on the source branch missing from the target branch
3. let the operator pick commits, then order them oldest first
4. stop here on a dry run
5. compute the next version and write the changelog
6. create the release branch and cherry-pick onto it
7. bump the version file, commit, push and open a pull request
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from rich.markup import escape

from cherrypick_interactive.core.changelog import build_changelog, write_changelog
from cherrypick_interactive.core.cherry_pick import CherryPicker
from cherrypick_interactive.core.commits import calculate_bump
from cherrypick_interactive.core.differ import fetch_branch_state
from cherrypick_interactive.core.version import BumpType, Version
from cherrypick_interactive.exceptions import (
    BranchAlreadyExistsError,
    MissingPrerequisiteError,
    NothingSelectedError,
    VcsError,
)
from cherrypick_interactive.project.version_file import read_version, write_version
from cherrypick_interactive.vcs.git import SHORT_SHA_LENGTH
from cherrypick_interactive.vcs.github import create_pull_request

if TYPE_CHECKING:
    from datetime import date

    from rich.console import Console

    from cherrypick_interactive.config.models import CherrypickConfig
    from cherrypick_interactive.core.cherry_pick import CherryPickResult
    from cherrypick_interactive.core.differ import MissingCommits
    from cherrypick_interactive.core.selection import SelectionProvider
    from cherrypick_interactive.vcs.git import Commit, GitRepository

logger = logging.getLogger(__name__)


class PullRequestCreator(Protocol):
    def __call__(
        self,
        cwd: Path,
        base: str,
        head: str,
        title: str,
        body_file: Path,
        *,
        draft: bool = False,
    ) -> None: ...


class ReleaseStatus(StrEnum):
    NOTHING_MISSING = "nothing-missing"
    DRY_RUN = "dry-run"
    COMPLETED = "completed"


@dataclass
class ReleaseOutcome:
    """What a release run did."""

    status: ReleaseStatus
    missing: list[Commit] = field(default_factory=list)
    ordered: list[str] = field(default_factory=list)
    bump: BumpType = BumpType.NONE
    current_version: Version | None = None
    next_version: Version | None = None
    release_branch: str | None = None
    result: CherryPickResult | None = None
    final_branch: str | None = None


class ReleaseController:
    """Drive one release from branch comparison to pull request."""

    def __init__(
        self,
        repo: GitRepository,
        config: CherrypickConfig,
        provider: SelectionProvider,
        console: Console,
        err_console: Console | None = None,
        *,
        pr_creator: PullRequestCreator = create_pull_request,
        today: date | None = None,
    ) -> None:
        self.repo = repo
        self.config = config
        self.provider = provider
        self.console = console
        self.err_console = err_console or console
        self.pr_creator = pr_creator
        self.today = today

    def run(self) -> ReleaseOutcome:
        """Run the release.

        Returns:
            Outcome describing how far the run went

        Raises:
            MissingPrerequisiteError: If options conflict or no version is known
            NothingSelectedError: If the operator picks no commits
            BranchAlreadyExistsError: If the release branch exists locally
            SequenceAbortedError: If the operator aborts a cherry-pick
            NothingAppliedError: If every commit was skipped
            VcsCommandError: If any other git command fails
        """
        config = self.config
        self._check_prerequisites()

        if config.fetch:
            self.console.print("[dim]Fetching remotes (git fetch --prune)...[/]")
            self.repo.fetch(prune=True)

        current_branch = self.repo.current_branch()

        self.console.print(f"[dim]Comparing subjects since {escape(config.branches.since)}[/]")
        self.console.print(f"[dim]Dev:  {escape(config.branches.source)}[/]")
        self.console.print(f"[dim]Main: {escape(config.branches.target)}[/]")

        missing = fetch_branch_state(
            self.repo,
            config.branches.source,
            config.branches.target,
            config.branches.since,
        )
        if not missing:
            self.console.print("[green]✅ No missing commits found in the selected window.[/]")
            return ReleaseOutcome(status=ReleaseStatus.NOTHING_MISSING)

        ordered = missing.order_oldest_first(self._select(missing))
        outcome = ReleaseOutcome(
            status=ReleaseStatus.DRY_RUN,
            missing=list(missing.commits),
            ordered=ordered,
        )

        if config.dry_run:
            self._print_plan(missing, ordered)
            return outcome

        if config.version.semantic_versioning:
            outcome.current_version = self._resolve_current_version()
            self._compute_version(outcome)

        if config.release.create:
            outcome.release_branch = self._create_release_branch(outcome)
            target_branch = outcome.release_branch
        else:
            self.console.print(f"[bold]Base branch: {escape(current_branch)}[/]")
            target_branch = current_branch

        self.console.print(
            f"\n[cyan]Cherry-picking {len(ordered)} commit(s) onto "
            f"{escape(target_branch)} (oldest → newest)...[/]\n"
        )
        picker = CherryPicker(self.repo, self.provider, self.console, self.err_console)
        outcome.result = picker.run(ordered)

        if config.release.push:
            self._publish(outcome)

        outcome.final_branch = self.repo.current_branch()
        outcome.status = ReleaseStatus.COMPLETED
        self.console.print(f"\n[green]✅ Done on {escape(outcome.final_branch)}[/]")
        return outcome

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _check_prerequisites(self) -> None:
        if self.config.release.create and not self.config.version.semantic_versioning:
            raise MissingPrerequisiteError(
                "--create-release requires --semantic-versioning and --current-version X.Y.Z"
            )

    def _select(self, missing: MissingCommits) -> list[str]:
        if self.config.all_yes:
            return missing.hashes

        selected = self.provider.choose_commits(missing.commits)
        if not selected:
            raise NothingSelectedError("No commits selected. Exiting.")
        return selected

    def _print_plan(self, missing: MissingCommits, ordered: list[str]) -> None:
        self.console.print("\n[cyan]--dry-run: would cherry-pick (oldest → newest):[/]")
        for sha in ordered:
            commit = missing.get(sha)
            subject = commit.subject if commit else self.repo.commit_subject(sha)
            self.console.print(f"- [dim]({sha[:SHORT_SHA_LENGTH]})[/] {escape(subject)}")

    def _version_file(self) -> Path:
        path = self.config.version.file
        return path if path.is_absolute() else self.repo.path / path

    def _resolve_current_version(self) -> Version | None:
        text = self.config.version.current_version
        if text is None and self._version_file().is_file():
            text = read_version(self._version_file())
            logger.debug("current version %s read from %s", text, self._version_file())
        return Version.parse(text) if text is not None else None

    def _compute_version(self, outcome: ReleaseOutcome) -> None:
        if outcome.current_version is None:
            raise MissingPrerequisiteError(
                "--semantic-versioning requires --current-version X.Y.Z (or --version-file)"
            )

        # The bump only depends on the commits about to be applied.
        outcome.bump = calculate_bump(self.repo, outcome.ordered)
        outcome.next_version = outcome.current_version.bump(outcome.bump)

        self.console.print("\n[magenta]Semantic Versioning[/]")
        self.console.print(
            f"  Current: [bold]{outcome.current_version}[/]  "
            f"Detected bump: [bold]{outcome.bump}[/]  "
            f"Next: [bold]{outcome.next_version}[/]"
        )

    def _changelog_path(self) -> Path:
        path = self.config.release.changelog_path
        return path if path.is_absolute() else self.repo.path / path

    def _create_release_branch(self, outcome: ReleaseOutcome) -> str:
        if outcome.next_version is None:
            raise MissingPrerequisiteError(
                "Unable to determine release version. Check semantic-versioning inputs."
            )

        branch = self.config.release_branch_for(str(outcome.next_version))
        if self.repo.local_branch_exists(branch):
            raise BranchAlreadyExistsError(branch)

        document = build_changelog(
            self.repo, outcome.next_version, outcome.ordered, today=self.today
        )
        changelog_path = write_changelog(document, self._changelog_path())
        self.console.print(
            f"[dim]✅ Generated changelog for {escape(branch)} → {escape(changelog_path.name)}[/]"
        )

        start_point = self.config.branches.target
        self.console.print(
            f"\n[cyan]Creating [bold]{escape(branch)}[/] from [bold]{escape(start_point)}[/]...[/]"
        )
        self.repo.create_branch(branch, start_point)
        self.console.print(
            f"[green]✓ Ready on [bold]{escape(branch)}[/]. Cherry-picking will apply here.[/]"
        )
        return branch

    def _publish(self, outcome: ReleaseOutcome) -> None:
        branch = outcome.release_branch
        if branch is None or outcome.next_version is None:
            self.err_console.print(
                "[yellow]Skipping push: no release branch was created "
                "(use --create-release).[/]"
            )
            return

        on_branch = self.repo.current_branch()
        if on_branch != branch:
            raise VcsError(
                f"Version update should happen on a release branch. Current: {on_branch}"
            )

        self._commit_version_bump(outcome)
        self.repo.push(branch, self.config.branches.remote)

        self.pr_creator(
            self.repo.path,
            self.config.base_branch,
            branch,
            f"Release {outcome.next_version}",
            self._changelog_path(),
            draft=self.config.release.draft_pr,
        )
        self.console.print(f"[dim]Pushed {escape(branch)} with version bump.[/]")

    def _commit_version_bump(self, outcome: ReleaseOutcome) -> None:
        version_file = self._version_file()
        new_version = str(outcome.next_version)

        if outcome.next_version == outcome.current_version:
            self.console.print(f"[dim]Version unchanged ({new_version}); no bump commit.[/]")
            return
        if not version_file.is_file():
            self.err_console.print(
                f"[yellow]Version file {escape(str(version_file))} not found; "
                "skipping version bump commit.[/]"
            )
            return

        self.console.print(
            f"\n[cyan]Updating {escape(version_file.name)} version → {new_version} ...[/]"
        )
        write_version(version_file, new_version)
        self.repo.add([str(version_file)])
        message = self.config.version_commit_message(new_version)
        self.repo.commit(message)
        self.console.print(
            f"[green]✓ {escape(version_file.name)} updated and committed: {escape(message)}[/]"
        )
