"""Tests for the command-line entry point."""

from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner
from conftest import output_of
from rich.console import Console

from cherrypick_interactive import __version__
from cherrypick_interactive.cli.app import main
from cherrypick_interactive.cli.commands.run import run_cherrypick
from cherrypick_interactive.core.cherry_pick import CherryPickResult
from cherrypick_interactive.core.release import ReleaseOutcome, ReleaseStatus
from cherrypick_interactive.core.version import BumpType, Version
from cherrypick_interactive.exceptions import (
    NotAGitRepositoryError,
    NothingSelectedError,
    ProjectError,
    SequenceAbortedError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

RUN = "cherrypick_interactive.cli.app.run_cherrypick"


@pytest.fixture
def err_console() -> Console:
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)


class TestOptions:
    """Tests for option parsing."""

    def test_defaults_give_no_overrides(self):
        """Options left at their defaults do not override the config file."""
        with patch(RUN) as mock_run:
            result = CliRunner().invoke(main, [])

        assert result.exit_code == 0
        path, overrides, verbose, _, _ = mock_run.call_args.args
        assert path is None
        assert overrides == {}
        assert verbose is False

    def test_explicit_options(self):
        args = [
            "--dev", "origin/develop",
            "--main", "origin/stable",
            "--since", "2 days ago",
            "--no-fetch",
            "--all-yes",
            "--current-version", "1.2.0",
            "--version-file", "pyproject.toml",
            "--draft-pr",
            "-C", ".",
            "-v",
        ]  # fmt: skip

        with patch(RUN) as mock_run:
            result = CliRunner().invoke(main, args)

        assert result.exit_code == 0, result.output
        path, overrides, verbose, _, _ = mock_run.call_args.args
        assert path == "."
        assert verbose is True
        assert overrides == {
            "branches": {
                "source": "origin/develop",
                "target": "origin/stable",
                "since": "2 days ago",
            },
            "fetch": False,
            "all_yes": True,
            "version": {"current_version": "1.2.0", "file": Path("pyproject.toml")},
            "release": {"draft_pr": True},
        }

    def test_explicit_default_value_overrides(self):
        """A flag given explicitly wins even when it equals the default."""
        with patch(RUN) as mock_run:
            CliRunner().invoke(main, ["--create-release", "--no-push-release"])

        overrides = mock_run.call_args.args[1]
        assert overrides == {"release": {"create": True, "push": False}}

    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self):
        result = CliRunner().invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "--semantic-versioning / --no-semantic-versioning" in result.output


class TestRunCherrypick:
    """Tests for run_cherrypick() error handling."""

    @pytest.fixture
    def controller(self) -> Iterator[MagicMock]:
        with (
            patch("cherrypick_interactive.cli.commands.run.GitRepository"),
            patch("cherrypick_interactive.cli.commands.run.ReleaseController") as mock_cls,
        ):
            yield mock_cls.return_value

    def test_invalid_config(self, tmp_path: Path, console: Console, err_console: Console):
        (tmp_path / "pyproject.toml").write_text(
            "[tool.cherrypick-interactive]\nunknown = 1\n", encoding="utf-8"
        )

        with pytest.raises(SystemExit) as excinfo:
            run_cherrypick(str(tmp_path), {}, False, console, err_console)

        assert excinfo.value.code == 1
        assert "Error loading config:" in output_of(err_console)

    def test_not_a_repository(self, tmp_path: Path, console: Console, err_console: Console):
        with (
            patch(
                "cherrypick_interactive.cli.commands.run.GitRepository",
                side_effect=NotAGitRepositoryError(f"Not a git repository: {tmp_path}"),
            ),
            pytest.raises(SystemExit) as excinfo,
        ):
            run_cherrypick(str(tmp_path), {}, False, console, err_console)

        assert excinfo.value.code == 1
        assert "Not a git repository" in output_of(err_console)

    def test_nothing_selected(
        self, controller: MagicMock, tmp_path: Path, console: Console, err_console: Console
    ):
        controller.run.side_effect = NothingSelectedError("No commits selected. Exiting.")

        with pytest.raises(SystemExit) as excinfo:
            run_cherrypick(str(tmp_path), {}, False, console, err_console)

        assert excinfo.value.code == 1
        assert "No commits selected. Exiting." in output_of(console)

    def test_error_is_reported(
        self, controller: MagicMock, tmp_path: Path, console: Console, err_console: Console
    ):
        controller.run.side_effect = SequenceAbortedError("c2" + "2" * 38)

        with pytest.raises(SystemExit) as excinfo:
            run_cherrypick(str(tmp_path), {}, False, console, err_console)

        assert excinfo.value.code == 1
        assert "❌ Error: Cherry-pick aborted by user on c222222." in output_of(err_console)

    def test_summary(
        self, controller: MagicMock, tmp_path: Path, console: Console, err_console: Console
    ):
        controller.run.return_value = ReleaseOutcome(
            status=ReleaseStatus.COMPLETED,
            bump=BumpType.MINOR,
            current_version=Version(1, 2, 0),
            next_version=Version(1, 3, 0),
            release_branch="release/1.3.0",
            result=CherryPickResult(applied=2, skipped=1),
        )

        run_cherrypick(str(tmp_path), {}, False, console, err_console)

        output = output_of(console)
        assert "Release Complete" in output
        assert "Cherry-picked 2 commit(s)" in output
        assert "Skipped 1 commit(s)" in output
        assert "1.2.0 → 1.3.0 (minor)" in output
        assert "release/1.3.0" in output

    def test_dry_run_has_no_summary(
        self, controller: MagicMock, tmp_path: Path, console: Console, err_console: Console
    ):
        controller.run.return_value = ReleaseOutcome(status=ReleaseStatus.DRY_RUN)

        run_cherrypick(str(tmp_path), {}, False, console, err_console)

        assert "Release Complete" not in output_of(console)

    def test_version_file_error_is_reported(
        self, controller: MagicMock, tmp_path: Path, console: Console, err_console: Console
    ):
        controller.run.side_effect = ProjectError("Could not write package.json: denied")

        with pytest.raises(SystemExit) as excinfo:
            run_cherrypick(str(tmp_path), {}, False, console, err_console)

        assert excinfo.value.code == 1
        assert "❌ Error: Could not write package.json: denied" in output_of(err_console)
