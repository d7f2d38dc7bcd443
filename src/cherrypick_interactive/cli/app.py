"""Command-line entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
from click.core import ParameterSource
from rich.console import Console

from cherrypick_interactive import __version__
from cherrypick_interactive.cli.commands.run import run_cherrypick

# CLI parameter -> location in the nested configuration
OPTION_TARGETS: dict[str, tuple[str, ...]] = {
    "dev": ("branches", "source"),
    "main_branch": ("branches", "target"),
    "since": ("branches", "since"),
    "fetch": ("fetch",),
    "all_yes": ("all_yes",),
    "dry_run": ("dry_run",),
    "semantic_versioning": ("version", "semantic_versioning"),
    "current_version": ("version", "current_version"),
    "version_file": ("version", "file"),
    "version_commit_message": ("version", "commit_message"),
    "create_release": ("release", "create"),
    "push_release": ("release", "push"),
    "draft_pr": ("release", "draft_pr"),
    "changelog_path": ("release", "changelog_path"),
}


def build_overrides(ctx: click.Context, params: dict[str, Any]) -> dict[str, Any]:
    """Nest the options that were given explicitly on the command line."""
    overrides: dict[str, Any] = {}
    for name, target in OPTION_TARGETS.items():
        if ctx.get_parameter_source(name) in (None, ParameterSource.DEFAULT):
            continue
        node = overrides
        for key in target[:-1]:
            node = node.setdefault(key, {})
        node[target[-1]] = params[name]
    return overrides


@click.command(
    name="cherrypick-interactive",
    context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 120},
)
@click.option(
    "--dev",
    default="origin/dev",
    show_default=True,
    help="Source branch (contains commits you want).",
)
@click.option(
    "--main",
    "main_branch",
    default="origin/main",
    show_default=True,
    help="Comparison branch (commits present here will be filtered out).",
)
@click.option(
    "--since",
    default="1 week ago",
    show_default=True,
    help='Time window passed to git --since (e.g. "2 weeks ago", "1 month ago").',
)
@click.option(
    "--fetch/--no-fetch",
    default=True,
    show_default=True,
    help="Run 'git fetch --prune' first.",
)
@click.option(
    "--all-yes",
    is_flag=True,
    default=False,
    help="Non-interactive: cherry-pick ALL missing commits (oldest → newest).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print what would be cherry-picked and exit.",
)
@click.option(
    "--semantic-versioning/--no-semantic-versioning",
    default=True,
    show_default=True,
    help="Compute next semantic version from selected commits.",
)
@click.option(
    "--current-version",
    default=None,
    help="Current version (X.Y.Z). Overrides the version file.",
)
@click.option(
    "--create-release/--no-create-release",
    default=True,
    show_default=True,
    help="Create release/<computed-version> from --main before cherry-picking.",
)
@click.option(
    "--push-release/--no-push-release",
    default=True,
    show_default=True,
    help="Commit the version bump, push the release branch and open a PR.",
)
@click.option(
    "--draft-pr",
    is_flag=True,
    default=False,
    help="Create the release PR as a draft.",
)
@click.option(
    "--version-file",
    type=click.Path(path_type=Path),
    default=Path("package.json"),
    show_default=True,
    help="JSON or TOML file holding the current version.",
)
@click.option(
    "--version-commit-message",
    default="chore(release): bump version to {{version}}",
    show_default=True,
    help="Commit message template; {{version}} is replaced.",
)
@click.option(
    "--changelog-path",
    type=click.Path(path_type=Path),
    default=Path("RELEASE_CHANGELOG.md"),
    show_default=True,
    help="Where to write the release changelog (also the PR body).",
)
@click.option(
    "-C",
    "--path",
    "path",
    type=click.Path(file_okay=False),
    default=None,
    help="Run as if started in this directory.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log every git command.")
@click.version_option(__version__, "--version", prog_name="cherrypick-interactive")
@click.pass_context
def main(ctx: click.Context, path: str | None, verbose: bool, **params: Any) -> None:
    """Cherry-pick commits missing from --main onto a new release branch.

    Commits are compared by subject line, so commits that were rebased or
    cherry-picked before are recognised as already present.
    """
    console = Console()
    err_console = Console(stderr=True)
    run_cherrypick(path, build_overrides(ctx, params), verbose, console, err_console)
