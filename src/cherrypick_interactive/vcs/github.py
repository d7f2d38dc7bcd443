"""Pull request creation via the GitHub CLI (``gh``).

``gh`` is called as a subprocess attached to the terminal so that its own
prompts and output reach the operator.
"""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING

from cherrypick_interactive.exceptions import GitHubCliError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def build_pr_args(
    base: str,
    head: str,
    title: str,
    body_file: Path,
    *,
    draft: bool = False,
) -> list[str]:
    """Build the ``gh pr create`` argument vector."""
    args = [
        "pr",
        "create",
        "--base",
        base,
        "--head",
        head,
        "--title",
        title,
        "--body-file",
        str(body_file),
    ]
    if draft:
        args.append("--draft")
    return args


def create_pull_request(
    cwd: Path,
    base: str,
    head: str,
    title: str,
    body_file: Path,
    *,
    draft: bool = False,
) -> None:
    """Open a pull request from ``head`` into ``base``.

    Args:
        cwd: Repository root
        base: Branch the PR merges into (without remote prefix)
        head: Branch holding the changes
        title: PR title
        body_file: Markdown file used as the PR body
        draft: Create the PR as a draft

    Raises:
        GitHubCliError: If gh is not installed or exits non-zero
    """
    args = ["gh", *build_pr_args(base, head, title, body_file, draft=draft)]
    logger.debug("%s", " ".join(args))

    try:
        result = subprocess.run(args, cwd=cwd, check=False)
    except FileNotFoundError as e:
        raise GitHubCliError("gh not found. Install it from https://cli.github.com") from e

    if result.returncode != 0:
        raise GitHubCliError(f"gh exited with code {result.returncode}")
