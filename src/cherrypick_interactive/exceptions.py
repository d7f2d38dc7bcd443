"""Exception hierarchy for cherrypick-interactive.

All errors raised by the package derive from ``CherrypickError`` so the CLI
can turn them into a readable message and a non-zero exit status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from cherrypick_interactive.core.cherry_pick import CherryPickResult


class CherrypickError(Exception):
    """Base class for all cherrypick-interactive errors."""


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(CherrypickError):
    """Configuration could not be loaded."""


class ConfigNotFoundError(ConfigError):
    """A configuration file was expected but not found."""


class ConfigValidationError(ConfigError):
    """Configuration values are invalid."""


# =============================================================================
# Version control
# =============================================================================


class VcsError(CherrypickError):
    """Generic version-control failure."""


class NotAGitRepositoryError(VcsError):
    """The given path is not inside a git work tree."""


class VcsCommandError(VcsError):
    """A git subcommand exited with a non-zero status."""

    def __init__(self, args: Sequence[str], exit_code: int, stderr: str = "") -> None:
        self.command = list(args)
        self.exit_code = exit_code
        self.stderr = stderr
        message = f"git {' '.join(self.command)} failed with exit code {exit_code}"
        if stderr:
            message = f"{message}: {stderr}"
        super().__init__(message)


class BranchAlreadyExistsError(VcsError):
    """The release branch already exists locally."""

    def __init__(self, branch: str) -> None:
        self.branch = branch
        super().__init__(
            f'Release branch "{branch}" already exists locally. '
            "Delete it or choose a different version."
        )


class GitHubCliError(CherrypickError):
    """The GitHub CLI is missing or failed."""


# =============================================================================
# Versioning
# =============================================================================


class InvalidVersionFormatError(CherrypickError):
    """A version string is not of the form X.Y.Z."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f'Invalid version "{value}". Expected X.Y.Z')


class MissingPrerequisiteError(CherrypickError):
    """A requested feature needs an input or option that was not given."""


class NothingSelectedError(CherrypickError):
    """The operator selected no commits."""


# =============================================================================
# Cherry-picking
# =============================================================================


class CherryPickError(CherrypickError):
    """Base class for failures of the cherry-pick sequence."""


class SequenceAbortedError(CherryPickError):
    """The operator aborted the cherry-pick sequence."""

    def __init__(self, sha: str) -> None:
        self.sha = sha
        super().__init__(f"Cherry-pick aborted by user on {sha[:7]}.")


class NothingAppliedError(CherryPickError):
    """Every commit was skipped, so there is nothing to release."""

    def __init__(self, result: CherryPickResult) -> None:
        self.result = result
        super().__init__(
            f"No commits were cherry-picked ({result.skipped} skipped). Aborting."
        )


# =============================================================================
# Project files
# =============================================================================


class ProjectError(CherrypickError):
    """A project file could not be read or updated."""


class VersionNotFoundError(ProjectError):
    """No version field was found in a version file."""


class ChangelogError(CherrypickError):
    """The changelog could not be written."""
