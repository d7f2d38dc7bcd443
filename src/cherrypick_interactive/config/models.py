"""Configuration models.

Defaults reproduce the command-line defaults, so a project without a
``[tool.cherrypick-interactive]`` table behaves exactly like a bare
``cherrypick-interactive`` invocation.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

VERSION_PLACEHOLDER = "{{version}}"


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class BranchesConfig(_StrictModel):
    """Which branches are compared."""

    source: str = Field(default="origin/dev", description="Branch holding the wanted commits")
    target: str = Field(
        default="origin/main",
        description="Comparison branch; commits whose subject appears here are filtered out",
    )
    since: str = Field(default="1 week ago", description="Time window passed to git --since")
    remote: str = "origin"


class VersionConfig(_StrictModel):
    """Semantic versioning settings."""

    semantic_versioning: bool = True
    current_version: str | None = None
    file: Path = Path("package.json")
    commit_message: str = f"chore(release): bump version to {VERSION_PLACEHOLDER}"


class ReleaseConfig(_StrictModel):
    """Release branch and pull request settings."""

    create: bool = True
    push: bool = True
    draft_pr: bool = False
    branch_prefix: str = "release/"
    changelog_path: Path = Path("RELEASE_CHANGELOG.md")


class CherrypickConfig(_StrictModel):
    """Root configuration."""

    fetch: bool = True
    all_yes: bool = False
    dry_run: bool = False
    branches: BranchesConfig = Field(default_factory=BranchesConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    release: ReleaseConfig = Field(default_factory=ReleaseConfig)

    @property
    def base_branch(self) -> str:
        """Target branch without its remote prefix (``origin/main`` -> ``main``)."""
        prefix = f"{self.branches.remote}/"
        target = self.branches.target
        return target[len(prefix) :] if target.startswith(prefix) else target

    def release_branch_for(self, version: str) -> str:
        return f"{self.release.branch_prefix}{version}"

    def version_commit_message(self, version: str) -> str:
        return self.version.commit_message.replace(VERSION_PLACEHOLDER, version)
