"""Release changelog generation.

The changelog lists the commits about to be cherry-picked, grouped by the
version bump each one implies. It is written to a Markdown file that later
becomes the body of the release pull request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from cherrypick_interactive.core.commits import classify_message
from cherrypick_interactive.core.version import BumpType
from cherrypick_interactive.exceptions import ChangelogError
from cherrypick_interactive.vcs.git import SHORT_SHA_LENGTH

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from cherrypick_interactive.core.version import Version
    from cherrypick_interactive.vcs.git import GitRepository

# Section order in the rendered document
SECTION_TITLES = {
    BumpType.MAJOR: "### ⚠️ Breaking Changes",
    BumpType.MINOR: "### ✨ Features",
    BumpType.PATCH: "### 🐛 Fixes",
    BumpType.NONE: "### 🧹 Others",
}


@dataclass
class ChangelogDocument:
    """Commits of one release grouped into changelog sections."""

    version: Version | None
    released_on: date
    sections: dict[BumpType, list[str]] = field(
        default_factory=lambda: {bump: [] for bump in SECTION_TITLES}
    )

    @property
    def header(self) -> str:
        day = self.released_on.isoformat()
        if self.version is None:
            return f"## Release ({day})"
        return f"## Release {self.version} ({day})"

    def add(self, bump: BumpType, sha: str, subject: str) -> None:
        self.sections[bump].append(f"{sha[:SHORT_SHA_LENGTH]} {subject}")

    def render(self) -> str:
        """Render as Markdown; empty sections are left out."""
        blocks = []
        for bump, title in SECTION_TITLES.items():
            lines = self.sections.get(bump)
            if lines:
                blocks.append("\n".join([title, *lines]))
        return f"{self.header}\n\n" + "\n\n".join(blocks) + "\n"


def build_changelog(
    repo: GitRepository,
    version: Version | None,
    hashes: Sequence[str],
    *,
    today: date | None = None,
) -> ChangelogDocument:
    """Classify the given commits into a changelog.

    Args:
        repo: Repository to read commit messages from
        version: Version being released
        hashes: Commits in the order they will be applied
        today: Release date (defaults to the current UTC date)

    Returns:
        The grouped changelog
    """
    document = ChangelogDocument(
        version=version,
        released_on=today or datetime.now(UTC).date(),
    )

    for sha in hashes:
        message = repo.commit_message(sha)
        subject = message.splitlines()[0].strip() if message else ""
        document.add(classify_message(message), sha, subject)

    return document


def write_changelog(document: ChangelogDocument, path: Path) -> Path:
    """Write the rendered changelog to ``path``.

    Raises:
        ChangelogError: If the file cannot be written
    """
    try:
        path.write_text(document.render(), encoding="utf-8")
    except OSError as e:
        raise ChangelogError(f"Could not write changelog to {path}: {e}") from e
    return path
