"""Semantic version parsing and bumping.

Only plain ``X.Y.Z`` versions are supported, and versions only move forward.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from cherrypick_interactive.exceptions import InvalidVersionFormatError

_VERSION_RE = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")


class BumpType(StrEnum):
    """Granularity of a version increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"

    @property
    def priority(self) -> int:
        """Rank used to pick the strongest bump (higher wins)."""
        return _PRIORITY[self]


_PRIORITY = {
    BumpType.NONE: 0,
    BumpType.PATCH: 1,
    BumpType.MINOR: 2,
    BumpType.MAJOR: 3,
}


@dataclass(frozen=True, order=True)
class Version:
    """A ``major.minor.patch`` version."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse ``X.Y.Z``.

        Args:
            text: Version string; surrounding whitespace is ignored

        Returns:
            Parsed version

        Raises:
            InvalidVersionFormatError: If text is not three dot-separated integers
        """
        match = _VERSION_RE.fullmatch(str(text or "").strip())
        if not match:
            raise InvalidVersionFormatError(text)
        return cls(int(match.group(1)), int(match.group(2)), int(match.group(3)))

    def bump(self, bump_type: BumpType | None) -> Version:
        """Return the version incremented by ``bump_type``.

        Lower components reset to zero; ``NONE`` (or None) leaves it unchanged.
        """
        if bump_type == BumpType.MAJOR:
            return Version(self.major + 1, 0, 0)
        if bump_type == BumpType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        if bump_type == BumpType.PATCH:
            return Version(self.major, self.minor, self.patch + 1)
        return self


def parse_version(text: str) -> Version:
    """Shortcut for ``Version.parse``."""
    return Version.parse(text)
