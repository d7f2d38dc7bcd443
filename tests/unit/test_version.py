"""Tests for version parsing and bumping."""

from __future__ import annotations

import pytest

from cherrypick_interactive.core.version import BumpType, Version, parse_version
from cherrypick_interactive.exceptions import InvalidVersionFormatError


class TestVersionParse:
    """Tests for Version.parse()."""

    def test_parse_simple(self):
        """Parse a plain X.Y.Z version."""
        assert Version.parse("1.2.3") == Version(1, 2, 3)

    def test_parse_strips_whitespace(self):
        """Surrounding whitespace is ignored."""
        assert Version.parse("  1.2.0\n") == Version(1, 2, 0)

    def test_parse_multi_digit(self):
        """Components may have several digits."""
        assert Version.parse("10.20.300") == Version(10, 20, 300)

    @pytest.mark.parametrize(
        "text",
        ["1.2", "1.2.3.4", "v1.2.3", "", "a.b.c", "1.-2.3", "1.2.3-rc1", "1..3"],
    )
    def test_invalid_raises(self, text: str):
        """Anything but three dot-separated integers is rejected."""
        with pytest.raises(InvalidVersionFormatError):
            Version.parse(text)

    def test_error_names_value(self):
        """The error message shows the bad value."""
        with pytest.raises(InvalidVersionFormatError, match=r'"1\.2"'):
            parse_version("1.2")

    def test_str(self):
        """Versions render as X.Y.Z."""
        assert str(Version(1, 3, 0)) == "1.3.0"


class TestVersionBump:
    """Tests for Version.bump()."""

    def test_major_resets_lower(self):
        assert Version(1, 2, 3).bump(BumpType.MAJOR) == Version(2, 0, 0)

    def test_minor_resets_patch(self):
        assert Version(1, 2, 3).bump(BumpType.MINOR) == Version(1, 3, 0)

    def test_patch(self):
        assert Version(1, 2, 3).bump(BumpType.PATCH) == Version(1, 2, 4)

    def test_none_unchanged(self):
        """NONE and None leave the version as it is."""
        version = Version(1, 2, 3)
        assert version.bump(BumpType.NONE) == version
        assert version.bump(None) == version

    @pytest.mark.parametrize("text", ["0.0.0", "1.2.3", "9.0.9", "0.99.0"])
    def test_bumps_are_monotonic(self, text: str):
        """major > minor > patch > unchanged for any version."""
        version = Version.parse(text)

        assert (
            version.bump(BumpType.MAJOR)
            > version.bump(BumpType.MINOR)
            > version.bump(BumpType.PATCH)
            > version
        )


class TestBumpType:
    """Tests for BumpType ordering."""

    def test_priority_order(self):
        """major > minor > patch > none."""
        ordered = sorted(BumpType, key=lambda bump: bump.priority, reverse=True)
        assert ordered == [BumpType.MAJOR, BumpType.MINOR, BumpType.PATCH, BumpType.NONE]

    def test_str_value(self):
        assert str(BumpType.MINOR) == "minor"
