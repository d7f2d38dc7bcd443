"""cherrypick-interactive: cherry-pick missing commits onto a release branch."""

from __future__ import annotations

__version__ = "0.1.0"
