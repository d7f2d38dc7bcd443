"""Configuration management for cherrypick-interactive."""

from __future__ import annotations

from cherrypick_interactive.config.loader import apply_overrides, load_config
from cherrypick_interactive.config.models import (
    BranchesConfig,
    CherrypickConfig,
    ReleaseConfig,
    VersionConfig,
)

__all__ = [
    "BranchesConfig",
    "CherrypickConfig",
    "ReleaseConfig",
    "VersionConfig",
    "apply_overrides",
    "load_config",
]
