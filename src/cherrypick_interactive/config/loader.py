"""Configuration loading.

Settings live in the ``[tool.cherrypick-interactive]`` table of the nearest
``pyproject.toml``. Command-line options are merged on top with
``apply_overrides``.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from cherrypick_interactive.config.models import CherrypickConfig
from cherrypick_interactive.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

TOOL_NAME = "cherrypick-interactive"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find the nearest pyproject.toml, walking up from ``start``.

    Raises:
        ConfigNotFoundError: If no pyproject.toml exists up to the filesystem root
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_tool_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.cherrypick-interactive]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(TOOL_NAME, {})


def load_config(path: Path | None = None) -> CherrypickConfig:
    """Load configuration for the project at ``path``.

    Falls back to defaults when there is no pyproject.toml or no tool table.

    Raises:
        ConfigValidationError: If the tool table has invalid values
    """
    try:
        pyproject_path = find_pyproject_toml(path)
    except ConfigNotFoundError:
        logger.debug("no pyproject.toml found, using defaults")
        return CherrypickConfig()

    data = extract_tool_config(load_pyproject_toml(pyproject_path))
    logger.debug("loaded [tool.%s] from %s", TOOL_NAME, pyproject_path)
    return _validate(data, source=str(pyproject_path))


def apply_overrides(config: CherrypickConfig, overrides: dict[str, Any]) -> CherrypickConfig:
    """Merge nested ``overrides`` (e.g. from the CLI) into ``config``.

    Keys whose value is None are ignored, so unset options keep the
    configured value.

    Raises:
        ConfigValidationError: If the merged values are invalid
    """
    merged = _deep_merge(config.model_dump(), overrides)
    return _validate(merged, source="command line")


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _validate(data: dict[str, Any], *, source: str) -> CherrypickConfig:
    try:
        return CherrypickConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {source}:\n{e}") from e
