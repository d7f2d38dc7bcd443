"""Reading and bumping the ``version`` field of a project file.

Two formats are supported:

- JSON documents such as ``package.json``: the top-level ``version`` key.
  The document is rewritten with two-space indentation and key order kept.
- TOML documents such as ``pyproject.toml``: ``[project].version`` or
  ``[tool.poetry].version``. The file is edited with a targeted regex
  replacement so comments and formatting survive.
"""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

from cherrypick_interactive.exceptions import ProjectError, VersionNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

# Sections that may hold a TOML version, in lookup order
_TOML_SECTIONS = (r"\[project\]", r"\[tool\.poetry\]")
_TOML_VERSION_LINE = r'^(version\s*=\s*)["\'][^"\']+["\']'


def read_version(path: Path) -> str:
    """Read the version from a JSON or TOML project file.

    Raises:
        ProjectError: If the file is missing, unreadable or of an unknown type
        VersionNotFoundError: If the file has no version field
    """
    if not path.is_file():
        raise ProjectError(f"Version file not found: {path}")

    if path.suffix == ".json":
        return get_json_version(path)
    if path.suffix == ".toml":
        return get_toml_version(path)
    raise ProjectError(f"Unsupported version file type: {path.name} (expected .json or .toml)")


def write_version(path: Path, new_version: str) -> Path:
    """Set the version in a JSON or TOML project file, in place.

    Raises:
        ProjectError: If the file is missing, unreadable or of an unknown type
        VersionNotFoundError: If the file has no version field
    """
    if not path.is_file():
        raise ProjectError(f"Version file not found: {path}")

    if path.suffix == ".json":
        update_json_version(path, new_version)
    elif path.suffix == ".toml":
        update_toml_version(path, new_version)
    else:
        raise ProjectError(
            f"Unsupported version file type: {path.name} (expected .json or .toml)"
        )
    return path


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ProjectError(f"Could not read {path}: {e}") from e


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ProjectError(f"Could not write {path}: {e}") from e


# =============================================================================
# JSON
# =============================================================================


def _load_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as e:
        raise ProjectError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ProjectError(f"Expected a JSON object in {path}")
    return data


def get_json_version(path: Path) -> str:
    data = _load_json(path)
    version = data.get("version")
    if not version:
        raise VersionNotFoundError(f'No "version" field found in {path}')
    return str(version)


def update_json_version(path: Path, new_version: str) -> None:
    """Rewrite ``path`` with its top-level ``version`` replaced."""
    data = _load_json(path)
    if "version" not in data:
        raise VersionNotFoundError(f'No "version" field found in {path}')
    data["version"] = new_version
    _write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")


# =============================================================================
# TOML
# =============================================================================


def get_toml_version(path: Path) -> str:
    content = _read_text(path)

    for section in _TOML_SECTIONS:
        section_match = re.search(
            rf"^{section}.*?(?=^\[|\Z)", content, re.MULTILINE | re.DOTALL
        )
        if not section_match:
            continue
        match = re.search(
            r'^version\s*=\s*["\']([^"\']+)["\']',
            section_match.group(0),
            re.MULTILINE,
        )
        if match:
            return match.group(1)

    raise VersionNotFoundError(
        f"Could not find version in {path}. Expected [project].version or [tool.poetry].version."
    )


def update_toml_version(path: Path, new_version: str) -> None:
    """Replace the version line of the first section that has one."""
    content = _read_text(path)

    def replace_version(match: re.Match[str]) -> str:
        return re.sub(
            _TOML_VERSION_LINE,
            rf'\g<1>"{new_version}"',
            match.group(0),
            count=1,
            flags=re.MULTILINE,
        )

    for section in _TOML_SECTIONS:
        # The section body runs up to the next table header or EOF.
        section_pattern = rf"^{section}.*?(?=^\[|\Z)"
        section_match = re.search(section_pattern, content, re.MULTILINE | re.DOTALL)
        if not section_match or not re.search(
            _TOML_VERSION_LINE, section_match.group(0), re.MULTILINE
        ):
            continue

        new_content = re.sub(
            section_pattern,
            replace_version,
            content,
            count=1,
            flags=re.MULTILINE | re.DOTALL,
        )
        _write_text(path, new_content)
        return

    raise VersionNotFoundError(
        f"Could not find version to update in {path}. "
        "Expected [project].version or [tool.poetry].version."
    )
