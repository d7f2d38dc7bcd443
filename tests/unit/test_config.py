"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from cherrypick_interactive.config.loader import (
    apply_overrides,
    extract_tool_config,
    find_pyproject_toml,
    load_config,
    load_pyproject_toml,
)
from cherrypick_interactive.config.models import (
    BranchesConfig,
    CherrypickConfig,
    ReleaseConfig,
    VersionConfig,
)
from cherrypick_interactive.exceptions import ConfigNotFoundError, ConfigValidationError

PYPROJECT = """\
[project]
name = "demo"
version = "1.2.0"

[tool.cherrypick-interactive]
fetch = false

[tool.cherrypick-interactive.branches]
source = "origin/develop"
since = "2 weeks ago"

[tool.cherrypick-interactive.release]
draft_pr = true
"""


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    (tmp_path / "pyproject.toml").write_text(PYPROJECT, encoding="utf-8")
    return tmp_path


class TestCherrypickConfig:
    """Tests for CherrypickConfig model."""

    def test_default_config(self):
        """Defaults match the command-line defaults."""
        config = CherrypickConfig()

        assert config.fetch is True
        assert config.all_yes is False
        assert config.dry_run is False
        assert config.branches.source == "origin/dev"
        assert config.branches.target == "origin/main"
        assert config.branches.since == "1 week ago"
        assert config.version.semantic_versioning is True
        assert config.version.current_version is None
        assert config.version.file == Path("package.json")
        assert config.release.create is True
        assert config.release.push is True
        assert config.release.draft_pr is False
        assert config.release.changelog_path == Path("RELEASE_CHANGELOG.md")

    def test_base_branch_strips_remote(self):
        assert CherrypickConfig().base_branch == "main"

    def test_base_branch_without_remote(self):
        config = CherrypickConfig(branches=BranchesConfig(target="main"))
        assert config.base_branch == "main"

    def test_base_branch_other_remote(self):
        config = CherrypickConfig(branches=BranchesConfig(target="upstream/main", remote="upstream"))
        assert config.base_branch == "main"

    def test_release_branch_for(self):
        assert CherrypickConfig().release_branch_for("1.3.0") == "release/1.3.0"

    def test_custom_branch_prefix(self):
        config = CherrypickConfig(release=ReleaseConfig(branch_prefix="rel-"))
        assert config.release_branch_for("2.0.0") == "rel-2.0.0"

    def test_version_commit_message(self):
        assert (
            CherrypickConfig().version_commit_message("1.3.0")
            == "chore(release): bump version to 1.3.0"
        )

    def test_version_commit_message_every_placeholder(self):
        config = CherrypickConfig(
            version=VersionConfig(commit_message="v{{version}} ({{version}})")
        )
        assert config.version_commit_message("1.0.0") == "v1.0.0 (1.0.0)"

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="extra"):
            CherrypickConfig.model_validate({"colour": "blue"})


class TestLoadPyprojectToml:
    """Tests for load_pyproject_toml()."""

    def test_load_valid_toml(self, project_dir: Path):
        data = load_pyproject_toml(project_dir / "pyproject.toml")

        assert data["project"]["name"] == "demo"

    def test_load_nonexistent_raises(self, tmp_path: Path):
        """Loading nonexistent file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            load_pyproject_toml(tmp_path / "nonexistent.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        path = tmp_path / "pyproject.toml"
        path.write_text("[tool\nbroken = ", encoding="utf-8")

        with pytest.raises(ConfigValidationError, match="Invalid TOML"):
            load_pyproject_toml(path)


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml()."""

    def test_find_in_current_dir(self, project_dir: Path):
        assert find_pyproject_toml(project_dir) == project_dir / "pyproject.toml"

    def test_find_in_parent_dir(self, project_dir: Path):
        """Find pyproject.toml in a parent directory."""
        subdir = project_dir / "src" / "package"
        subdir.mkdir(parents=True)

        assert find_pyproject_toml(subdir) == project_dir / "pyproject.toml"

    def test_not_found_raises(self, tmp_path: Path):
        with pytest.raises(ConfigNotFoundError):
            find_pyproject_toml(tmp_path)


class TestExtractToolConfig:
    """Tests for extract_tool_config()."""

    def test_extract_existing_config(self):
        pyproject = {"tool": {"cherrypick-interactive": {"fetch": False}}}
        assert extract_tool_config(pyproject) == {"fetch": False}

    def test_extract_missing_config(self):
        """Extract returns empty dict when config missing."""
        assert extract_tool_config({"project": {"name": "test"}}) == {}


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_with_config(self, project_dir: Path):
        config = load_config(project_dir)

        assert config.fetch is False
        assert config.branches.source == "origin/develop"
        assert config.branches.since == "2 weeks ago"
        assert config.branches.target == "origin/main"
        assert config.release.draft_pr is True

    def test_defaults_without_tool_table(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")

        assert load_config(tmp_path) == CherrypickConfig()

    def test_defaults_without_pyproject(self, tmp_path: Path):
        assert load_config(tmp_path) == CherrypickConfig()

    def test_invalid_value_raises(self, tmp_path: Path):
        (tmp_path / "pyproject.toml").write_text(
            "[tool.cherrypick-interactive]\nfetch = 'sometimes'\n", encoding="utf-8"
        )

        with pytest.raises(ConfigValidationError, match="pyproject.toml"):
            load_config(tmp_path)


class TestApplyOverrides:
    """Tests for apply_overrides()."""

    def test_nested_override(self, project_dir: Path):
        """Overrides replace single keys and keep their siblings."""
        config = apply_overrides(
            load_config(project_dir),
            {"branches": {"since": "3 days ago"}, "all_yes": True},
        )

        assert config.branches.since == "3 days ago"
        assert config.branches.source == "origin/develop"
        assert config.all_yes is True
        assert config.release.draft_pr is True

    def test_none_values_ignored(self):
        config = apply_overrides(CherrypickConfig(), {"version": {"current_version": None}})

        assert config == CherrypickConfig()

    def test_false_is_applied(self):
        config = apply_overrides(CherrypickConfig(), {"release": {"create": False}})

        assert config.release.create is False

    def test_path_override(self):
        config = apply_overrides(CherrypickConfig(), {"version": {"file": "pyproject.toml"}})

        assert config.version.file == Path("pyproject.toml")

    def test_invalid_override_raises(self):
        with pytest.raises(ConfigValidationError, match="command line"):
            apply_overrides(CherrypickConfig(), {"branches": {"nope": 1}})
