"""
Unit tests for configuration loading.

Tests defaults, environment variable overrides, command-line overrides,
validation and layered .env loading.
"""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from binclean.core.cleaner.locations import resolve_cache_locations
from binclean.core.config import BincleanConfig, load_config, load_layered_env
from binclean.core.config.env import default_env_files, read_settings
from binclean.core.config.loader import (
    apply_env_overrides,
    deep_merge,
    get_xdg_config_home,
    get_xdg_state_home,
)
from binclean.core.config.models import CleanerConfig, default_audit_log_path


def unset_env(monkeypatch, *names):
    """Unset variables and restore them after the test, even if code sets them."""
    for name in names:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove binclean variables inherited from the developer's shell."""
    unset_env(monkeypatch, "BINCLEAN_GIT_TIMEOUT", "BINCLEAN_NO_GIT", "BINCLEAN_AUDIT_LOG")


# ==============================================================================
# Helper Functions Tests
# ==============================================================================


class TestDeepMerge:
    """Test the deep_merge helper function."""

    def test_nested_merge(self):
        base = {"git": {"enabled": True, "timeout_seconds": 5}}
        result = deep_merge(base, {"git": {"enabled": False}})
        assert result == {"git": {"enabled": False, "timeout_seconds": 5}}

    def test_base_not_mutated(self):
        base = {"git": {"enabled": True}}
        deep_merge(base, {"git": {"enabled": False}})
        assert base == {"git": {"enabled": True}}

    def test_non_dict_replaces(self):
        result = deep_merge({"cleaner": {"artifact_names": ["bin"]}},
                           {"cleaner": {"artifact_names": ["out"]}})
        assert result["cleaner"]["artifact_names"] == ["out"]


class TestXdgDirectories:
    """XDG base directory lookup."""

    def test_config_home_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_xdg_config_home() == tmp_path

    def test_config_home_default(self, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert get_xdg_config_home() == Path.home() / ".config"

    def test_state_home_default(self, monkeypatch):
        monkeypatch.delenv("XDG_STATE_HOME", raising=False)
        assert get_xdg_state_home() == Path.home() / ".local" / "state"

    def test_audit_log_default_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))
        assert default_audit_log_path() == tmp_path / "binclean" / "removed.log"


# ==============================================================================
# Environment Override Tests
# ==============================================================================


class TestApplyEnvOverrides:
    """Tests for BINCLEAN_* environment variables."""

    def test_no_variables(self):
        base = BincleanConfig().model_dump(mode="json")
        assert apply_env_overrides(base) == base

    def test_git_timeout(self, monkeypatch):
        monkeypatch.setenv("BINCLEAN_GIT_TIMEOUT", "15")
        result = apply_env_overrides({"git": {"enabled": True, "timeout_seconds": 120.0}})
        assert result["git"] == {"enabled": True, "timeout_seconds": 15.0}

    def test_invalid_git_timeout_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("BINCLEAN_GIT_TIMEOUT", "soon")
        result = apply_env_overrides({"git": {"timeout_seconds": 120.0}})
        assert result["git"]["timeout_seconds"] == 120.0
        assert "BINCLEAN_GIT_TIMEOUT" in caplog.text

    def test_non_positive_git_timeout_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("BINCLEAN_GIT_TIMEOUT", "-3")
        result = apply_env_overrides({"git": {"timeout_seconds": 120.0}})
        assert result["git"]["timeout_seconds"] == 120.0
        assert "must be > 0" in caplog.text

    @pytest.mark.parametrize("value", ["1", "true", "yes", "TRUE"])
    def test_no_git_truthy(self, monkeypatch, value):
        monkeypatch.setenv("BINCLEAN_NO_GIT", value)
        result = apply_env_overrides({"git": {"enabled": True}})
        assert result["git"]["enabled"] is False

    @pytest.mark.parametrize("value", ["0", "false", "no", "False"])
    def test_no_git_falsy(self, monkeypatch, value):
        monkeypatch.setenv("BINCLEAN_NO_GIT", value)
        result = apply_env_overrides({"git": {"enabled": True}})
        assert result["git"]["enabled"] is True

    def test_audit_log(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BINCLEAN_AUDIT_LOG", str(tmp_path / "removed.log"))
        result = apply_env_overrides({})
        assert result["audit_log"] == {
            "enabled": True,
            "path": str(tmp_path / "removed.log"),
        }


# ==============================================================================
# load_config Tests
# ==============================================================================


class TestLoadConfig:
    """Tests for the full precedence chain."""

    def test_defaults(self):
        config = load_config()
        assert config.cleaner.artifact_names == ["bin", "obj"]
        assert config.cleaner.skip_names == ["packages"]
        assert config.cleaner.cache_metadata_suffix == ".metadata"
        assert config.git.enabled is True
        assert config.git.timeout_seconds == 120.0
        assert config.audit_log.enabled is False

    def test_env_applied(self, monkeypatch):
        monkeypatch.setenv("BINCLEAN_NO_GIT", "1")
        assert load_config().git.enabled is False

    def test_overrides_beat_env(self, monkeypatch):
        monkeypatch.setenv("BINCLEAN_GIT_TIMEOUT", "15")
        config = load_config({"git": {"timeout_seconds": 5}})
        assert config.git.timeout_seconds == 5.0

    def test_audit_log_override(self, tmp_path):
        config = load_config({"audit_log": {"enabled": True, "path": str(tmp_path / "a.log")}})
        assert config.audit_log.enabled is True
        assert config.audit_log.path == tmp_path / "a.log"

    def test_invalid_override_raises(self):
        with pytest.raises(ValidationError):
            load_config({"git": {"timeout_seconds": 0}})


class TestCleanerConfig:
    """Validation of directory names."""

    def test_rejects_paths(self):
        with pytest.raises(ValidationError, match="Invalid directory name"):
            CleanerConfig(artifact_names=["bin/Debug"])

    def test_rejects_empty_name(self):
        with pytest.raises(ValidationError):
            CleanerConfig(skip_names=[""])

    def test_custom_names(self):
        assert CleanerConfig(artifact_names=["out"]).artifact_names == ["out"]


# ==============================================================================
# Layered .env Tests
# ==============================================================================


class TestLoadLayeredEnv:
    """Tests for load_layered_env precedence and key filtering."""

    def test_project_file_overrides_user_file(self, tmp_path):
        user_env = tmp_path / "user.env"
        user_env.write_text("BINCLEAN_GIT_TIMEOUT=30\nBINCLEAN_NO_GIT=1\n")
        project_env = tmp_path / "project.env"
        project_env.write_text("BINCLEAN_GIT_TIMEOUT=5\n")

        applied = load_layered_env([user_env, project_env])

        assert applied == {"BINCLEAN_GIT_TIMEOUT": "5", "BINCLEAN_NO_GIT": "1"}
        assert os.environ["BINCLEAN_GIT_TIMEOUT"] == "5"
        assert os.environ["BINCLEAN_NO_GIT"] == "1"

    def test_existing_environment_wins(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BINCLEAN_GIT_TIMEOUT", "30")
        project_env = tmp_path / ".env"
        project_env.write_text("BINCLEAN_GIT_TIMEOUT=5\n")

        applied = load_layered_env([project_env])

        assert applied == {}
        assert os.environ["BINCLEAN_GIT_TIMEOUT"] == "30"

    def test_other_keys_ignored(self, monkeypatch, tmp_path):
        """A .env cannot redirect the cache locations."""
        unset_env(monkeypatch, "USERPROFILE", "LOCALAPPDATA", "COMMONPROGRAMFILES(X86)")
        project_env = tmp_path / ".env"
        project_env.write_text(
            "LOCALAPPDATA=/somewhere/else\nUSERPROFILE=/home/other\nBINCLEAN_NO_GIT=1\n"
        )

        applied = load_layered_env([project_env])

        assert applied == {"BINCLEAN_NO_GIT": "1"}
        assert "LOCALAPPDATA" not in os.environ
        assert "USERPROFILE" not in os.environ
        locations = resolve_cache_locations(tmp_path)
        assert [loc.path for loc in locations if loc.resolved] == [tmp_path / "packages"]

    def test_read_settings_filters_keys(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("BINCLEAN_AUDIT_LOG=~/removed.log\nPATH=/evil\n")

        assert read_settings(env_file) == {"BINCLEAN_AUDIT_LOG": "~/removed.log"}

    def test_default_files(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

        assert default_env_files(tmp_path / "project") == [
            tmp_path / "xdg" / "binclean" / ".env",
            tmp_path / "project" / ".env",
        ]

    def test_project_dir_defaults_to_cwd(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        (tmp_path / ".env").write_text("BINCLEAN_NO_GIT=1\n")

        load_layered_env()

        assert os.environ["BINCLEAN_NO_GIT"] == "1"

    def test_missing_files_ignored(self, tmp_path):
        assert load_layered_env([tmp_path / "nope.env", tmp_path / "missing.env"]) == {}
