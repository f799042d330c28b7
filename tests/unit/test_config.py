"""Tests for YAML config loading and Settings precedence."""

import os
from unittest.mock import patch

import pytest

from pluginx.config import (
    CONFIG_KEYS,
    Settings,
    get_config_path,
    load_yaml_config,
    save_yaml_config,
)


@pytest.fixture
def home(tmp_path):
    """A pluginx home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


class TestYamlConfig:
    def test_load_missing(self, home):
        assert load_yaml_config(get_config_path(home)) == {}

    def test_save_and_load_roundtrip(self, home):
        save_yaml_config(get_config_path(home), {"log_level": "DEBUG", "git_timeout": 30})
        loaded = load_yaml_config(get_config_path(home))
        assert loaded == {"log_level": "DEBUG", "git_timeout": 30}

    def test_save_creates_parent_dirs(self, tmp_path):
        path = get_config_path(tmp_path / "deep" / "home")
        save_yaml_config(path, {"log_level": "INFO"})
        assert path.exists()

    def test_load_invalid_yaml_returns_empty(self, home):
        get_config_path(home).write_text("[ invalid yaml {{{")
        assert load_yaml_config(get_config_path(home)) == {}

    def test_load_non_dict_yaml_returns_empty(self, home):
        get_config_path(home).write_text("- just\n- a\n- list\n")
        assert load_yaml_config(get_config_path(home)) == {}


class TestSettingsYamlIntegration:
    """Run in a clean directory so a stray .env is not picked up."""

    def test_settings_loads_yaml_fallback(self, home, tmp_path, monkeypatch):
        save_yaml_config(get_config_path(home), {"log_level": "DEBUG", "gemini_validate": True})
        monkeypatch.chdir(tmp_path)
        env = {"PLUGINX_HOME": str(home), "PATH": os.environ.get("PATH", "")}
        with patch.dict(os.environ, env, clear=True):
            s = Settings()
            assert s.log_level == "DEBUG"
            assert s.gemini_validate is True

    def test_env_vars_override_yaml(self, home, tmp_path, monkeypatch):
        save_yaml_config(get_config_path(home), {"git_timeout": 10})
        monkeypatch.chdir(tmp_path)
        env = {
            "PLUGINX_HOME": str(home),
            "PLUGINX_GIT_TIMEOUT": "99",
            "PATH": os.environ.get("PATH", ""),
        }
        with patch.dict(os.environ, env, clear=True):
            assert Settings().git_timeout == 99.0

    def test_unknown_and_consent_keys_ignored(self, home, tmp_path, monkeypatch):
        save_yaml_config(
            get_config_path(home), {"consent_level": "bypass", "surprise": 1}
        )
        monkeypatch.chdir(tmp_path)
        env = {"PLUGINX_HOME": str(home), "PATH": os.environ.get("PATH", "")}
        with patch.dict(os.environ, env, clear=True):
            s = Settings()
            assert not hasattr(s, "consent_level")
            assert not hasattr(s, "surprise")

    def test_path_properties(self, home, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        env = {"PLUGINX_HOME": str(home), "PATH": os.environ.get("PATH", "")}
        with patch.dict(os.environ, env, clear=True):
            s = Settings()
            assert s.config_path == home / "config.yaml"
            assert s.state_path == home / "state.json"
            assert s.sources_dir == home / "sources"
            assert s.output_root == home.parent / "pluginx-translations"

    def test_translations_dir_from_yaml(self, home, tmp_path, monkeypatch):
        out = tmp_path / "out"
        save_yaml_config(get_config_path(home), {"translations_dir": str(out)})
        monkeypatch.chdir(tmp_path)
        env = {"PLUGINX_HOME": str(home), "PATH": os.environ.get("PATH", "")}
        with patch.dict(os.environ, env, clear=True):
            assert Settings().output_root == out


class TestConfigKeys:
    def test_known_keys_include_essentials(self):
        assert "translations_dir" in CONFIG_KEYS
        assert "log_level" in CONFIG_KEYS
        assert "consent_level" in CONFIG_KEYS
