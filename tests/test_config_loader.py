"""Tests for http_tool_sync.config_loader -- config file discovery and merge."""

import textwrap

import pytest
import yaml

from http_tool_sync.config_loader import (
    config_paths,
    ensure_config,
    expand_env,
    load_config,
    read_config_file,
)

# -------------------------------------------------------------------------
# Env var expansion
# -------------------------------------------------------------------------


class TestExpandEnv:
    """Tests for ${VAR} and ${VAR:-default} substitution."""

    def test_replaces_set_var(self, monkeypatch):
        monkeypatch.setenv("SYNC_WINDOW", "80")
        assert expand_env("${SYNC_WINDOW}") == "80"

    def test_default_used_when_unset(self, monkeypatch):
        monkeypatch.delenv("UNSET_VAR_XYZ", raising=False)
        assert expand_env("${UNSET_VAR_XYZ:-50}") == "50"

    def test_unset_without_default_is_empty(self, monkeypatch):
        monkeypatch.delenv("UNSET_VAR_XYZ", raising=False)
        assert expand_env("x${UNSET_VAR_XYZ}y") == "xy"

    def test_empty_env_var_uses_default(self, monkeypatch):
        monkeypatch.setenv("EMPTY_VAR", "")
        assert expand_env("${EMPTY_VAR:-fallback}") == "fallback"

    def test_literal_dollar_brace_no_closing(self):
        assert expand_env("${NO_CLOSE") == "${NO_CLOSE"

    def test_nested_structures(self, monkeypatch):
        monkeypatch.setenv("LOG_DIR", "/var/log")
        data = {"logging": {"file": "${LOG_DIR}/sync.log", "level": None}}
        assert expand_env(data) == {
            "logging": {"file": "/var/log/sync.log", "level": None}
        }

    def test_non_strings_untouched(self):
        data = {"sync": {"debounce_ms": 80}, "items": [1, True]}
        assert expand_env(data) == data


# -------------------------------------------------------------------------
# Single files
# -------------------------------------------------------------------------


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text))
    return path


class TestReadConfigFile:
    def test_mapping(self, tmp_path):
        path = _write(tmp_path / "config.yml", "sync:\n  debounce_ms: 120\n")
        assert read_config_file(path) == {"sync": {"debounce_ms": 120}}

    def test_empty_file(self, tmp_path):
        assert read_config_file(_write(tmp_path / "config.yml", "")) == {}

    def test_non_mapping_is_ignored(self, tmp_path, caplog):
        path = _write(tmp_path / "config.yml", "- a\n- b\n")
        assert read_config_file(path) == {}
        assert "expected a mapping" in caplog.text

    def test_invalid_yaml_raises(self, tmp_path):
        path = _write(tmp_path / "config.yml", "sync: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            read_config_file(path)

    def test_tags_are_not_constructed(self, tmp_path):
        path = _write(tmp_path / "config.yml", "sync: !include other.yml\n")
        with pytest.raises(yaml.YAMLError):
            read_config_file(path)


# -------------------------------------------------------------------------
# Discovery and merge
# -------------------------------------------------------------------------


class TestDiscovery:
    def test_nothing_found(self, isolated_env):
        assert config_paths() == []
        assert load_config() == {}

    def test_precedence_order(self, isolated_env, tmp_path, monkeypatch):
        explicit = _write(tmp_path / "explicit.yml", "sync: {}\n")
        project = _write(isolated_env / ".http_tool_sync" / "config.yml", "{}\n")
        home = _write(
            tmp_path / "home" / ".config" / "http_tool_sync" / "config.yml",
            "{}\n",
        )
        monkeypatch.setenv("HTTP_TOOL_SYNC_CONFIG", str(explicit))
        assert config_paths() == [explicit.resolve(), project, home]

    def test_directory_is_not_a_config_file(self, isolated_env):
        (isolated_env / ".http_tool_sync" / "config.yml").mkdir(parents=True)
        assert config_paths() == []

    def test_project_replaces_whole_sections(self, isolated_env, tmp_path):
        _write(
            tmp_path / "home" / ".config" / "http_tool_sync" / "config.yml",
            """\
            sync:
              debounce_ms: 300
            logging:
              level: DEBUG
            """,
        )
        _write(
            isolated_env / ".http_tool_sync" / "config.yml",
            """\
            sync:
              form_prefix: "tools.0."
            """,
        )
        merged = load_config()
        assert merged["sync"] == {"form_prefix": "tools.0."}
        assert merged["logging"] == {"level": "DEBUG"}

    def test_env_expansion_after_merge(self, isolated_env, monkeypatch):
        _write(
            isolated_env / ".http_tool_sync" / "config.yml",
            "logging:\n  level: ${SYNC_LEVEL:-WARNING}\n",
        )
        monkeypatch.delenv("SYNC_LEVEL", raising=False)
        assert load_config() == {"logging": {"level": "WARNING"}}


class TestEnsureConfig:
    def test_creates_starter(self, isolated_env):
        path = ensure_config()
        assert path == isolated_env / ".http_tool_sync" / "config.yml"
        assert "debounce_ms" in path.read_text()
        assert read_config_file(path) == {}

    def test_returns_existing(self, isolated_env):
        existing = _write(
            isolated_env / ".http_tool_sync" / "config.yml", "sync: {}\n"
        )
        assert ensure_config() == existing
        assert existing.read_text() == "sync: {}\n"

    def test_explicit_target(self, isolated_env, tmp_path):
        target = tmp_path / "elsewhere" / "sync.yml"
        assert ensure_config(target) == target
        assert target.exists()
