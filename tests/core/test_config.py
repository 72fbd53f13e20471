#!/usr/bin/env python3
"""Comprehensive tests for the configuration manager."""

import os
from unittest.mock import MagicMock

import pytest
import yaml

from connfs.core.config import ENV_PREFIX, ConfigError, ConfigManager, ConfigSource
from connfs.core.constants import ErrorCode


@pytest.fixture
def manager(monkeypatch):
    for key in [k for k in os.environ if k.startswith(ENV_PREFIX)]:
        monkeypatch.delenv(key)
    return ConfigManager()


class TestConfigSource:
    """Tests for ConfigSource enum."""

    def test_precedence_order(self):
        """Test that sources are ordered lowest to highest."""
        ordered = sorted(ConfigSource, key=lambda s: s.value)
        assert ordered[0] == ConfigSource.COMPILED_DEFAULTS
        assert ordered[-1] == ConfigSource.RUNTIME
        assert ConfigSource.ENVIRONMENT.value < ConfigSource.CLI_ARGS.value


class TestDefaults:
    """Tests for compiled defaults."""

    def test_defaults(self, manager):
        """Test default values."""
        assert manager.get("connfs.scheme") == "pvfs"
        assert manager.get("connfs.connections") == []
        assert manager.get("connfs.cache.enabled") is True
        assert manager.get("connfs.logging.level") == "INFO"

    def test_missing_key_default(self, manager):
        """Test the fallback for unknown keys."""
        assert manager.get("connfs.nothing.here", "fallback") == "fallback"
        assert manager.get("connfs.scheme.deeper") is None

    def test_defaults_not_shared(self, manager):
        """Test that instances do not share the defaults dictionary."""
        manager._config[ConfigSource.COMPILED_DEFAULTS]["connfs"]["scheme"] = "other"
        assert ConfigManager.DEFAULT_CONFIG["connfs"]["scheme"] == "pvfs"


class TestLoadFile:
    """Tests for YAML file loading."""

    def test_load_file(self, manager, config_file):
        """Test loading a configuration file."""
        manager.load_file(str(config_file))
        assert manager.get("connfs.cache.max_filesystems") == 8
        assert manager.get("connfs.logging.level") == "WARNING"
        assert len(manager.get("connfs.connections")) == 3

    def test_constructor_loads_file(self, config_file):
        """Test passing the file to the constructor."""
        manager = ConfigManager(config_file=str(config_file), load_environment=False)
        assert manager.get("connfs.cache.ttl_seconds") == 60

    def test_missing_file(self, manager, temp_dir):
        """Test that a missing file is reported as NOT_FOUND."""
        with pytest.raises(ConfigError) as exc_info:
            manager.load_file(str(temp_dir / "missing.yaml"))
        assert exc_info.value.error_code == ErrorCode.NOT_FOUND

    def test_invalid_yaml(self, manager, temp_dir):
        """Test a file that is not valid YAML."""
        path = temp_dir / "bad.yaml"
        path.write_text("connfs: [unclosed\n")
        with pytest.raises(ConfigError, match="YAML parse error"):
            manager.load_file(str(path))

    def test_non_mapping(self, manager, temp_dir):
        """Test a file whose top level is not a mapping."""
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Invalid config format"):
            manager.load_file(str(path))

    def test_reload(self, manager, temp_dir):
        """Test reloading picks up file changes and notifies watchers."""
        path = temp_dir / "connfs.yaml"
        path.write_text(yaml.dump({"connfs": {"scheme": "first"}}))
        manager.load_file(str(path))
        watcher = MagicMock()
        manager.add_watcher(watcher)

        path.write_text(yaml.dump({"connfs": {"scheme": "second"}}))
        manager.reload()

        assert manager.get("connfs.scheme") == "second"
        watcher.assert_called_once()


class TestEnvironment:
    """Tests for environment variable overrides."""

    def test_nested_override(self, monkeypatch):
        """Test CONNFS_SECTION__KEY mapping."""
        monkeypatch.setenv("CONNFS_CACHE__TTL_SECONDS", "30")
        monkeypatch.setenv("CONNFS_CACHE__ENABLED", "false")
        monkeypatch.setenv("CONNFS_SCHEME", "vfs")
        manager = ConfigManager()
        assert manager.get("connfs.cache.ttl_seconds") == 30
        assert manager.get("connfs.cache.enabled") is False
        assert manager.get("connfs.scheme") == "vfs"

    def test_environment_disabled(self, monkeypatch):
        """Test that the environment can be ignored."""
        monkeypatch.setenv("CONNFS_SCHEME", "vfs")
        manager = ConfigManager(load_environment=False)
        assert manager.get("connfs.scheme") == "pvfs"

    def test_environment_beats_file(self, monkeypatch, config_file):
        """Test precedence of environment over the user file."""
        monkeypatch.setenv("CONNFS_LOGGING__LEVEL", "DEBUG")
        manager = ConfigManager(config_file=str(config_file))
        assert manager.get("connfs.logging.level") == "DEBUG"

    @pytest.mark.parametrize(
        "raw,expected",
        [("true", True), ("No", False), ("12", 12), ("1.5", 1.5), ("text", "text")],
    )
    def test_parse_env_value(self, manager, raw, expected):
        """Test value coercion."""
        assert manager._parse_env_value(raw) == expected


class TestRuntime:
    """Tests for set, get_all, watchers and clear."""

    def test_set_and_precedence(self, manager):
        """Test that runtime values override everything."""
        manager.load_dict({"connfs": {"scheme": "cli"}}, ConfigSource.CLI_ARGS)
        assert manager.get("connfs.scheme") == "cli"
        manager.set("connfs.scheme", "runtime")
        assert manager.get("connfs.scheme") == "runtime"

    def test_get_all_deep_merge(self, manager):
        """Test that nested sections are merged rather than replaced."""
        manager.load_dict({"connfs": {"cache": {"max_filesystems": 2}}}, ConfigSource.CLI_ARGS)
        merged = manager.get_all()
        assert merged["connfs"]["cache"]["max_filesystems"] == 2
        assert merged["connfs"]["cache"]["enabled"] is True
        assert merged["connfs"]["scheme"] == "pvfs"

    def test_load_dict_copies(self, manager):
        """Test that later changes to the input do not leak in."""
        data = {"connfs": {"scheme": "one"}}
        manager.load_dict(data)
        data["connfs"]["scheme"] = "two"
        assert manager.get("connfs.scheme") == "one"

    def test_watchers(self, manager):
        """Test watcher notification and removal."""
        watcher = MagicMock()
        manager.add_watcher(watcher)
        manager.set("connfs.scheme", "a")
        merged = watcher.call_args[0][0]
        assert merged["connfs"]["scheme"] == "a"

        manager.remove_watcher(watcher)
        manager.remove_watcher(watcher)
        manager.set("connfs.scheme", "b")
        assert watcher.call_count == 1

    def test_failing_watcher(self, manager):
        """Test that one failing watcher does not block the others."""
        failing = MagicMock(side_effect=RuntimeError("boom"))
        working = MagicMock()
        manager.add_watcher(failing)
        manager.add_watcher(working)
        manager.set("connfs.scheme", "x")
        working.assert_called_once()

    def test_clear(self, manager):
        """Test clearing sources."""
        manager.set("connfs.scheme", "runtime")
        manager.load_dict({"connfs": {"scheme": "cli"}}, ConfigSource.CLI_ARGS)

        manager.clear(ConfigSource.RUNTIME)
        assert manager.get("connfs.scheme") == "cli"

        manager.clear(ConfigSource.COMPILED_DEFAULTS)
        manager.clear()
        assert manager.get("connfs.scheme") == "pvfs"
