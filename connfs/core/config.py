#!/usr/bin/env python3
"""Hierarchical configuration manager for connfs.

This module provides configuration management with:
- 6-level precedence hierarchy
- YAML configuration files
- Environment variable overrides
- Thread-safe operations
- Deep merging of nested sections
- Change watchers

Example:
    >>> config = ConfigManager()
    >>> config.load_file("connfs.yaml")
    >>> config.get("connfs.scheme", default="pvfs")
    >>> config.add_watcher(on_config_change)
"""

import copy
import os
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

from connfs.core.constants import VIRTUAL_SCHEME, ErrorCode, Limits
from connfs.core.errors import ConnFSError
from connfs.core.logging import get_logger

ENV_PREFIX = "CONNFS_"
ENV_NESTING_SEPARATOR = "__"


class ConfigSource(Enum):
    """Configuration source precedence levels."""

    COMPILED_DEFAULTS = 1  # Lowest precedence
    SYSTEM_CONFIG = 2
    USER_CONFIG = 3
    ENVIRONMENT = 4
    CLI_ARGS = 5
    RUNTIME = 6  # Highest precedence


class ConfigError(ConnFSError):
    """Configuration error."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        super().__init__(message, error_code)


class ConfigManager:
    """Thread-safe hierarchical configuration manager.

    Manages configuration from multiple sources with precedence:
    1. Compiled defaults (lowest)
    2. System config (/etc/connfs/config.yaml)
    3. User config (~/.config/connfs/config.yaml)
    4. Environment variables (CONNFS_SECTION__KEY)
    5. CLI arguments
    6. Runtime updates (highest)
    """

    DEFAULT_CONFIG: Dict[str, Any] = {
        "connfs": {
            "scheme": VIRTUAL_SCHEME,
            "connections": [],
            "cache": {
                "enabled": True,
                "max_filesystems": Limits.DEFAULT_MAX_FILESYSTEMS,
                "ttl_seconds": Limits.DEFAULT_FILESYSTEM_TTL_SECONDS,
            },
            "logging": {
                "level": "INFO",
                "file": None,
            },
        }
    }

    def __init__(self, config_file: Optional[str] = None, load_environment: bool = True):
        """Initialize configuration manager.

        Args:
            config_file: Optional config file to load
            load_environment: Read CONNFS_* environment variables
        """
        self._config: Dict[ConfigSource, Dict[str, Any]] = {}
        self._lock = threading.RLock()
        self._watchers: List[Callable[[Dict[str, Any]], None]] = []
        self._files: Dict[str, ConfigSource] = {}
        self._logger = get_logger("connfs.config")

        self._config[ConfigSource.COMPILED_DEFAULTS] = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file:
            self.load_file(config_file)

        if load_environment:
            self._load_environment()

    def load_file(self, file_path: str, source: ConfigSource = ConfigSource.USER_CONFIG) -> None:
        """Load configuration from YAML file.

        Args:
            file_path: Path to YAML config file
            source: Configuration source level

        Raises:
            ConfigError: If file cannot be loaded or parsed
        """
        path = Path(file_path).expanduser().resolve()

        if not path.exists():
            raise ConfigError(f"Config file not found: {file_path}", ErrorCode.NOT_FOUND)

        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML parse error in {file_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Error loading config {file_path}: {e}", ErrorCode.INTERNAL_ERROR) from e

        if not isinstance(config_data, dict):
            raise ConfigError(f"Invalid config format in {file_path}")

        with self._lock:
            self._config[source] = config_data
            self._files[str(path)] = source

    def load_dict(self, config_data: Dict[str, Any], source: ConfigSource = ConfigSource.RUNTIME) -> None:
        """Load configuration from dictionary.

        Args:
            config_data: Configuration dictionary
            source: Configuration source level
        """
        with self._lock:
            self._config[source] = copy.deepcopy(config_data)

    def _load_environment(self) -> None:
        """Load configuration from environment variables.

        Environment variables in format: CONNFS_SECTION__KEY=value
        Example: CONNFS_CACHE__TTL_SECONDS=60 sets connfs.cache.ttl_seconds
        """
        env_config: Dict[str, Any] = {}

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            parts = [part for part in key[len(ENV_PREFIX):].lower().split(ENV_NESTING_SEPARATOR) if part]
            if not parts:
                continue

            current = env_config
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = self._parse_env_value(value)

        if env_config:
            with self._lock:
                self._config[ConfigSource.ENVIRONMENT] = {"connfs": env_config}

    def _parse_env_value(self, value: str) -> Any:
        """Parse environment variable value to bool, int, float or str."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Dot-separated key path (e.g., "connfs.cache.ttl_seconds")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        with self._lock:
            for source in sorted(self._config.keys(), key=lambda s: s.value, reverse=True):
                value = self._get_nested(self._config[source], key)
                if value is not None:
                    return value

            return default

    def _get_nested(self, config: Dict[str, Any], key: str) -> Optional[Any]:
        current: Any = config
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

    def set(self, key: str, value: Any, source: ConfigSource = ConfigSource.RUNTIME) -> None:
        """Set configuration value and notify watchers.

        Args:
            key: Dot-separated key path
            value: Value to set
            source: Configuration source level
        """
        with self._lock:
            current = self._config.setdefault(source, {})
            parts = key.split(".")
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = value

        self._notify_watchers()

    def get_all(self) -> Dict[str, Any]:
        """Get merged configuration from all sources.

        Returns:
            Merged configuration dictionary
        """
        with self._lock:
            merged: Dict[str, Any] = {}
            for source in sorted(self._config.keys(), key=lambda s: s.value):
                merged = self._deep_merge(merged, self._config[source])
            return merged

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def reload(self) -> None:
        """Reload all file-based configurations.

        Raises:
            ConfigError: If a previously loaded file can no longer be read
        """
        with self._lock:
            files = list(self._files.items())

        for file_path, source in files:
            self.load_file(file_path, source)

        self._notify_watchers()

    def add_watcher(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        """Add configuration change watcher.

        Args:
            callback: Function called with merged config on changes
        """
        with self._lock:
            self._watchers.append(callback)

    def remove_watcher(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        with self._lock:
            if callback in self._watchers:
                self._watchers.remove(callback)

    def _notify_watchers(self) -> None:
        merged = self.get_all()
        with self._lock:
            watchers = list(self._watchers)

        for watcher in watchers:
            try:
                watcher(merged)
            except Exception as e:
                # remaining watchers are still notified
                self._logger.exception("Config watcher failed", e, watcher=getattr(watcher, "__name__", watcher))

    def clear(self, source: Optional[ConfigSource] = None) -> None:
        """Clear configuration.

        Args:
            source: Specific source to clear, or None for all except defaults
        """
        with self._lock:
            if source:
                if source != ConfigSource.COMPILED_DEFAULTS:
                    self._config.pop(source, None)
            else:
                for s in [s for s in self._config if s != ConfigSource.COMPILED_DEFAULTS]:
                    del self._config[s]
