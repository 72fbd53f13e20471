#!/usr/bin/env python3
"""Composition root for connfs.

This module handles:
- Component initialization (ConfigManager, connection directory, storage driver, resolver)
- Resolution requests against the assembled resolver
- Cleanup on shutdown

Example:
    >>> from connfs.main import ConnFSMain
    >>> with ConnFSMain(config, logger) as app:
    ...     vf = app.resolve("pvfs://reports/2024/q1.csv")
"""

import sys
from typing import Any, Dict, Optional

from connfs.connections.directory import InMemoryConnectionDirectory
from connfs.context.variables import ContextMap
from connfs.core.cache import CacheConfig
from connfs.core.config import ConfigManager
from connfs.core.constants import VIRTUAL_SCHEME, ConfigKey, ErrorCode, Limits
from connfs.core.errors import ConnFSError
from connfs.core.logging import Logger
from connfs.core.validators import validate_cache_config
from connfs.drivers.fsspec_driver import FsspecStorageDriver
from connfs.provider.file_object import VirtualFile
from connfs.provider.resolver import VirtualFileResolver


class ConnFSMain:
    """
    Main class for connfs.

    Owns the connection directory, the storage driver and the resolver for
    the lifetime of one application.
    """

    def __init__(self, config: Dict[str, Any], logger: Logger):
        """
        Initialize the controller.

        Args:
            config: The "connfs" configuration section
            logger: Logger instance
        """
        self.config_dict = config
        self.logger = logger

        # Components
        self.config_manager: Optional[ConfigManager] = None
        self.directory: Optional[InMemoryConnectionDirectory] = None
        self.driver: Optional[FsspecStorageDriver] = None
        self.resolver: Optional[VirtualFileResolver] = None

    def initialize_components(self) -> None:
        """
        Initialize all components.

        Creates and configures:
        - ConfigManager
        - InMemoryConnectionDirectory
        - FsspecStorageDriver
        - VirtualFileResolver

        Raises:
            ValidationError: If the connection or cache configuration is invalid
        """
        self.logger.info("Initializing components...")

        # 1. Configuration Manager
        self.logger.debug("Creating ConfigManager")
        self.config_manager = ConfigManager(load_environment=False)
        self.config_manager.load_dict({ConfigKey.ROOT: self.config_dict})

        # 2. Connection directory
        self.logger.debug("Creating connection directory")
        connections = self.config_manager.get(f"{ConfigKey.ROOT}.{ConfigKey.CONNECTIONS}", [])
        self.directory = InMemoryConnectionDirectory.from_config(connections)
        for name in self.directory.names():
            self.logger.debug("Registered connection", connection=name)

        # 3. Storage driver
        self.logger.debug("Creating FsspecStorageDriver")
        self.driver = FsspecStorageDriver(cache_config=self._build_cache_config(), logger=self.logger)

        # 4. Resolver
        scheme = self.config_manager.get(f"{ConfigKey.ROOT}.{ConfigKey.SCHEME}", VIRTUAL_SCHEME)
        self.logger.debug("Creating VirtualFileResolver", scheme=scheme)
        self.resolver = VirtualFileResolver(self.directory, self.driver, scheme=scheme, logger=self.logger)

        self.logger.info("All components initialized successfully", connections=len(self.directory))

    def _build_cache_config(self) -> CacheConfig:
        cache = self.config_manager.get(f"{ConfigKey.ROOT}.{ConfigKey.CACHE}", {})
        validate_cache_config(cache)

        return CacheConfig(
            max_entries=cache.get(ConfigKey.CACHE_MAX_FILESYSTEMS, Limits.DEFAULT_MAX_FILESYSTEMS),
            ttl_seconds=cache.get(ConfigKey.CACHE_TTL, Limits.DEFAULT_FILESYSTEM_TTL_SECONDS),
            enabled=cache.get(ConfigKey.CACHE_ENABLED, True),
        )

    def resolve(self, uri: str, variables: ContextMap = None) -> VirtualFile:
        """
        Resolve a virtual URI.

        Args:
            uri: Virtual URI
            variables: Context variables for this request

        Returns:
            VirtualFile

        Raises:
            ConnFSError: If components are not initialized or resolution fails
        """
        if self.resolver is None:
            raise ConnFSError("Components are not initialized", ErrorCode.INTERNAL_ERROR)
        return self.resolver.resolve(uri, variables)

    def get_stats(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = {}
        if self.directory is not None:
            stats["connections"] = len(self.directory)
        if self.driver is not None:
            stats["filesystem_cache"] = self.driver.cache_stats()
        return stats

    def shutdown(self) -> None:
        """
        Release resources.

        Performs:
        - Log final statistics
        - Filesystem cache clear
        - Component cleanup
        """
        self.logger.info("Shutting down...")

        if self.driver is not None:
            self.logger.info("Final statistics", **self.get_stats())
            self.driver.clear_cache()
            self.logger.debug("Filesystem cache cleared")

        self.resolver = None
        self.driver = None
        self.directory = None
        self.config_manager = None

        self.logger.info("Shutdown complete")

    def __enter__(self) -> "ConnFSMain":
        self.initialize_components()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()


def main():
    """
    Entry point when run as standalone script.

    Typically called via cli.py, but can be run directly for testing.
    """
    from connfs.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
