"""connfs Core - Shared utilities and infrastructure.

Import specific functions from submodules:
    from connfs.core.cache import CacheConfig, LRUCache
    from connfs.core.config import ConfigManager
    from connfs.core import constants
    from connfs.core import errors
    from connfs.core.logging import Logger, get_logger
    from connfs.core import validators
"""
