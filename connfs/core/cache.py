#!/usr/bin/env python3
"""Thread-safe LRU cache with TTL support for connfs.

Storage drivers use this cache to hold native filesystem instances keyed by
``(protocol, ContextKey)``. It provides:
- LRU eviction policy
- TTL-based expiration
- Entry-count limits
- Atomic get-or-create so equivalent keys never build two values
- Cache statistics

Example:
    >>> cache = LRUCache(CacheConfig(max_entries=16, ttl_seconds=60.0))
    >>> fs = cache.get_or_create(("memory", key), lambda: make_filesystem())
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple


@dataclass
class CacheEntry:
    """Single cache entry with metadata."""

    key: Hashable
    value: Any
    timestamp: float = field(default_factory=time.time)
    access_count: int = 0
    last_access: float = field(default_factory=time.time)

    def is_expired(self, ttl: float) -> bool:
        """Check if entry has expired.

        Args:
            ttl: Time-to-live in seconds

        Returns:
            True if expired
        """
        return time.time() - self.timestamp > ttl

    def touch(self) -> None:
        """Update access time and count."""
        self.last_access = time.time()
        self.access_count += 1


@dataclass
class CacheConfig:
    """Configuration for a cache."""

    max_entries: int
    ttl_seconds: float
    enabled: bool = True

    def validate(self) -> None:
        """Validate cache configuration."""
        if self.max_entries <= 0:
            raise ValueError(f"max_entries must be positive: {self.max_entries}")
        if self.ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive: {self.ttl_seconds}")


class LRUCache:
    """Thread-safe LRU cache with TTL and entry limits.

    Keys must be hashable and compare by value. Callers are responsible for
    normalizing keys (see :func:`connfs.context.equivalence.canonical_context`)
    so that equal content produces equal keys.
    """

    def __init__(self, config: CacheConfig):
        """Initialize LRU cache.

        Args:
            config: Cache configuration
        """
        self.config = config
        self.config.validate()
        self._cache: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()

        # Statistics
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    def get(self, key: Hashable) -> Optional[Any]:
        """Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found/expired
        """
        with self._lock:
            if not self.config.enabled:
                self._misses += 1
                return None

            if key not in self._cache:
                self._misses += 1
                return None

            entry = self._cache[key]

            if entry.is_expired(self.config.ttl_seconds):
                del self._cache[key]
                self._expirations += 1
                self._misses += 1
                return None

            # Move to end (most recently used)
            self._cache.move_to_end(key)
            entry.touch()

            self._hits += 1
            return entry.value

    def set(self, key: Hashable, value: Any) -> None:
        """Set value in cache.

        Args:
            key: Cache key
            value: Value to cache
        """
        if not self.config.enabled:
            return

        with self._lock:
            self._cache.pop(key, None)

            while self._cache and len(self._cache) >= self.config.max_entries:
                self._evict_lru()

            self._cache[key] = CacheEntry(key=key, value=value)

    def get_or_create(self, key: Hashable, factory: Callable[[], Any]) -> Any:
        """Return the cached value for ``key``, building it on a miss.

        Lookup, creation and insertion happen under one lock, so two threads
        asking for equal keys get the same value and ``factory`` runs once.
        Exceptions from ``factory`` propagate and nothing is cached.

        Args:
            key: Cache key
            factory: Zero-argument callable producing the value

        Returns:
            Cached or newly created value
        """
        with self._lock:
            value = self.get(key)
            if value is not None:
                return value

            value = factory()
            self.set(key, value)
            return value

    def invalidate(self, key: Hashable) -> bool:
        """Remove entry from cache.

        Args:
            key: Cache key

        Returns:
            True if entry was removed
        """
        with self._lock:
            return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._cache

    def _evict_lru(self) -> None:
        """Evict least recently used entry."""
        # First item is LRU
        self._cache.popitem(last=False)
        self._evictions += 1

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Cache statistics
        """
        with self._lock:
            total_requests = self._hits + self._misses
            hit_rate = self._hits / total_requests if total_requests > 0 else 0

            return {
                "entries": len(self._cache),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": hit_rate,
                "evictions": self._evictions,
                "expirations": self._expirations,
            }

    def get_entries(self) -> List[Tuple[Hashable, float]]:
        """Get all cache keys with their age.

        Returns:
            List of (key, age) tuples
        """
        with self._lock:
            current_time = time.time()
            return [(key, current_time - entry.timestamp) for key, entry in self._cache.items()]
