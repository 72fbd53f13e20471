"""
connfs Connections: connection directory.

The directory maps connection names to descriptors. The resolver receives a
directory at construction time; there is no process-wide connection manager.
"""

import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from connfs.connections.details import ConnectionDescriptor
from connfs.core.validators import ValidationError


class ConnectionDirectory(ABC):
    """Lookup interface consumed by the resolver."""

    @abstractmethod
    def lookup(self, name: Optional[str]) -> Optional[ConnectionDescriptor]:
        """
        Find the descriptor for a connection name.

        Args:
            name: Connection name, exactly as it appears in a virtual URI

        Returns:
            Descriptor, or None if no such connection exists
        """

    @abstractmethod
    def names(self) -> List[str]:
        """All connection names, sorted."""

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None


class InMemoryConnectionDirectory(ConnectionDirectory):
    """Thread-safe directory holding descriptors in a dictionary."""

    def __init__(self, descriptors: Optional[Iterable[ConnectionDescriptor]] = None):
        self._descriptors: Dict[str, ConnectionDescriptor] = {}
        self._lock = threading.RLock()
        for descriptor in descriptors or ():
            self.register(descriptor)

    @classmethod
    def from_config(cls, entries: Optional[Iterable[Dict[str, Any]]]) -> "InMemoryConnectionDirectory":
        """
        Build a directory from the ``connections`` configuration list.

        Raises:
            ValidationError: If an entry is invalid or a name repeats
        """
        directory = cls()
        for index, entry in enumerate(entries or ()):
            try:
                directory.register(ConnectionDescriptor.from_dict(entry))
            except ValidationError as e:
                raise ValidationError(f"Invalid connection at index {index}: {e}") from e
            except ValueError as e:
                raise ValidationError(str(e)) from e
        return directory

    def register(self, descriptor: ConnectionDescriptor) -> None:
        """
        Add a connection.

        Raises:
            ValueError: If a connection with the same name exists
        """
        with self._lock:
            if descriptor.name in self._descriptors:
                raise ValueError(f"Connection '{descriptor.name}' already registered")
            self._descriptors[descriptor.name] = descriptor

    def remove(self, name: str) -> None:
        """
        Remove a connection.

        Raises:
            KeyError: If the connection doesn't exist
        """
        with self._lock:
            if name not in self._descriptors:
                raise KeyError(f"Connection '{name}' not found")
            del self._descriptors[name]

    def lookup(self, name: Optional[str]) -> Optional[ConnectionDescriptor]:
        if name is None:
            return None
        with self._lock:
            return self._descriptors.get(name)

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._descriptors)

    def clear(self) -> None:
        with self._lock:
            self._descriptors.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._descriptors)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(connections={self.names()!r})"
