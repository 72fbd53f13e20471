"""connfs Connections: connection descriptors and the directory that holds them."""

from connfs.connections.details import ConnectionDescriptor
from connfs.connections.directory import ConnectionDirectory, InMemoryConnectionDirectory

__all__ = [
    "ConnectionDescriptor",
    "ConnectionDirectory",
    "InMemoryConnectionDirectory",
]
