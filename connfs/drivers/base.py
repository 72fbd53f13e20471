"""
connfs Drivers: storage driver interface.

A storage driver turns a native URI into a :class:`NativeHandle` and does all
real I/O. The virtual layer only computes addresses and delegates here.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import IO, List, Optional

from connfs.context.variables import ContextMap


class FileKind(Enum):
    """Type of a native entry."""

    FILE = "file"
    FOLDER = "folder"
    IMAGINARY = "imaginary"  # does not exist (yet)


class NativeHandle(ABC):
    """
    A file or folder addressed by a native URI.

    ``url`` is the full native URI; ``path`` is the path part after the host
    (authority). Handles whose backend knows its host structurally may also
    expose a ``host_name`` attribute, which takes precedence over parsing
    ``url`` when building virtual URIs.
    """

    @property
    @abstractmethod
    def url(self) -> str:
        """Native URI of this entry."""

    @property
    @abstractmethod
    def path(self) -> str:
        """Path below the host, starting with "/" (empty at a host root)."""

    @property
    def public_uri(self) -> str:
        return self.url

    @property
    def base_name(self) -> str:
        return self.path.rstrip("/").rsplit("/", 1)[-1]

    @abstractmethod
    def exists(self) -> bool:
        ...

    @abstractmethod
    def get_type(self) -> FileKind:
        ...

    def is_file(self) -> bool:
        return self.get_type() is FileKind.FILE

    def is_folder(self) -> bool:
        return self.get_type() is FileKind.FOLDER

    def is_hidden(self) -> bool:
        return self.base_name.startswith(".")

    def is_readable(self) -> bool:
        return self.exists()

    def is_writeable(self) -> bool:
        return True

    @abstractmethod
    def get_size(self) -> int:
        ...

    @abstractmethod
    def get_last_modified(self) -> Optional[datetime]:
        ...

    @abstractmethod
    def read_bytes(self) -> bytes:
        ...

    @abstractmethod
    def get_input_stream(self) -> IO[bytes]:
        ...

    @abstractmethod
    def get_output_stream(self, append: bool = False) -> IO[bytes]:
        ...

    @abstractmethod
    def get_random_access_content(self, mode: str = "r") -> IO[bytes]:
        """Seekable stream over the content; ``mode`` is "r" or "rw"."""

    @abstractmethod
    def get_children(self) -> List["NativeHandle"]:
        """
        Entries directly below this folder.

        Raises:
            NotAFolderError: If this entry is not a folder
        """

    @abstractmethod
    def get_child(self, name: str) -> Optional["NativeHandle"]:
        """The direct child called ``name``, or None if there is none."""

    @abstractmethod
    def create_file(self) -> None:
        ...

    @abstractmethod
    def create_folder(self) -> None:
        ...

    @abstractmethod
    def delete(self) -> bool:
        """Delete this entry (recursively); False if it did not exist."""

    @abstractmethod
    def move_to(self, destination: "NativeHandle") -> None:
        ...

    @abstractmethod
    def copy_from(self, source: "NativeHandle") -> None:
        ...

    def can_rename_to(self, destination: "NativeHandle") -> bool:
        return destination.url != self.url and not destination.exists()

    def refresh(self) -> None:
        """Drop cached metadata for this entry."""

    def close(self) -> None:
        """Release resources held by this handle."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(url='{self.url}')"


class StorageDriver(ABC):
    """Resolves native URIs to native handles."""

    @abstractmethod
    def resolve(self, native_uri: str, context: ContextMap = None) -> NativeHandle:
        """
        Resolve a native URI under a context.

        Args:
            native_uri: URI understood by this driver
            context: Variables and options for the backend

        Returns:
            Handle for the URI (the target need not exist)

        Raises:
            NativeResolutionError: If the URI cannot be resolved
        """

    def clear_cache(self) -> None:
        """Forget cached backend instances."""
