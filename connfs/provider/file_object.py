"""
connfs Provider: virtual file handle.

A :class:`VirtualFile` is what callers get back for a virtual URI. It owns
one native handle and forwards content and metadata operations to it. Only
navigation is intercepted: children and parents are turned back into
virtual URIs and resolved again, so every file reached from a virtual file
is itself addressed through the same connection.
"""

from datetime import datetime
from typing import IO, TYPE_CHECKING, Any, List, Optional, Union

from connfs.context.variables import ContextMap
from connfs.core.constants import AELS_SCHEME_REPLACEMENTS
from connfs.core.errors import FileNotAttachedError
from connfs.drivers.base import FileKind, NativeHandle
from connfs.uri.parser import VirtualURI
from connfs.uri.transform import UriTransformer

if TYPE_CHECKING:
    from connfs.provider.resolver import VirtualFileResolver


class VirtualFile:
    """
    A file or folder addressed through a named connection.

    Attributes:
        virtual_uri: Parsed virtual URI this file was resolved from
        connection_name: Connection the file belongs to
        domain: Domain of that connection ("" when it has none)
        transformer: Strategy used to rebuild virtual URIs for children
    """

    def __init__(
        self,
        virtual_uri: VirtualURI,
        native: Optional[NativeHandle],
        connection_name: str,
        domain: str,
        transformer: UriTransformer,
        resolver: "VirtualFileResolver",
        context: ContextMap = None,
    ):
        self.virtual_uri = virtual_uri
        self.connection_name = connection_name
        self.domain = domain or ""
        self.transformer = transformer
        self._native = native
        self._resolver = resolver
        self._context = context

    @property
    def native(self) -> Optional[NativeHandle]:
        return self._native

    @property
    def is_attached(self) -> bool:
        return self._native is not None

    @property
    def original_uri(self) -> str:
        """The virtual URI as it was requested."""
        return str(self.virtual_uri)

    @property
    def native_uri(self) -> str:
        return self._require_native().url

    @property
    def aels_safe_uri(self) -> str:
        """Native public URI with schemes renamed for the adaptive execution layer."""
        uri = self._require_native().public_uri
        for scheme, replacement in AELS_SCHEME_REPLACEMENTS.items():
            uri = uri.replace(scheme, replacement, 1)
        return uri

    @property
    def name(self) -> str:
        """Last segment of the virtual path, or the connection name at the root."""
        path = (self.virtual_uri.path or "").rstrip("/")
        return path.rsplit("/", 1)[-1] if path else self.connection_name

    def _require_native(self) -> NativeHandle:
        if self._native is None:
            raise FileNotAttachedError(self.original_uri)
        return self._native

    @staticmethod
    def _unwrap(other: Union["VirtualFile", NativeHandle]) -> NativeHandle:
        if isinstance(other, VirtualFile):
            return other._require_native()
        return other

    # Navigation

    def get_children(self) -> List["VirtualFile"]:
        """
        Children of this folder as virtual files of the same connection.

        Raises:
            NotAFolderError: If this file is not a folder
        """
        children = self._require_native().get_children()
        return [
            self._resolver.resolve(self.transformer.to_virtual_uri(child), self._context)
            for child in children
        ]

    def get_child(self, name: str) -> Optional["VirtualFile"]:
        child = self._require_native().get_child(name)
        if child is None:
            return None
        return self._resolver.resolve(self.transformer.to_virtual_uri(child), self._context)

    def get_parent(self) -> Optional["VirtualFile"]:
        """The parent folder, or None at the connection root."""
        parent_path = self.virtual_uri.parent_path
        if parent_path is None:
            return None
        uri = f"{self.virtual_uri.scheme}://{self.connection_name}{parent_path}"
        return self._resolver.resolve(uri, self._context)

    # Delegated operations

    def exists(self) -> bool:
        if self._native is None:
            return False
        return self._native.exists()

    def get_type(self) -> FileKind:
        return self._require_native().get_type()

    def is_file(self) -> bool:
        return self._require_native().is_file()

    def is_folder(self) -> bool:
        return self._require_native().is_folder()

    def is_hidden(self) -> bool:
        return self._require_native().is_hidden()

    def is_readable(self) -> bool:
        return self._require_native().is_readable()

    def is_writeable(self) -> bool:
        return self._require_native().is_writeable()

    def get_size(self) -> int:
        return self._require_native().get_size()

    def get_last_modified(self) -> Optional[datetime]:
        return self._require_native().get_last_modified()

    def read_bytes(self) -> bytes:
        return self._require_native().read_bytes()

    def get_input_stream(self) -> IO[bytes]:
        return self._require_native().get_input_stream()

    def get_output_stream(self, append: bool = False) -> IO[bytes]:
        return self._require_native().get_output_stream(append)

    def get_random_access_content(self, mode: str = "r") -> IO[bytes]:
        return self._require_native().get_random_access_content(mode)

    def create_file(self) -> None:
        self._require_native().create_file()

    def create_folder(self) -> None:
        self._require_native().create_folder()

    def delete(self) -> bool:
        return self._require_native().delete()

    def move_to(self, destination: Union["VirtualFile", NativeHandle]) -> None:
        self._require_native().move_to(self._unwrap(destination))

    def copy_from(self, source: Union["VirtualFile", NativeHandle]) -> None:
        self._require_native().copy_from(self._unwrap(source))

    def can_rename_to(self, destination: Union["VirtualFile", NativeHandle]) -> bool:
        return self._require_native().can_rename_to(self._unwrap(destination))

    def refresh(self) -> None:
        self._require_native().refresh()

    def close(self) -> None:
        if self._native is not None:
            self._native.close()

    def __enter__(self) -> "VirtualFile":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        native = self._native.url if self._native is not None else None
        return f"VirtualFile(uri='{self.original_uri}', native={native!r})"
