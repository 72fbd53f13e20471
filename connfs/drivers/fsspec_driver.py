"""
connfs Drivers: fsspec-backed storage driver.

Native URIs are resolved through :mod:`fsspec`, so every protocol fsspec
knows (``file``, ``memory``, ``s3``, ``gs``, ...) is available. Filesystem
instances are cached per ``(protocol, ContextKey)``: contexts with the same
variables share one filesystem no matter which container carried them.

Storage options for a protocol are read from context variables prefixed
with the protocol name, e.g. ``s3.anon=True`` becomes ``anon=True`` for
``s3``.

Host-less filesystems (root marker "/", such as ``file`` and ``memory``) read
the authority part of a native URI as the first path segment, so
``file://tmp/data.csv`` addresses ``/tmp/data.csv``.
"""

import posixpath
import shutil
from datetime import datetime
from typing import IO, Any, Dict, List, Optional

import fsspec
from fsspec.core import split_protocol, strip_protocol

from connfs.context.equivalence import canonical_context
from connfs.context.variables import ContextMap, context_items
from connfs.core.cache import CacheConfig, LRUCache
from connfs.core.constants import Limits
from connfs.core.errors import NativeResolutionError, NotAFolderError
from connfs.core.logging import Logger, get_logger
from connfs.drivers.base import FileKind, NativeHandle, StorageDriver

RANDOM_ACCESS_MODES = {"r": "rb", "rw": "r+b"}


def _is_hostless(fs: fsspec.AbstractFileSystem) -> bool:
    return getattr(fs, "root_marker", "") == "/"


def _normalize_path(fs: fsspec.AbstractFileSystem, path: str) -> str:
    path = path.rstrip("/")
    if _is_hostless(fs):
        path = "/" + path.lstrip("/")
    return path


class FsspecNativeHandle(NativeHandle):
    """Native handle over an fsspec filesystem path."""

    def __init__(self, fs: fsspec.AbstractFileSystem, protocol: str, fs_path: str):
        """
        Args:
            fs: Filesystem instance
            protocol: Protocol the handle was resolved under
            fs_path: Path in the filesystem's own notation
        """
        self.fs = fs
        self.protocol = protocol
        self.fs_path = _normalize_path(fs, fs_path)

        relative = self.fs_path.lstrip("/")
        host, separator, rest = relative.partition("/")
        self._host_name = host
        self._url = f"{protocol}://{relative}"
        self._path = separator + rest

    @property
    def url(self) -> str:
        return self._url

    @property
    def path(self) -> str:
        return self._path

    @property
    def host_name(self) -> str:
        """First segment of the stripped path: the bucket, or the top folder of a host-less filesystem."""
        return self._host_name

    def _handle(self, fs_path: str) -> "FsspecNativeHandle":
        return FsspecNativeHandle(self.fs, self.protocol, fs_path)

    def _join(self, name: str) -> str:
        base = self.fs_path.rstrip("/")
        return f"{base}/{name}" if base or _is_hostless(self.fs) else name

    def _ensure_parent(self) -> None:
        parent = posixpath.dirname(self.fs_path)
        if parent and parent != self.fs_path:
            self.fs.makedirs(parent, exist_ok=True)

    def exists(self) -> bool:
        return self.fs.exists(self.fs_path)

    def get_type(self) -> FileKind:
        try:
            info = self.fs.info(self.fs_path)
        except FileNotFoundError:
            return FileKind.IMAGINARY
        return FileKind.FOLDER if info.get("type") == "directory" else FileKind.FILE

    def get_size(self) -> int:
        return self.fs.size(self.fs_path) or 0

    def get_last_modified(self) -> Optional[datetime]:
        try:
            return self.fs.modified(self.fs_path)
        except (NotImplementedError, FileNotFoundError):
            return None

    def read_bytes(self) -> bytes:
        return self.fs.cat_file(self.fs_path)

    def get_input_stream(self) -> IO[bytes]:
        return self.fs.open(self.fs_path, "rb")

    def get_output_stream(self, append: bool = False) -> IO[bytes]:
        self._ensure_parent()
        mode = "ab" if append and self.exists() else "wb"
        return self.fs.open(self.fs_path, mode)

    def get_random_access_content(self, mode: str = "r") -> IO[bytes]:
        if mode not in RANDOM_ACCESS_MODES:
            raise ValueError(f"Unsupported random access mode: {mode!r}")
        return self.fs.open(self.fs_path, RANDOM_ACCESS_MODES[mode])

    def get_children(self) -> List[NativeHandle]:
        if not self.fs.isdir(self.fs_path):
            raise NotAFolderError(self.url)

        own = self.fs_path.rstrip("/")
        names = self.fs.ls(self.fs_path, detail=False)
        return [self._handle(name) for name in sorted(names) if name.rstrip("/") != own]

    def get_child(self, name: str) -> Optional[NativeHandle]:
        child = self._handle(self._join(name))
        return child if child.exists() else None

    def create_file(self) -> None:
        if not self.exists():
            self._ensure_parent()
            self.fs.touch(self.fs_path)

    def create_folder(self) -> None:
        self.fs.makedirs(self.fs_path, exist_ok=True)

    def delete(self) -> bool:
        if not self.exists():
            return False
        self.fs.rm(self.fs_path, recursive=True)
        return True

    def move_to(self, destination: NativeHandle) -> None:
        if isinstance(destination, FsspecNativeHandle) and destination.fs is self.fs:
            destination._ensure_parent()
            self.fs.mv(self.fs_path, destination.fs_path, recursive=self.is_folder())
        else:
            destination.copy_from(self)
            self.delete()

    def copy_from(self, source: NativeHandle) -> None:
        if isinstance(source, FsspecNativeHandle) and source.fs is self.fs:
            self._ensure_parent()
            self.fs.copy(source.fs_path, self.fs_path, recursive=source.is_folder())
        elif source.is_folder():
            self.create_folder()
            for child in source.get_children():
                self._handle(self._join(child.base_name)).copy_from(child)
        else:
            with source.get_input_stream() as src, self.get_output_stream() as dst:
                shutil.copyfileobj(src, dst)

    def refresh(self) -> None:
        self.fs.invalidate_cache(self.fs_path)


def storage_options(protocol: str, context: ContextMap) -> Dict[str, Any]:
    """Extract ``<protocol>.<option>`` variables as fsspec storage options."""
    prefix = protocol + "."
    return {
        name[len(prefix):]: value
        for name, value in context_items(context).items()
        if name.startswith(prefix) and value is not None
    }


class FsspecStorageDriver(StorageDriver):
    """Storage driver resolving native URIs through fsspec."""

    def __init__(self, cache_config: Optional[CacheConfig] = None, logger: Optional[Logger] = None):
        """
        Args:
            cache_config: Settings of the filesystem cache
            logger: Logger (defaults to "connfs.drivers.fsspec")
        """
        self._cache = LRUCache(
            cache_config
            or CacheConfig(
                max_entries=Limits.DEFAULT_MAX_FILESYSTEMS,
                ttl_seconds=Limits.DEFAULT_FILESYSTEM_TTL_SECONDS,
            )
        )
        self._logger = logger or get_logger("connfs.drivers.fsspec")

    def get_filesystem(self, protocol: str, context: ContextMap = None) -> fsspec.AbstractFileSystem:
        """
        Return the filesystem for ``protocol`` under ``context``, creating it once.

        Raises:
            NativeResolutionError: If fsspec cannot create the filesystem
        """
        key = (protocol, canonical_context(context))

        def create() -> fsspec.AbstractFileSystem:
            options = storage_options(protocol, context)
            self._logger.debug("Creating filesystem", protocol=protocol, options=sorted(options))
            try:
                return fsspec.filesystem(protocol, **options)
            except (ImportError, ValueError, TypeError, OSError) as e:
                raise NativeResolutionError(
                    f"Cannot create filesystem for protocol '{protocol}': {e}"
                ) from e

        return self._cache.get_or_create(key, create)

    def resolve(self, native_uri: str, context: ContextMap = None) -> NativeHandle:
        protocol, rest = split_protocol(native_uri)
        if not protocol:
            raise NativeResolutionError(f"Native URI has no protocol: {native_uri!r}", native_uri)

        fs = self.get_filesystem(protocol, context)
        if _is_hostless(fs):
            fs_path = "/" + rest.lstrip("/")
        else:
            fs_path = strip_protocol(native_uri)

        return FsspecNativeHandle(fs, protocol, fs_path)

    @property
    def filesystem_count(self) -> int:
        return len(self._cache)

    def cache_stats(self) -> Dict[str, Any]:
        return self._cache.get_stats()

    def clear_cache(self) -> None:
        self._cache.clear()
