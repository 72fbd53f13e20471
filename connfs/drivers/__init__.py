"""connfs Drivers: storage driver interface and the fsspec implementation."""

from connfs.drivers.base import FileKind, NativeHandle, StorageDriver
from connfs.drivers.fsspec_driver import FsspecNativeHandle, FsspecStorageDriver, storage_options

__all__ = [
    "FileKind",
    "NativeHandle",
    "StorageDriver",
    "FsspecNativeHandle",
    "FsspecStorageDriver",
    "storage_options",
]
