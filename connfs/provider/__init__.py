"""connfs Provider: virtual file resolution and the virtual file handle."""

from connfs.provider.file_object import VirtualFile
from connfs.provider.resolver import ResolutionState, VirtualFileResolver

__all__ = ["VirtualFile", "VirtualFileResolver", "ResolutionState"]
