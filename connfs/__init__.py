"""connfs - Named-connection virtual file layer.

Subpackages:
    connfs.uri          virtual URI parsing and virtual <-> native transformation
    connfs.connections  connection descriptors and the connection directory
    connfs.context      variable spaces and context equivalence
    connfs.drivers      storage drivers (fsspec)
    connfs.provider     resolver and virtual file handle
    connfs.core         constants, errors, config, logging, cache
"""

from connfs.core.constants import CONNFS_VERSION as __version__

__all__ = ["__version__"]
