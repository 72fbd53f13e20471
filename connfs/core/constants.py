"""
connfs Core: Constants

This module provides system-wide constants and error codes shared by the
parser, transformers, resolver and storage drivers.
"""
from enum import IntEnum

# Version information
CONNFS_VERSION = "1.0.0"


class ErrorCode(IntEnum):
    """Standardized error codes for connfs operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Malformed URI, invalid configuration
    NOT_FOUND = 2  # Unknown connection or missing file
    DEPENDENCY_ERROR = 3  # Storage backend unavailable
    INTERNAL_ERROR = 4  # Bug in connfs
    UNSUPPORTED = 5  # Operation intentionally not implemented


# Scheme of the virtual (named connection) URIs
VIRTUAL_SCHEME = "pvfs"

# Separator between scheme and the rest of a URI
SCHEME_SEPARATOR = "://"

# A URI consisting only of a scheme and its separator, e.g. "s3://"
DOMAIN_ROOT = r"\w+://"

# Variable set on every resolution context, naming the connection being resolved
CONNECTION_VARIABLE = "connection"

# Schemes that AEL (the adaptive execution layer) expects under a different name
AELS_SCHEME_REPLACEMENTS = {"s3://": "s3a://"}


class ConfigKey:
    """Configuration key constants."""

    ROOT = "connfs"
    SCHEME = "scheme"
    CONNECTIONS = "connections"
    CACHE = "cache"
    LOGGING = "logging"

    # Connection entries
    CONNECTION_NAME = "name"
    CONNECTION_TYPE = "type"
    CONNECTION_DOMAIN = "domain"
    CONNECTION_HAS_BUCKETS = "has_buckets"
    CONNECTION_VARIABLES = "variables"
    CONNECTION_TRANSFORM = "transform"
    CONNECTION_DESCRIPTION = "description"

    # Cache configuration
    CACHE_ENABLED = "enabled"
    CACHE_MAX_FILESYSTEMS = "max_filesystems"
    CACHE_TTL = "ttl_seconds"


class Limits:
    """Default limits."""

    DEFAULT_MAX_FILESYSTEMS = 64
    DEFAULT_FILESYSTEM_TTL_SECONDS = 3600.0
