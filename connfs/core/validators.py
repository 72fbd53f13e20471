"""
connfs Core: Input Validators.

Validation for configuration entries: connection definitions, cache settings
and the virtual scheme.
"""
import re
from typing import Any, Dict

from connfs.core.constants import ConfigKey, ErrorCode

SCHEME_PATTERN = re.compile(r"^\w+$")
TRANSFORM_NAMES = ("default", "legacy")


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


def validate_scheme(scheme: Any) -> bool:
    """Validate a URI scheme (a non-empty run of word characters).

    Raises:
        ValidationError: If the scheme is invalid
    """
    if not isinstance(scheme, str) or not SCHEME_PATTERN.match(scheme):
        raise ValidationError(f"Invalid scheme: {scheme!r}")
    return True


def validate_connection_name(name: Any) -> bool:
    """Validate a connection name.

    Connection names may contain almost any character, but never ``/``
    (it terminates the connection segment of a virtual URI).

    Raises:
        ValidationError: If the name is invalid
    """
    if not isinstance(name, str) or not name:
        raise ValidationError("Connection name must be a non-empty string")
    if "/" in name:
        raise ValidationError(f"Connection name cannot contain '/': {name!r}")
    return True


def validate_connection_config(connection: Dict[str, Any]) -> bool:
    """Validate one connection entry from the configuration.

    Args:
        connection: Connection dictionary

    Returns:
        True if valid

    Raises:
        ValidationError: If the entry is invalid
    """
    if not isinstance(connection, dict):
        raise ValidationError("Connection configuration must be a dictionary")

    validate_connection_name(connection.get(ConfigKey.CONNECTION_NAME))

    conn_type = connection.get(ConfigKey.CONNECTION_TYPE)
    if not isinstance(conn_type, str) or not conn_type:
        raise ValidationError("Connection must have a non-empty 'type'")

    domain = connection.get(ConfigKey.CONNECTION_DOMAIN, "")
    if domain is not None and not isinstance(domain, str):
        raise ValidationError(f"Connection domain must be a string: {domain!r}")

    has_buckets = connection.get(ConfigKey.CONNECTION_HAS_BUCKETS, False)
    if not isinstance(has_buckets, bool):
        raise ValidationError(f"has_buckets must be a boolean: {has_buckets!r}")

    variables = connection.get(ConfigKey.CONNECTION_VARIABLES, {})
    if variables is not None and not isinstance(variables, dict):
        raise ValidationError("Connection variables must be a dictionary")

    transform = connection.get(ConfigKey.CONNECTION_TRANSFORM, "default")
    if transform not in TRANSFORM_NAMES:
        raise ValidationError(
            f"Invalid transform {transform!r}, expected one of: {', '.join(TRANSFORM_NAMES)}"
        )

    return True


def validate_cache_config(cache: Dict[str, Any]) -> bool:
    """Validate the cache section.

    Raises:
        ValidationError: If a setting has the wrong type or range
    """
    if not isinstance(cache, dict):
        raise ValidationError("Cache configuration must be a dictionary")

    if ConfigKey.CACHE_ENABLED in cache and not isinstance(cache[ConfigKey.CACHE_ENABLED], bool):
        raise ValidationError("Cache 'enabled' must be a boolean")

    max_filesystems = cache.get(ConfigKey.CACHE_MAX_FILESYSTEMS, 1)
    if isinstance(max_filesystems, bool) or not isinstance(max_filesystems, int) or max_filesystems <= 0:
        raise ValidationError(f"max_filesystems must be a positive integer: {max_filesystems!r}")

    ttl = cache.get(ConfigKey.CACHE_TTL, 1)
    if isinstance(ttl, bool) or not isinstance(ttl, (int, float)) or ttl <= 0:
        raise ValidationError(f"ttl_seconds must be a positive number: {ttl!r}")

    return True
