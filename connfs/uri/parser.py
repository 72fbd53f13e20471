"""
connfs URI: virtual URI parser.

Virtual URIs address storage through a named connection::

    pvfs://<connection name>/<path>

The connection name may contain almost any character except ``/`` (spaces,
``&``, ``#``, ``<`` ...), which rules out :mod:`urllib.parse`. This parser
reads the connection segment as-is, byte-for-byte, with three patterns tried
in order; the first that matches wins.

Parsing never raises. Input that matches none of the patterns (``None``,
empty strings, filesystem paths) yields a :class:`VirtualURI` whose fields
are all ``None``.
"""

import re
from dataclasses import dataclass
from typing import Optional

from connfs.core.constants import DOMAIN_ROOT

# scheme, connection name and a path of at least one character after "/"
CONNECTION_URI_WITH_PATH_PATTERN = re.compile(r"(\w+)://([^/]+)(/.+)")

# scheme and connection name with an optional trailing "/"
CONNECTION_URI_WITH_CONNECTION_NAME_PATTERN = re.compile(r"(\w+)://([^/]+)/?")

# scheme only, e.g. "pvfs://"
CONNECTION_URI_SCHEME_PATTERN = re.compile(r"(\w+)://")

_DOMAIN_ROOT_PATTERN = re.compile(DOMAIN_ROOT)


@dataclass(frozen=True)
class VirtualURI:
    """Structured view of a virtual URI.

    Attributes:
        scheme: URI scheme, e.g. "pvfs"
        connection_name: Connection name, exactly as written in the URI
        path: Path below the connection, always starting with "/"
        raw: The string that was parsed
    """

    scheme: Optional[str] = None
    connection_name: Optional[str] = None
    path: Optional[str] = None
    raw: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """True when nothing could be extracted from the raw string."""
        return self.scheme is None

    @property
    def root_uri(self) -> Optional[str]:
        """The connection root, e.g. "pvfs://conn/"; None without a connection."""
        if self.scheme is None or self.connection_name is None:
            return None
        return f"{self.scheme}://{self.connection_name}/"

    @property
    def parent_path(self) -> Optional[str]:
        """Path of the parent entry, or None at the connection root."""
        if not self.path or self.path.rstrip("/") == "":
            return None
        parent = self.path.rstrip("/").rsplit("/", 1)[0]
        return parent or "/"

    def __str__(self) -> str:
        return self.raw or ""


def parse_virtual_uri(raw: Optional[str]) -> VirtualURI:
    """Parse a virtual URI into scheme, connection name and path.

    Args:
        raw: URI string, may be None

    Returns:
        VirtualURI; fields that could not be extracted are None

    Example:
        >>> parse_virtual_uri("pvfs://my conn/dir/file.txt")
        VirtualURI(scheme='pvfs', connection_name='my conn', path='/dir/file.txt', raw='pvfs://my conn/dir/file.txt')
    """
    if not isinstance(raw, str):
        return VirtualURI(raw=raw)

    match = CONNECTION_URI_WITH_PATH_PATTERN.search(raw)
    if match:
        return VirtualURI(match.group(1), match.group(2), match.group(3), raw)

    match = CONNECTION_URI_WITH_CONNECTION_NAME_PATTERN.search(raw)
    if match:
        return VirtualURI(match.group(1), match.group(2), None, raw)

    match = CONNECTION_URI_SCHEME_PATTERN.search(raw)
    if match:
        return VirtualURI(match.group(1), None, None, raw)

    return VirtualURI(raw=raw)


def is_virtual_uri(raw: Optional[str], scheme: Optional[str] = None) -> bool:
    """Check whether ``raw`` starts with a ``<scheme>://`` prefix.

    Args:
        raw: Candidate URI
        scheme: If given, the scheme must also equal this value

    Returns:
        True if the string is addressed through a scheme
    """
    if not isinstance(raw, str) or "://" not in raw:
        return False

    prefix = raw.split("://", 1)[0] + "://"
    if not _DOMAIN_ROOT_PATTERN.fullmatch(prefix):
        return False

    return scheme is None or prefix[:-3] == scheme
