"""
connfs URI: virtual <-> native URI transformation.

A *native* URI is what a storage driver understands, e.g.
``s3://bucket/dir/file.txt``. A *virtual* URI addresses the same object
through a named connection, e.g. ``pvfs://myConnection/bucket/dir/file.txt``.

Two strategies exist, selected once per connection through
:func:`transformer_for`:

- :class:`DefaultUriTransformer` converts in both directions.
- :class:`LegacyChildUriTransformer` only rebuilds virtual URIs for children
  and refuses to build native URIs.

Both directions are pure functions of their inputs.
"""

import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from connfs.core.constants import DOMAIN_ROOT, SCHEME_SEPARATOR, VIRTUAL_SCHEME
from connfs.core.errors import UnsupportedTransformError

if TYPE_CHECKING:
    from connfs.connections.details import ConnectionDescriptor

_DOMAIN_ROOT_PATTERN = re.compile(DOMAIN_ROOT)
_REPEATED_SLASHES = re.compile(r"/{2,}")


class TransformKind(Enum):
    """Available transformer strategies."""

    DEFAULT = "default"
    LEGACY = "legacy"


def to_native_uri(descriptor: "ConnectionDescriptor", virtual_path: str) -> str:
    """Build the native URI for a path below a connection.

    ``<type>:/`` + ``/<domain>`` (when the connection has a domain) + path.
    When the result is only a scheme root such as ``s3://`` and the
    connection is bucket based, the connection name is appended and serves
    as the bucket.

    Args:
        descriptor: Connection the path belongs to
        virtual_path: Path below the connection, starting with "/"

    Returns:
        Native URI string
    """
    domain = descriptor.domain or ""
    if domain:
        domain = "/" + domain

    url = f"{descriptor.type}:/{domain}{virtual_path}"

    # TODO: revisit once bucket connections get an explicit default bucket setting
    if _DOMAIN_ROOT_PATTERN.fullmatch(url) and descriptor.has_buckets:
        url += descriptor.name

    return url


def native_host(native_handle: Any) -> str:
    """Host (authority) of a native handle.

    Handles exposing a ``host_name`` attribute are trusted as-is; otherwise
    the host is read from the handle's ``url``.
    """
    host_name = getattr(native_handle, "host_name", None)
    if host_name is not None:
        return host_name

    url = native_handle.url
    if SCHEME_SEPARATOR not in url:
        return ""
    authority = url.split(SCHEME_SEPARATOR, 1)[1].split("/", 1)[0]
    # drop user info and port
    return authority.rsplit("@", 1)[-1].split(":", 1)[0]


def to_virtual_uri(
    connection_name: str,
    domain: Optional[str],
    native_handle: Any,
    scheme: str = VIRTUAL_SCHEME,
) -> str:
    """Build the virtual URI of a native handle.

    The native host becomes the first path segment unless the connection
    has a domain (the domain already identifies the host).

    Args:
        connection_name: Connection the handle was reached through
        domain: Domain of that connection, empty or None when it has none
        native_handle: Object with ``url`` and ``path`` (and optionally ``host_name``)
        scheme: Virtual scheme

    Returns:
        Virtual URI string
    """
    tail = "/"
    if not domain:
        tail += native_host(native_handle)
    tail += native_handle.path or ""

    return f"{scheme}://{connection_name}{_REPEATED_SLASHES.sub('/', tail)}"


class UriTransformer(ABC):
    """Converts between virtual and native URIs for one connection."""

    kind: TransformKind

    def __init__(self, scheme: str = VIRTUAL_SCHEME):
        self.scheme = scheme

    @abstractmethod
    def to_native_uri(self, virtual_path: str) -> str:
        """Virtual path -> native URI."""

    @abstractmethod
    def to_virtual_uri(self, native_handle: Any) -> str:
        """Native handle -> virtual URI."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(scheme='{self.scheme}')"


class DefaultUriTransformer(UriTransformer):
    """Full two-way transformation driven by a connection descriptor."""

    kind = TransformKind.DEFAULT

    def __init__(self, descriptor: "ConnectionDescriptor", scheme: str = VIRTUAL_SCHEME):
        super().__init__(scheme)
        self.descriptor = descriptor

    def to_native_uri(self, virtual_path: str) -> str:
        return to_native_uri(self.descriptor, virtual_path)

    def to_virtual_uri(self, native_handle: Any) -> str:
        return to_virtual_uri(self.descriptor.name, self.descriptor.domain, native_handle, self.scheme)


class LegacyChildUriTransformer(UriTransformer):
    """Child-only transformation for connections on the legacy path.

    Only the connection name and domain are known, which is enough to turn
    a native child back into a virtual URI but not to build native URIs.
    """

    kind = TransformKind.LEGACY

    def __init__(self, connection_name: str, domain: Optional[str], scheme: str = VIRTUAL_SCHEME):
        super().__init__(scheme)
        self.connection_name = connection_name
        self.domain = domain

    def to_native_uri(self, virtual_path: str) -> str:
        raise UnsupportedTransformError(
            "Legacy child transformer cannot build native URIs "
            f"(connection {self.connection_name!r}, path {virtual_path!r})"
        )

    def to_virtual_uri(self, native_handle: Any) -> str:
        return to_virtual_uri(self.connection_name, self.domain, native_handle, self.scheme)


def transformer_for(descriptor: "ConnectionDescriptor", scheme: str = VIRTUAL_SCHEME) -> UriTransformer:
    """Select the transformer strategy for a connection.

    Args:
        descriptor: Connection descriptor
        scheme: Virtual scheme

    Returns:
        Transformer instance for the descriptor's ``transform`` kind
    """
    if descriptor.transform is TransformKind.LEGACY:
        return LegacyChildUriTransformer(descriptor.name, descriptor.domain, scheme)
    return DefaultUriTransformer(descriptor, scheme)
