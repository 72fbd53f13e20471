"""
connfs Provider: virtual file resolver.

Resolution of a virtual URI walks a fixed sequence of states::

    START -> DESCRIPTOR_LOOKUP -> NATIVE_URI_BUILT -> NATIVE_RESOLVED -> WRAPPED

Any step may end in FAILED, in which case the error is logged and re-raised
unchanged. The resolver keeps no state between calls.

Example:
    >>> resolver = VirtualFileResolver(directory, FsspecStorageDriver())
    >>> with resolver.resolve("pvfs://my bucket/reports/q1.csv") as vf:
    ...     data = vf.read_bytes()
"""

from enum import Enum
from typing import Optional

from connfs.connections.directory import ConnectionDirectory
from connfs.context.variables import ContextMap, context_items
from connfs.core.constants import CONNECTION_VARIABLE, VIRTUAL_SCHEME
from connfs.core.errors import MalformedVirtualURIError, UnknownConnectionError
from connfs.core.logging import Logger, get_logger
from connfs.core.validators import validate_scheme
from connfs.drivers.base import StorageDriver
from connfs.provider.file_object import VirtualFile
from connfs.uri.parser import parse_virtual_uri
from connfs.uri.transform import to_native_uri, transformer_for


class ResolutionState(Enum):
    """Steps of a single resolution."""

    START = "start"
    DESCRIPTOR_LOOKUP = "descriptor_lookup"
    NATIVE_URI_BUILT = "native_uri_built"
    NATIVE_RESOLVED = "native_resolved"
    WRAPPED = "wrapped"
    FAILED = "failed"


class VirtualFileResolver:
    """
    Resolves virtual URIs into :class:`VirtualFile` objects.

    Attributes:
        directory: Source of connection descriptors
        driver: Storage driver performing native resolution
        scheme: Virtual scheme accepted by this resolver
    """

    def __init__(
        self,
        directory: ConnectionDirectory,
        driver: StorageDriver,
        scheme: str = VIRTUAL_SCHEME,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the resolver.

        Args:
            directory: Connection directory
            driver: Storage driver
            scheme: Virtual scheme (default "pvfs")
            logger: Logger (defaults to "connfs.resolver")

        Raises:
            ValidationError: If the scheme is invalid
        """
        validate_scheme(scheme)
        self.directory = directory
        self.driver = driver
        self.scheme = scheme
        self.logger = logger or get_logger("connfs.resolver")

    def _enter(self, state: ResolutionState, uri: Optional[str], **context) -> ResolutionState:
        self.logger.debug("Resolution state", state=state.value, uri=uri, **context)
        return state

    def resolve(self, uri: Optional[str], context: ContextMap = None) -> VirtualFile:
        """
        Resolve a virtual URI.

        Args:
            uri: Virtual URI, e.g. "pvfs://conn/dir/file.txt"
            context: Variables for substitution and the storage driver

        Returns:
            VirtualFile wrapping the native handle

        Raises:
            MalformedVirtualURIError: Wrong scheme or no connection name
            UnknownConnectionError: Connection not in the directory
            NativeResolutionError: The storage driver failed
        """
        state = self._enter(ResolutionState.START, uri)
        try:
            parsed = parse_virtual_uri(uri)
            if parsed.scheme != self.scheme:
                raise MalformedVirtualURIError(uri, f"expected scheme '{self.scheme}'")
            if parsed.connection_name is None:
                raise MalformedVirtualURIError(uri)

            state = self._enter(ResolutionState.DESCRIPTOR_LOOKUP, uri, connection=parsed.connection_name)
            descriptor = self.directory.lookup(parsed.connection_name)
            if descriptor is None:
                raise UnknownConnectionError(parsed.connection_name, uri)
            descriptor = descriptor.resolve_variables(context)

            native_uri = to_native_uri(descriptor, parsed.path or "/")
            state = self._enter(ResolutionState.NATIVE_URI_BUILT, uri, native_uri=native_uri)

            driver_context = context_items(context)
            driver_context[CONNECTION_VARIABLE] = descriptor.name
            native = self.driver.resolve(native_uri, driver_context)
            state = self._enter(ResolutionState.NATIVE_RESOLVED, uri, native_uri=native.url)

            virtual_file = VirtualFile(
                parsed,
                native,
                descriptor.name,
                descriptor.domain,
                transformer_for(descriptor, self.scheme),
                self,
                context,
            )
            self._enter(ResolutionState.WRAPPED, uri)
            return virtual_file

        except Exception as e:
            self.logger.warning(
                "Resolution failed",
                uri=uri,
                state=ResolutionState.FAILED.value,
                failed_after=state.value,
                error=f"{type(e).__name__}: {e}",
            )
            raise

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(scheme='{self.scheme}', directory={self.directory!r})"
