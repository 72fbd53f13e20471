"""Exception hierarchy for connfs.

Every error carries an :class:`~connfs.core.constants.ErrorCode` so callers
(and the CLI) can classify failures without string matching.

Parsing never raises: a malformed virtual URI yields a ``VirtualURI`` with
``None`` fields. Only the resolver turns such a URI into
:class:`MalformedVirtualURIError`.
"""

from typing import Optional

from connfs.core.constants import ErrorCode


class ConnFSError(Exception):
    """Base exception for all connfs errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        """Initialize ConnFSError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class ResolutionError(ConnFSError):
    """A virtual URI could not be resolved to a virtual file."""

    def __init__(
        self,
        message: str,
        uri: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    ):
        super().__init__(message, error_code)
        self.uri = uri


class MalformedVirtualURIError(ResolutionError):
    """The URI has the wrong scheme or no connection name."""

    def __init__(self, uri: Optional[str], reason: str = "no connection name"):
        super().__init__(f"Malformed virtual URI {uri!r}: {reason}", uri, ErrorCode.INVALID_INPUT)


class UnknownConnectionError(ResolutionError):
    """The connection directory has no entry for the requested name."""

    def __init__(self, connection_name: str, uri: Optional[str] = None):
        super().__init__(f"Unknown connection: {connection_name!r}", uri, ErrorCode.NOT_FOUND)
        self.connection_name = connection_name


class NativeResolutionError(ResolutionError):
    """The storage driver failed to resolve a native URI.

    Drivers raise this with the original exception chained as ``__cause__``.
    """

    def __init__(self, message: str, native_uri: Optional[str] = None):
        super().__init__(message, native_uri, ErrorCode.DEPENDENCY_ERROR)
        self.native_uri = native_uri


class UnsupportedTransformError(ConnFSError):
    """A transformer strategy was asked for an operation it does not implement."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.UNSUPPORTED)


class FileNotAttachedError(ConnFSError):
    """Content was accessed on a virtual file with no native handle."""

    def __init__(self, uri: Optional[str]):
        super().__init__(f"Virtual file {uri!r} is not attached to a native file", ErrorCode.INTERNAL_ERROR)
        self.uri = uri


class VariableSubstitutionError(ConnFSError):
    """A ``${...}`` expression could not be rendered."""

    def __init__(self, text: str, reason: str):
        super().__init__(f"Cannot substitute variables in {text!r}: {reason}", ErrorCode.INVALID_INPUT)
        self.text = text


class NotAFolderError(ConnFSError):
    """Children were requested from something that is not a folder."""

    def __init__(self, url: str):
        super().__init__(f"Not a folder: {url}", ErrorCode.INVALID_INPUT)
        self.url = url
