"""connfs URI handling: virtual URI parsing and virtual <-> native transformation."""

from connfs.uri.parser import VirtualURI, is_virtual_uri, parse_virtual_uri
from connfs.uri.transform import (
    DefaultUriTransformer,
    LegacyChildUriTransformer,
    TransformKind,
    UriTransformer,
    native_host,
    to_native_uri,
    to_virtual_uri,
    transformer_for,
)

__all__ = [
    "VirtualURI",
    "parse_virtual_uri",
    "is_virtual_uri",
    "TransformKind",
    "UriTransformer",
    "DefaultUriTransformer",
    "LegacyChildUriTransformer",
    "transformer_for",
    "to_native_uri",
    "to_virtual_uri",
    "native_host",
]
