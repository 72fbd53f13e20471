"""
connfs Connections: connection descriptors.

A :class:`ConnectionDescriptor` is the configured record behind a connection
name: which storage type it talks to, the optional domain (host or bucket)
and whether the backend partitions storage into buckets.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping

from connfs.context.variables import ContextMap, context_items, substitute
from connfs.core.constants import ConfigKey
from connfs.core.validators import validate_connection_config
from connfs.uri.transform import TransformKind


@dataclass(frozen=True)
class ConnectionDescriptor:
    """
    Immutable description of one named connection.

    Attributes:
        name: Connection name as used in virtual URIs
        type: Native scheme of the backend (e.g. "s3", "gs", "file")
        domain: Host or fixed bucket; empty when paths start with the bucket
        has_buckets: Backend partitions storage into buckets
        variables: Connection-level variables used for ``${...}`` substitution
        transform: Transformer strategy for this connection
        description: Free text shown to users
    """

    name: str
    type: str
    domain: str = ""
    has_buckets: bool = False
    variables: Mapping[str, Any] = field(default_factory=dict, hash=False)
    transform: TransformKind = TransformKind.DEFAULT
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "domain", self.domain or "")
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectionDescriptor":
        """
        Build a descriptor from a configuration entry.

        Raises:
            ValidationError: If the entry is invalid
        """
        validate_connection_config(data)
        return cls(
            name=data[ConfigKey.CONNECTION_NAME],
            type=data[ConfigKey.CONNECTION_TYPE],
            domain=data.get(ConfigKey.CONNECTION_DOMAIN) or "",
            has_buckets=data.get(ConfigKey.CONNECTION_HAS_BUCKETS, False),
            variables=data.get(ConfigKey.CONNECTION_VARIABLES) or {},
            transform=TransformKind(data.get(ConfigKey.CONNECTION_TRANSFORM, "default")),
            description=data.get(ConfigKey.CONNECTION_DESCRIPTION) or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            ConfigKey.CONNECTION_NAME: self.name,
            ConfigKey.CONNECTION_TYPE: self.type,
            ConfigKey.CONNECTION_DOMAIN: self.domain,
            ConfigKey.CONNECTION_HAS_BUCKETS: self.has_buckets,
            ConfigKey.CONNECTION_VARIABLES: dict(self.variables),
            ConfigKey.CONNECTION_TRANSFORM: self.transform.value,
            ConfigKey.CONNECTION_DESCRIPTION: self.description,
        }

    def resolve_variables(self, context: ContextMap = None) -> "ConnectionDescriptor":
        """
        Return a copy with ``${...}`` references in type and domain replaced.

        The descriptor's own variables are overlaid by ``context``.

        Raises:
            VariableSubstitutionError: If an expression cannot be rendered
        """
        values = dict(self.variables)
        values.update(context_items(context))
        return replace(
            self,
            type=substitute(self.type, values),
            domain=substitute(self.domain, values),
        )
