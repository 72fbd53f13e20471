"""
connfs Context: equivalence policy for context maps.

Caches of native filesystems are keyed by the context a filesystem was built
with. Two contexts carrying the same variables must hit the same entry even
when they are different objects, or different container types (a plain
:class:`~connfs.context.variables.Variables` and a richer object that also
implements the variable-space interface).

Every context is therefore reduced to a :class:`ContextKey`, a sorted tuple
of ``(name, value)`` pairs, before it reaches a cache. Container equality is
never consulted.

Example:
    >>> canonical_context({"b": 2, "a": 1}) == canonical_context(Variables({"a": 1, "b": 2}))
    True
"""

from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterator, Mapping, Tuple

from connfs.context.variables import ContextMap, VariableSpace, context_items


@dataclass(frozen=True)
class ContextKey:
    """Canonical, hashable form of a context map.

    ``None`` values are dropped: a variable set to None reads the same as an
    unset one.
    """

    items: Tuple[Tuple[str, Hashable], ...] = ()

    def get(self, name: str, default: Any = None) -> Any:
        for key, value in self.items:
            if key == name:
                return value
        return default

    def as_dict(self) -> Dict[str, Hashable]:
        return dict(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Tuple[str, Hashable]]:
        return iter(self.items)


def _canonical_value(value: Any) -> Hashable:
    """Reduce a context value to a hashable, value-comparable form."""
    if isinstance(value, ContextKey):
        return value
    if isinstance(value, Mapping) or isinstance(value, VariableSpace):
        # nested option sets and variable spaces
        return canonical_context(value)
    if isinstance(value, (list, tuple)):
        return tuple(_canonical_value(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(_canonical_value(item) for item in value)
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value


def canonical_context(context: ContextMap) -> ContextKey:
    """Normalize a context map into a :class:`ContextKey`.

    Args:
        context: Mapping, variable space, ContextKey or None

    Returns:
        ContextKey with pairs sorted by name
    """
    if isinstance(context, ContextKey):
        return context

    pairs = (
        (name, _canonical_value(value))
        for name, value in context_items(context).items()
        if value is not None
    )
    return ContextKey(tuple(sorted(pairs, key=lambda pair: pair[0])))


def equivalent(first: ContextMap, second: ContextMap) -> bool:
    """Check whether two context maps carry the same variables.

    Args:
        first: Context map
        second: Context map

    Returns:
        True if every variable present in either has an equal value in both
    """
    return canonical_context(first) == canonical_context(second)
