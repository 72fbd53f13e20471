"""
connfs Context: variable spaces.

A *context map* parameterizes a resolution request: variables used in
connection definitions (``${bucket}``) and options handed to storage drivers.
Anything that exposes name/value pairs can act as one:

- a ``Mapping``
- a :class:`Variables` container
- any object implementing the :class:`VariableSpace` reading interface,
  including richer objects that carry other responsibilities as well

:func:`context_items` is the one place that reads a context map, so every
consumer sees the same pairs regardless of the container.
"""

import functools
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Union, runtime_checkable

import jinja2
from jinja2 import nodes
from jinja2.visitor import NodeTransformer

from connfs.core.errors import VariableSubstitutionError


@runtime_checkable
class VariableSpace(Protocol):
    """Reading interface shared by every variable container."""

    def list_variables(self) -> List[str]:
        ...

    def get_variable(self, name: str, default: Any = None) -> Any:
        ...


ContextMap = Union[Mapping[str, Any], VariableSpace, None]


def context_items(context: ContextMap) -> Dict[str, Any]:
    """Read all name/value pairs of a context map.

    Args:
        context: Mapping, variable space or None

    Returns:
        New dictionary of the context's variables

    Raises:
        TypeError: If the object exposes neither interface
    """
    if context is None:
        return {}
    if isinstance(context, Mapping):
        return {str(name): value for name, value in context.items()}
    if isinstance(context, VariableSpace):
        return {str(name): context.get_variable(name) for name in context.list_variables()}
    raise TypeError(f"Not a context map: {type(context).__name__}")


class _KeepUndefined(jinja2.Undefined):
    """Renders unknown ``${name}`` references back verbatim."""

    __slots__ = ()

    def __str__(self) -> str:
        if self._undefined_name is None:
            return ""
        return "${%s}" % self._undefined_name


_DOTTED_LOOKUP = "_connfs_dotted"
_MISSING = object()


@jinja2.pass_context
def _lookup_dotted(context: jinja2.runtime.Context, name: str) -> Any:
    """Value of ``a.b.c``: a flat variable of that name, else a walk through nested mappings."""
    value = context.get(name, _MISSING)
    if value is not _MISSING:
        return value

    head, *rest = name.split(".")
    value = context.get(head, _MISSING)
    for part in rest:
        if not isinstance(value, Mapping) or part not in value:
            return _KeepUndefined(name=name)
        value = value[part]
    return value


def _dotted_name(node: nodes.Node) -> Optional[str]:
    parts = []
    while isinstance(node, nodes.Getattr):
        parts.append(node.attr)
        node = node.node
    if not isinstance(node, nodes.Name):
        return None
    parts.append(node.name)
    return ".".join(reversed(parts))


class _DottedNames(NodeTransformer):
    """Turns ``${a.b}`` attribute chains into one lookup of the full name."""

    def visit_Getattr(self, node: nodes.Getattr) -> nodes.Node:
        name = _dotted_name(node)
        if name is None:
            return self.generic_visit(node)
        call = nodes.Call(nodes.Name(_DOTTED_LOOKUP, "load"), [nodes.Const(name)], [], None, None)
        call.set_lineno(node.lineno)
        call.set_environment(_ENVIRONMENT)
        return call


_ENVIRONMENT = jinja2.Environment(
    variable_start_string="${",
    variable_end_string="}",
    undefined=_KeepUndefined,
    autoescape=False,
    keep_trailing_newline=True,
)
_ENVIRONMENT.globals[_DOTTED_LOOKUP] = _lookup_dotted


@functools.lru_cache(maxsize=256)
def _compile(text: str) -> jinja2.Template:
    tree = _DottedNames().visit(_ENVIRONMENT.parse(text))
    return _ENVIRONMENT.from_string(tree)


def substitute(text: Optional[str], context: ContextMap) -> Optional[str]:
    """Replace ``${NAME}`` references in ``text`` with context values.

    Unknown names are left as written.

    Raises:
        VariableSubstitutionError: If the expression cannot be rendered
    """
    if not text or "${" not in text:
        return text

    try:
        return _compile(text).render(context_items(context))
    except jinja2.TemplateError as e:
        raise VariableSubstitutionError(text, str(e)) from e


class Variables:
    """Plain variable container.

    Instances compare by identity. Code that needs value equality, such as
    cache keys, must go through
    :func:`connfs.context.equivalence.canonical_context`.
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values or {})

    @classmethod
    def from_context(cls, context: ContextMap) -> "Variables":
        """Copy any context map into a new container."""
        return cls(context_items(context))

    def get_variable(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def set_variable(self, name: str, value: Any) -> None:
        self._values[name] = value

    def remove_variable(self, name: str) -> None:
        self._values.pop(name, None)

    def list_variables(self) -> List[str]:
        return list(self._values)

    def inject(self, values: Union[Mapping[str, Any], Iterable]) -> None:
        """Set several variables at once."""
        self._values.update(values)

    def copy(self) -> "Variables":
        return type(self)(self._values)

    def with_variables(self, **values: Any) -> "Variables":
        """Return a copy with ``values`` added."""
        variables = self.copy()
        variables.inject(values)
        return variables

    def environment_substitute(self, text: Optional[str]) -> Optional[str]:
        """Substitute ``${NAME}`` references using this container."""
        return substitute(text, self)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._values!r})"
