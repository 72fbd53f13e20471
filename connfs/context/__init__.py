"""connfs Context: variable spaces and the context equivalence policy."""

from connfs.context.equivalence import ContextKey, canonical_context, equivalent
from connfs.context.variables import ContextMap, Variables, VariableSpace, context_items, substitute

__all__ = [
    "ContextMap",
    "VariableSpace",
    "Variables",
    "context_items",
    "substitute",
    "ContextKey",
    "canonical_context",
    "equivalent",
]
