"""
Rule Introspection Package.

- core.py: Introspector (result grouping, recursion, negation under NONE,
  operator collection)
- options.py: option folding and the fork/merge policy across branches
- context.py: IntrospectionContext, the per-call steps/metrics accumulator

Usage:
    from rule_engine.introspection import Introspector

    result = Introspector().introspect(rule, include_metadata=True)
    result.to_dict()
"""

from .context import IntrospectionContext
from .core import NOT_GRANULAR_MESSAGE, Introspector, introspect
from .options import add_option, dedup_flatten, merge_field_options, update_option

__all__ = [
    "Introspector",
    "IntrospectionContext",
    "introspect",
    "NOT_GRANULAR_MESSAGE",
    # Option building
    "add_option",
    "dedup_flatten",
    "merge_field_options",
    "update_option",
]
