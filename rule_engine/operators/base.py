"""
Shared helpers for operator implementations.

Operators are pure predicates (criterion, value) -> bool. None of them may
raise on a type mismatch; mismatches evaluate to False. These helpers keep
the JSON type model consistent across categories: bool is never a number,
mappings are objects, lists/tuples are arrays.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Callable

from ..nodes import UNDEFINED_SENTINEL

Predicate = Callable[[Any, Any], bool]


def is_number(value: Any) -> bool:
    """int (any size, not bool) or finite float."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_absent(value: Any) -> bool:
    """Missing field: None or the evaluator's undefined sentinel."""
    return value is None or value == UNDEFINED_SENTINEL


def json_type(value: Any) -> str:
    """JSON type name of a value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if is_array(value):
        return "array"
    if is_object(value):
        return "object"
    return type(value).__name__


def json_equal(a: Any, b: Any) -> bool:
    """
    Structural equality under the JSON type model.

    1 == 1.0 holds, True == 1 does not, [1, 2] == (1, 2) holds.
    """
    type_a, type_b = json_type(a), json_type(b)
    if type_a != type_b:
        return False
    if type_a == "array":
        return len(a) == len(b) and all(json_equal(x, y) for x, y in zip(a, b))
    if type_a == "object":
        if set(a.keys()) != set(b.keys()):
            return False
        return all(json_equal(a[k], b[k]) for k in a)
    try:
        return a == b
    except (TypeError, ValueError):
        return False


def json_contains(items: Any, needle: Any) -> bool:
    """Membership test using json_equal."""
    return any(json_equal(item, needle) for item in items)


def is_pair(value: Any) -> bool:
    """Two-element list (range bounds)."""
    return is_array(value) and len(value) == 2


def negate(predicate: Predicate) -> Predicate:
    """Logical inverse of a predicate."""
    def inverse(criterion: Any, value: Any = None) -> bool:
        return not predicate(criterion, value)

    inverse.__name__ = f"not_{predicate.__name__}"
    inverse.__doc__ = f"Inverse of {predicate.__name__}."
    return inverse
