"""
Existence operators.

A field missing from the criteria reaches operators as the literal
"undefined" sentinel; these operators treat it as absent. null is
present for exists, and counts for null-or-undefined.
"""

from __future__ import annotations

from typing import Any

from ..nodes import UNDEFINED_SENTINEL
from .base import is_array, is_object, negate
from .constants import Operators


def eval_exists(criterion: Any, value: Any = None) -> bool:
    return criterion != UNDEFINED_SENTINEL


def eval_null_or_undefined(criterion: Any, value: Any = None) -> bool:
    return criterion is None or criterion == UNDEFINED_SENTINEL


def eval_empty(criterion: Any, value: Any = None) -> bool:
    """Absent, "", [] or {}."""
    if eval_null_or_undefined(criterion):
        return True
    if isinstance(criterion, str) or is_array(criterion) or is_object(criterion):
        return len(criterion) == 0
    return False


def eval_null_or_white_space(criterion: Any, value: Any = None) -> bool:
    if eval_null_or_undefined(criterion):
        return True
    return isinstance(criterion, str) and not criterion.strip()


IMPLEMENTATIONS = {
    Operators.EXISTS.value: (eval_exists, ("any",)),
    Operators.NOT_EXISTS.value: (negate(eval_exists), ("any",)),
    Operators.NULL_OR_UNDEFINED.value: (eval_null_or_undefined, ("any",)),
    Operators.NOT_NULL_OR_UNDEFINED.value: (negate(eval_null_or_undefined), ("any",)),
    Operators.EMPTY.value: (eval_empty, ("string", "array", "object")),
    Operators.NOT_EMPTY.value: (negate(eval_empty), ("string", "array", "object")),
    Operators.NULL_OR_WHITE_SPACE.value: (eval_null_or_white_space, ("string",)),
    Operators.NOT_NULL_OR_WHITE_SPACE.value: (negate(eval_null_or_white_space), ("string",)),
}
