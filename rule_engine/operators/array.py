"""
Array / collection operators.

- contains*: criterion is a list, value is an item (or list of items)
- self-*: criterion is a string, value is a list of substrings
- array-*-length: criterion is a list, value a number
"""

from __future__ import annotations

from typing import Any

from .base import is_array, is_number, is_string, json_contains, negate
from .constants import Operators


def eval_contains(criterion: Any, value: Any = None) -> bool:
    """value is an element of criterion."""
    if not is_array(criterion):
        return False
    return json_contains(criterion, value)


def eval_contains_any(criterion: Any, value: Any = None) -> bool:
    """criterion and value share at least one element."""
    if not is_array(criterion) or not is_array(value):
        return False
    return any(json_contains(value, item) for item in criterion)


def eval_contains_all(criterion: Any, value: Any = None) -> bool:
    """Every element of value is in criterion."""
    if not is_array(criterion) or not is_array(value):
        return False
    return all(json_contains(criterion, item) for item in value)


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def eval_self_contains_any(criterion: Any, value: Any = None) -> bool:
    """String criterion contains at least one of the value strings."""
    if not is_string(criterion) or not is_array(value):
        return False
    return any(_as_text(v) in criterion for v in value)


def eval_self_contains_all(criterion: Any, value: Any = None) -> bool:
    """String criterion contains every value string."""
    if not is_string(criterion) or not is_array(value):
        return False
    return all(_as_text(v) in criterion for v in value)


def _length_check(compare):
    def check(criterion: Any, value: Any = None) -> bool:
        if not is_array(criterion) or not is_number(value):
            return False
        return compare(len(criterion), value)
    return check


eval_array_length = _length_check(lambda n, v: n == v)
eval_array_min_length = _length_check(lambda n, v: n >= v)
eval_array_max_length = _length_check(lambda n, v: n <= v)

eval_self_not_contains_any = negate(eval_self_contains_any)


IMPLEMENTATIONS = {
    Operators.CONTAINS.value: (eval_contains, ("array",)),
    Operators.NOT_CONTAINS.value: (negate(eval_contains), ("array",)),
    Operators.CONTAINS_ANY.value: (eval_contains_any, ("array",)),
    Operators.NOT_CONTAINS_ANY.value: (negate(eval_contains_any), ("array",)),
    Operators.CONTAINS_ALL.value: (eval_contains_all, ("array",)),
    Operators.NOT_CONTAINS_ALL.value: (negate(eval_contains_all), ("array",)),
    Operators.SELF_CONTAINS_ANY.value: (eval_self_contains_any, ("string",)),
    Operators.SELF_NOT_CONTAINS_ANY.value: (eval_self_not_contains_any, ("string",)),
    Operators.SELF_CONTAINS_ALL.value: (eval_self_contains_all, ("string",)),
    Operators.SELF_NOT_CONTAINS_ALL.value: (negate(eval_self_contains_all), ("string",)),
    Operators.SELF_CONTAINS_NONE.value: (eval_self_not_contains_any, ("string",)),
    Operators.ARRAY_LENGTH.value: (eval_array_length, ("array",)),
    Operators.ARRAY_MIN_LENGTH.value: (eval_array_min_length, ("array",)),
    Operators.ARRAY_MAX_LENGTH.value: (eval_array_max_length, ("array",)),
}
