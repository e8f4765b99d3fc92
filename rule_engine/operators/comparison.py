"""
Comparison operators.

Strict type contracts:
- equals / not-equals: any JSON value, same type required (bool is not a number)
- greater-than family: both numbers, or both strings
- in / not-in: value must be a list
- between / not-between: numeric criterion, [low, high] inclusive
"""

from __future__ import annotations

from typing import Any

from .base import is_number, is_pair, is_string, json_contains, json_equal, negate
from .constants import Operators


def _ordered(criterion: Any, value: Any) -> bool:
    """Both sides comparable with < / >."""
    if is_number(criterion) and is_number(value):
        return True
    return is_string(criterion) and is_string(value)


def eval_equals(criterion: Any, value: Any = None) -> bool:
    """criterion == value (same JSON type)."""
    return json_equal(criterion, value)


def eval_greater_than(criterion: Any, value: Any = None) -> bool:
    """criterion > value."""
    if not _ordered(criterion, value):
        return False
    return criterion > value


def eval_greater_than_or_equals(criterion: Any, value: Any = None) -> bool:
    """criterion >= value."""
    return eval_equals(criterion, value) or eval_greater_than(criterion, value)


def eval_less_than(criterion: Any, value: Any = None) -> bool:
    """criterion < value."""
    if not _ordered(criterion, value):
        return False
    return criterion < value


def eval_less_than_or_equals(criterion: Any, value: Any = None) -> bool:
    """criterion <= value."""
    return eval_equals(criterion, value) or eval_less_than(criterion, value)


def eval_in(criterion: Any, value: Any = None) -> bool:
    """criterion is one of value (a list)."""
    if not isinstance(value, (list, tuple)):
        return False
    return json_contains(value, criterion)


def eval_between(criterion: Any, value: Any = None) -> bool:
    """low <= criterion <= high."""
    if not is_number(criterion) or not is_pair(value):
        return False
    low, high = value
    if not (is_number(low) and is_number(high)):
        return False
    return low <= criterion <= high


IMPLEMENTATIONS = {
    Operators.EQUALS.value: (eval_equals, ("any",)),
    Operators.NOT_EQUALS.value: (negate(eval_equals), ("any",)),
    Operators.GREATER_THAN.value: (eval_greater_than, ("number", "string")),
    Operators.GREATER_THAN_OR_EQUALS.value: (eval_greater_than_or_equals, ("number", "string")),
    Operators.LESS_THAN.value: (eval_less_than, ("number", "string")),
    Operators.LESS_THAN_OR_EQUALS.value: (eval_less_than_or_equals, ("number", "string")),
    Operators.IN.value: (eval_in, ("any",)),
    Operators.NOT_IN.value: (negate(eval_in), ("any",)),
    Operators.BETWEEN.value: (eval_between, ("number",)),
    Operators.NOT_BETWEEN.value: (negate(eval_between), ("number",)),
}
