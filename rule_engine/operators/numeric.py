"""
Numeric operators.

numeric accepts numbers and numeric strings; every other operator here
requires an actual number (bool excluded).
"""

from __future__ import annotations

import math
from typing import Any

from .base import is_number, is_pair, is_string, negate
from .constants import Operators


def eval_numeric(criterion: Any, value: Any = None) -> bool:
    """Finite number, or a string that parses as one."""
    if is_number(criterion):
        return True
    if not is_string(criterion) or not criterion.strip():
        return False
    try:
        int(criterion)
        return True
    except ValueError:
        pass
    try:
        return math.isfinite(float(criterion))
    except ValueError:
        return False


def eval_number(criterion: Any, value: Any = None) -> bool:
    return is_number(criterion)


def _is_whole(number: Any) -> bool:
    # ints stay exact; float() overflows on large ones
    return isinstance(number, int) or number.is_integer()


def eval_integer(criterion: Any, value: Any = None) -> bool:
    return is_number(criterion) and _is_whole(criterion)


def eval_float(criterion: Any, value: Any = None) -> bool:
    return is_number(criterion) and not _is_whole(criterion)


def eval_positive(criterion: Any, value: Any = None) -> bool:
    return is_number(criterion) and criterion > 0


def eval_negative(criterion: Any, value: Any = None) -> bool:
    return is_number(criterion) and criterion < 0


def eval_zero(criterion: Any, value: Any = None) -> bool:
    return is_number(criterion) and criterion == 0


def eval_min(criterion: Any, value: Any = None) -> bool:
    """criterion >= value."""
    return is_number(criterion) and is_number(value) and criterion >= value


def eval_max(criterion: Any, value: Any = None) -> bool:
    """criterion <= value."""
    return is_number(criterion) and is_number(value) and criterion <= value


def eval_number_between(criterion: Any, value: Any = None) -> bool:
    """low <= criterion <= high, all numbers."""
    if not is_number(criterion) or not is_pair(value):
        return False
    low, high = value
    if not (is_number(low) and is_number(high)):
        return False
    return low <= criterion <= high


IMPLEMENTATIONS = {
    Operators.NUMERIC.value: (eval_numeric, ("number", "string")),
    Operators.NOT_NUMERIC.value: (negate(eval_numeric), ("any",)),
    Operators.NUMBER.value: (eval_number, ("any",)),
    Operators.NOT_NUMBER.value: (negate(eval_number), ("any",)),
    Operators.INTEGER.value: (eval_integer, ("number",)),
    Operators.NOT_INTEGER.value: (negate(eval_integer), ("number",)),
    Operators.FLOAT.value: (eval_float, ("number",)),
    Operators.NOT_FLOAT.value: (negate(eval_float), ("number",)),
    Operators.POSITIVE.value: (eval_positive, ("number",)),
    Operators.NOT_POSITIVE.value: (negate(eval_positive), ("number",)),
    Operators.NEGATIVE.value: (eval_negative, ("number",)),
    Operators.NOT_NEGATIVE.value: (negate(eval_negative), ("number",)),
    Operators.ZERO.value: (eval_zero, ("number",)),
    Operators.NOT_ZERO.value: (negate(eval_zero), ("number",)),
    Operators.MIN.value: (eval_min, ("number",)),
    Operators.MAX.value: (eval_max, ("number",)),
    Operators.NUMBER_BETWEEN.value: (eval_number_between, ("number",)),
    Operators.NOT_NUMBER_BETWEEN.value: (negate(eval_number_between), ("number",)),
}
