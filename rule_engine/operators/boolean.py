"""
Boolean operators.

Type checks for booleans and their string/number encodings, plus
truthiness. Truthiness follows JSON-document conventions: null, false,
0, NaN, "" and a missing field are falsy; every list and object
(empty or not) is truthy.
"""

from __future__ import annotations

import math
from typing import Any

from .base import is_absent, is_array, is_object, negate
from .constants import Operators


def eval_boolean(criterion: Any, value: Any = None) -> bool:
    return isinstance(criterion, bool)


def eval_boolean_string(criterion: Any, value: Any = None) -> bool:
    """"true" or "false"."""
    return isinstance(criterion, str) and criterion in ("true", "false")


def eval_boolean_number(criterion: Any, value: Any = None) -> bool:
    """0 or 1 (bool excluded)."""
    if isinstance(criterion, bool) or not isinstance(criterion, (int, float)):
        return False
    return criterion in (0, 1)


def eval_boolean_number_string(criterion: Any, value: Any = None) -> bool:
    """"0" or "1"."""
    return isinstance(criterion, str) and criterion in ("0", "1")


def eval_truthy(criterion: Any, value: Any = None) -> bool:
    if is_absent(criterion):
        return False
    if is_array(criterion) or is_object(criterion):
        return True
    if isinstance(criterion, float) and math.isnan(criterion):
        return False
    return bool(criterion)


def eval_falsy(criterion: Any, value: Any = None) -> bool:
    return not eval_truthy(criterion)


IMPLEMENTATIONS = {
    Operators.BOOLEAN.value: (eval_boolean, ("any",)),
    Operators.NOT_BOOLEAN.value: (negate(eval_boolean), ("any",)),
    Operators.BOOLEAN_STRING.value: (eval_boolean_string, ("string",)),
    Operators.NOT_BOOLEAN_STRING.value: (negate(eval_boolean_string), ("string",)),
    Operators.BOOLEAN_NUMBER.value: (eval_boolean_number, ("number",)),
    Operators.NOT_BOOLEAN_NUMBER.value: (negate(eval_boolean_number), ("number",)),
    Operators.BOOLEAN_NUMBER_STRING.value: (eval_boolean_number_string, ("string",)),
    Operators.NOT_BOOLEAN_NUMBER_STRING.value: (negate(eval_boolean_number_string), ("string",)),
    Operators.TRUTHY.value: (eval_truthy, ("any",)),
    Operators.NOT_TRUTHY.value: (negate(eval_truthy), ("any",)),
    Operators.FALSY.value: (eval_falsy, ("any",)),
    Operators.NOT_FALSY.value: (negate(eval_falsy), ("any",)),
}
