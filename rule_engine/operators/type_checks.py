"""
JSON type check operators (string, object, array).

The constraint value is ignored.
"""

from __future__ import annotations

from typing import Any

from .base import is_array, is_object, is_string, negate
from .constants import Operators


def eval_string(criterion: Any, value: Any = None) -> bool:
    return is_string(criterion)


def eval_object(criterion: Any, value: Any = None) -> bool:
    return is_object(criterion)


def eval_array(criterion: Any, value: Any = None) -> bool:
    return is_array(criterion)


IMPLEMENTATIONS = {
    Operators.STRING.value: (eval_string, ("any",)),
    Operators.NOT_STRING.value: (negate(eval_string), ("any",)),
    Operators.OBJECT.value: (eval_object, ("any",)),
    Operators.NOT_OBJECT.value: (negate(eval_object), ("any",)),
    Operators.ARRAY.value: (eval_array, ("any",)),
    Operators.NOT_ARRAY.value: (negate(eval_array), ("any",)),
}
