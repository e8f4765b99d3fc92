"""
String operators.

All require a string criterion. like / not-like implement SQL LIKE:
% matches any run of characters, _ matches exactly one, a backslash
makes the next character literal. Patterns are anchored at both ends.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Optional

from .base import is_number, is_pair, is_string, negate
from .constants import Operators


@lru_cache(maxsize=512)
def like_to_regex(pattern: str) -> "re.Pattern[str]":
    """
    Compile a LIKE pattern.

    Example:
        like_to_regex("%@gmail.com").fullmatch("ann@gmail.com")  # match
        like_to_regex("a_c").fullmatch("abc")                     # match
    """
    parts = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\" and i + 1 < len(pattern):
            i += 1
            parts.append(re.escape(pattern[i]))
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
        i += 1
    return re.compile("".join(parts))


def eval_like(criterion: Any, value: Any = None) -> bool:
    if not is_string(criterion) or not is_string(value):
        return False
    return like_to_regex(value).fullmatch(criterion) is not None


def eval_starts_with(criterion: Any, value: Any = None) -> bool:
    if not is_string(criterion) or not is_string(value):
        return False
    return criterion.startswith(value)


def eval_ends_with(criterion: Any, value: Any = None) -> bool:
    if not is_string(criterion) or not is_string(value):
        return False
    return criterion.endswith(value)


def eval_contains_string(criterion: Any, value: Any = None) -> bool:
    if not is_string(criterion) or not is_string(value):
        return False
    return value in criterion


def _length_check(compare):
    def check(criterion: Any, value: Any = None) -> bool:
        if not is_string(criterion) or not is_number(value):
            return False
        return compare(len(criterion), value)
    return check


eval_string_length = _length_check(lambda n, v: n == v)
eval_min_length = _length_check(lambda n, v: n >= v)
eval_max_length = _length_check(lambda n, v: n <= v)


def _bound(value: Any) -> Optional[float]:
    """Numeric bound; numeric strings are accepted."""
    if is_number(value):
        return value
    if is_string(value):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def eval_length_between(criterion: Any, value: Any = None) -> bool:
    """low <= len(criterion) <= high."""
    if not is_string(criterion) or not is_pair(value):
        return False
    low, high = _bound(value[0]), _bound(value[1])
    if low is None or high is None:
        return False
    return low <= len(criterion) <= high


IMPLEMENTATIONS = {
    Operators.LIKE.value: (eval_like, ("string",)),
    Operators.NOT_LIKE.value: (negate(eval_like), ("string",)),
    Operators.STARTS_WITH.value: (eval_starts_with, ("string",)),
    Operators.ENDS_WITH.value: (eval_ends_with, ("string",)),
    Operators.CONTAINS_STRING.value: (eval_contains_string, ("string",)),
    Operators.STRING_LENGTH.value: (eval_string_length, ("string",)),
    Operators.NOT_STRING_LENGTH.value: (negate(eval_string_length), ("string",)),
    Operators.MIN_LENGTH.value: (eval_min_length, ("string",)),
    Operators.MAX_LENGTH.value: (eval_max_length, ("string",)),
    Operators.LENGTH_BETWEEN.value: (eval_length_between, ("string",)),
    Operators.NOT_LENGTH_BETWEEN.value: (negate(eval_length_between), ("string",)),
}
