"""
Pattern operators: regular expressions and well-known string formats.

matches accepts either a bare pattern or a /pattern/flags literal
(flags: i, m, s). An empty or invalid pattern evaluates to False.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Optional
from urllib.parse import urlparse

from .base import is_string, negate
from .constants import Operators

EMAIL_RE = re.compile(r"^[\w.%+-]+@[a-z0-9.-]+\.[a-z]{2,}$", re.IGNORECASE)
UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
ALPHA_RE = re.compile(r"^[a-z]+$", re.IGNORECASE)
ALPHA_NUMERIC_RE = re.compile(r"^[a-z0-9]+$", re.IGNORECASE)
PERSIAN_ALPHA_RE = re.compile(r"^[\u0600-\u06FF\s]+$")
PERSIAN_ALPHA_NUMERIC_RE = re.compile(r"^[\u0600-\u06FF\s0-9]+$")
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*$", re.IGNORECASE)

_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}
_LITERAL_RE = re.compile(r"^/(?P<body>.*)/(?P<flags>[a-z]*)$", re.DOTALL)


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> Optional["re.Pattern[str]"]:
    """
    Compile a matches-operator pattern.

    Returns:
        Compiled pattern, or None if empty or invalid
    """
    if not pattern:
        return None
    flags = 0
    literal = _LITERAL_RE.match(pattern)
    if literal:
        pattern = literal.group("body")
        for flag in literal.group("flags"):
            flags |= _REGEX_FLAGS.get(flag, 0)
        if not pattern:
            return None
    try:
        return re.compile(pattern, flags)
    except re.error:
        return None


def eval_matches(criterion: Any, value: Any = None) -> bool:
    if not is_string(criterion) or not is_string(value):
        return False
    compiled = compile_pattern(value)
    if compiled is None:
        return False
    return compiled.search(criterion) is not None


def _format_check(regex: "re.Pattern[str]"):
    def check(criterion: Any, value: Any = None) -> bool:
        return is_string(criterion) and regex.fullmatch(criterion) is not None
    return check


def eval_url(criterion: Any, value: Any = None) -> bool:
    """Absolute URL with a scheme and something after it."""
    if not is_string(criterion) or criterion != criterion.strip():
        return False
    try:
        parsed = urlparse(criterion)
    except ValueError:
        return False
    if not parsed.scheme or not _SCHEME_RE.match(parsed.scheme):
        return False
    return bool(parsed.netloc or parsed.path)


def eval_lower_case(criterion: Any, value: Any = None) -> bool:
    """All cased characters lower, with at least one a-z."""
    if not is_string(criterion):
        return False
    return criterion == criterion.lower() and re.search(r"[a-z]", criterion) is not None


def eval_upper_case(criterion: Any, value: Any = None) -> bool:
    """All cased characters upper, with at least one A-Z."""
    if not is_string(criterion):
        return False
    return criterion == criterion.upper() and re.search(r"[A-Z]", criterion) is not None


eval_email = _format_check(EMAIL_RE)
eval_uuid = _format_check(UUID_RE)
eval_alpha = _format_check(ALPHA_RE)
eval_alpha_numeric = _format_check(ALPHA_NUMERIC_RE)
eval_persian_alpha = _format_check(PERSIAN_ALPHA_RE)
eval_persian_alpha_numeric = _format_check(PERSIAN_ALPHA_NUMERIC_RE)


IMPLEMENTATIONS = {
    Operators.MATCHES.value: (eval_matches, ("string",)),
    Operators.NOT_MATCHES.value: (negate(eval_matches), ("string",)),
    Operators.EMAIL.value: (eval_email, ("string",)),
    Operators.NOT_EMAIL.value: (negate(eval_email), ("string",)),
    Operators.URL.value: (eval_url, ("string",)),
    Operators.NOT_URL.value: (negate(eval_url), ("string",)),
    Operators.UUID.value: (eval_uuid, ("string",)),
    Operators.NOT_UUID.value: (negate(eval_uuid), ("string",)),
    Operators.ALPHA.value: (eval_alpha, ("string",)),
    Operators.NOT_ALPHA.value: (negate(eval_alpha), ("string",)),
    Operators.ALPHA_NUMERIC.value: (eval_alpha_numeric, ("string",)),
    Operators.NOT_ALPHA_NUMERIC.value: (negate(eval_alpha_numeric), ("string",)),
    Operators.LOWER_CASE.value: (eval_lower_case, ("string",)),
    Operators.NOT_LOWER_CASE.value: (negate(eval_lower_case), ("string",)),
    Operators.UPPER_CASE.value: (eval_upper_case, ("string",)),
    Operators.NOT_UPPER_CASE.value: (negate(eval_upper_case), ("string",)),
    Operators.PERSIAN_ALPHA.value: (eval_persian_alpha, ("string",)),
    Operators.NOT_PERSIAN_ALPHA.value: (negate(eval_persian_alpha), ("string",)),
    Operators.PERSIAN_ALPHA_NUMERIC.value: (eval_persian_alpha_numeric, ("string",)),
    Operators.NOT_PERSIAN_ALPHA_NUMERIC.value: (negate(eval_persian_alpha_numeric), ("string",)),
}
