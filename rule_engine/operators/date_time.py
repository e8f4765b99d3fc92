"""
Date and time operators.

Dates:
- Accepted inputs: ISO-8601 strings (a trailing Z is UTC), epoch
  milliseconds, date and datetime objects
- Naive values are taken as UTC so every comparison is between aware
  datetimes
- *-now operators compare against the current UTC instant; the
  equals-to-now pair compares calendar days

Times:
- "HH:MM", "HH:MM:SS" or "HH:MM:SS.mmm", 24-hour clock
- Compared as seconds since midnight
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Optional

from .base import is_number, is_pair, negate
from .constants import Operators

TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(?:[:.]([0-5]\d)(\.\d{1,3})?)?$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_date(value: Any) -> Optional[datetime]:
    """
    Coerce a value to an aware datetime.

    Returns:
        datetime in UTC (or its own offset), None if not a date
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif is_number(value):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_time(value: Any) -> Optional[float]:
    """Seconds since midnight for an HH:MM[:SS[.mmm]] string, else None."""
    if not isinstance(value, str):
        return None
    match = TIME_RE.match(value.strip())
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    seconds = int(match.group(3)) if match.group(3) else 0
    fraction = float(match.group(4)) if match.group(4) else 0.0
    return hours * 3600 + minutes * 60 + seconds + fraction


# =============================================================================
# Builders
# =============================================================================

def _date_compare(compare: Callable[[datetime, datetime], bool]):
    def check(criterion: Any, value: Any = None) -> bool:
        left, right = parse_date(criterion), parse_date(value)
        if left is None or right is None:
            return False
        return compare(left, right)
    return check


def _date_vs_now(compare: Callable[[datetime, datetime], bool]):
    def check(criterion: Any, value: Any = None) -> bool:
        left = parse_date(criterion)
        if left is None:
            return False
        return compare(left, _utcnow())
    return check


def _time_compare(compare: Callable[[float, float], bool]):
    def check(criterion: Any, value: Any = None) -> bool:
        left, right = parse_time(criterion), parse_time(value)
        if left is None or right is None:
            return False
        return compare(left, right)
    return check


def eval_date(criterion: Any, value: Any = None) -> bool:
    return parse_date(criterion) is not None


def eval_date_between(criterion: Any, value: Any = None) -> bool:
    """start <= criterion <= end."""
    if not is_pair(value):
        return False
    current = parse_date(criterion)
    start, end = parse_date(value[0]), parse_date(value[1])
    if current is None or start is None or end is None:
        return False
    return start <= current <= end


def eval_date_equals_to_now(criterion: Any, value: Any = None) -> bool:
    """Same UTC calendar day as now."""
    current = parse_date(criterion)
    if current is None:
        return False
    return current.astimezone(timezone.utc).date() == _utcnow().date()


def eval_time_between(criterion: Any, value: Any = None) -> bool:
    if not is_pair(value):
        return False
    current = parse_time(criterion)
    start, end = parse_time(value[0]), parse_time(value[1])
    if current is None or start is None or end is None:
        return False
    return start <= current <= end


eval_date_after = _date_compare(lambda a, b: a > b)
eval_date_after_or_equals = _date_compare(lambda a, b: a >= b)
eval_date_before = _date_compare(lambda a, b: a < b)
eval_date_before_or_equals = _date_compare(lambda a, b: a <= b)
eval_date_equals = _date_compare(lambda a, b: a == b)

eval_date_after_now = _date_vs_now(lambda a, now: a > now)
eval_date_after_now_or_equals = _date_vs_now(lambda a, now: a >= now)
eval_date_before_now = _date_vs_now(lambda a, now: a < now)
eval_date_before_now_or_equals = _date_vs_now(lambda a, now: a <= now)

eval_time_after = _time_compare(lambda a, b: a > b)
eval_time_after_or_equals = _time_compare(lambda a, b: a >= b)
eval_time_before = _time_compare(lambda a, b: a < b)
eval_time_before_or_equals = _time_compare(lambda a, b: a <= b)
eval_time_equals = _time_compare(lambda a, b: a == b)

_DATE_INPUTS = ("date", "string", "number")

IMPLEMENTATIONS = {
    Operators.DATE.value: (eval_date, ("any",)),
    Operators.NOT_DATE.value: (negate(eval_date), ("any",)),
    Operators.DATE_AFTER.value: (eval_date_after, _DATE_INPUTS),
    Operators.DATE_AFTER_OR_EQUALS.value: (eval_date_after_or_equals, _DATE_INPUTS),
    Operators.DATE_BEFORE.value: (eval_date_before, _DATE_INPUTS),
    Operators.DATE_BEFORE_OR_EQUALS.value: (eval_date_before_or_equals, _DATE_INPUTS),
    Operators.DATE_EQUALS.value: (eval_date_equals, _DATE_INPUTS),
    Operators.DATE_NOT_EQUALS.value: (negate(eval_date_equals), _DATE_INPUTS),
    Operators.DATE_BETWEEN.value: (eval_date_between, _DATE_INPUTS),
    Operators.DATE_NOT_BETWEEN.value: (negate(eval_date_between), _DATE_INPUTS),
    Operators.DATE_AFTER_NOW.value: (eval_date_after_now, _DATE_INPUTS),
    Operators.DATE_AFTER_NOW_OR_EQUALS.value: (eval_date_after_now_or_equals, _DATE_INPUTS),
    Operators.DATE_BEFORE_NOW.value: (eval_date_before_now, _DATE_INPUTS),
    Operators.DATE_BEFORE_NOW_OR_EQUALS.value: (eval_date_before_now_or_equals, _DATE_INPUTS),
    Operators.DATE_EQUALS_TO_NOW.value: (eval_date_equals_to_now, _DATE_INPUTS),
    Operators.DATE_NOT_EQUALS_TO_NOW.value: (negate(eval_date_equals_to_now), _DATE_INPUTS),
    Operators.TIME_AFTER.value: (eval_time_after, ("time",)),
    Operators.TIME_AFTER_OR_EQUALS.value: (eval_time_after_or_equals, ("time",)),
    Operators.TIME_BEFORE.value: (eval_time_before, ("time",)),
    Operators.TIME_BEFORE_OR_EQUALS.value: (eval_time_before_or_equals, ("time",)),
    Operators.TIME_EQUALS.value: (eval_time_equals, ("time",)),
    Operators.TIME_NOT_EQUALS.value: (negate(eval_time_equals), ("time",)),
    Operators.TIME_BETWEEN.value: (eval_time_between, ("time",)),
    Operators.TIME_NOT_BETWEEN.value: (negate(eval_time_between), ("time",)),
}
