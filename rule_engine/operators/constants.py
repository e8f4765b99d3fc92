"""
Operator names.

The kebab-case values are the public contract: rules store them verbatim
and lookups are case-sensitive. New names may be added; existing names
must never be renamed.
"""

from __future__ import annotations

from enum import Enum


class Operators(str, Enum):
    """Every built-in operator name."""

    # Comparison
    EQUALS = "equals"
    NOT_EQUALS = "not-equals"
    GREATER_THAN = "greater-than"
    GREATER_THAN_OR_EQUALS = "greater-than-or-equals"
    LESS_THAN = "less-than"
    LESS_THAN_OR_EQUALS = "less-than-or-equals"
    IN = "in"
    NOT_IN = "not-in"
    BETWEEN = "between"
    NOT_BETWEEN = "not-between"

    # Array / collection
    CONTAINS = "contains"
    NOT_CONTAINS = "not-contains"
    CONTAINS_ANY = "contains-any"
    NOT_CONTAINS_ANY = "not-contains-any"
    CONTAINS_ALL = "contains-all"
    NOT_CONTAINS_ALL = "not-contains-all"
    SELF_CONTAINS_ANY = "self-contains-any"
    SELF_NOT_CONTAINS_ANY = "self-not-contains-any"
    SELF_CONTAINS_ALL = "self-contains-all"
    SELF_NOT_CONTAINS_ALL = "self-not-contains-all"
    SELF_CONTAINS_NONE = "self-contains-none"
    ARRAY_LENGTH = "array-length"
    ARRAY_MIN_LENGTH = "array-min-length"
    ARRAY_MAX_LENGTH = "array-max-length"

    # String
    LIKE = "like"
    NOT_LIKE = "not-like"
    STARTS_WITH = "starts-with"
    ENDS_WITH = "ends-with"
    CONTAINS_STRING = "contains-string"
    STRING_LENGTH = "string-length"
    NOT_STRING_LENGTH = "not-string-length"
    MIN_LENGTH = "min-length"
    MAX_LENGTH = "max-length"
    LENGTH_BETWEEN = "length-between"
    NOT_LENGTH_BETWEEN = "not-length-between"

    # Pattern
    MATCHES = "matches"
    NOT_MATCHES = "not-matches"
    EMAIL = "email"
    NOT_EMAIL = "not-email"
    URL = "url"
    NOT_URL = "not-url"
    UUID = "uuid"
    NOT_UUID = "not-uuid"
    ALPHA = "alpha"
    NOT_ALPHA = "not-alpha"
    ALPHA_NUMERIC = "alpha-numeric"
    NOT_ALPHA_NUMERIC = "not-alpha-numeric"
    LOWER_CASE = "lower-case"
    NOT_LOWER_CASE = "not-lower-case"
    UPPER_CASE = "upper-case"
    NOT_UPPER_CASE = "not-upper-case"
    PERSIAN_ALPHA = "persian-alpha"
    NOT_PERSIAN_ALPHA = "not-persian-alpha"
    PERSIAN_ALPHA_NUMERIC = "persian-alpha-numeric"
    NOT_PERSIAN_ALPHA_NUMERIC = "not-persian-alpha-numeric"

    # Numeric
    NUMERIC = "numeric"
    NOT_NUMERIC = "not-numeric"
    NUMBER = "number"
    NOT_NUMBER = "not-number"
    INTEGER = "integer"
    NOT_INTEGER = "not-integer"
    FLOAT = "float"
    NOT_FLOAT = "not-float"
    POSITIVE = "positive"
    NOT_POSITIVE = "not-positive"
    NEGATIVE = "negative"
    NOT_NEGATIVE = "not-negative"
    ZERO = "zero"
    NOT_ZERO = "not-zero"
    MIN = "min"
    MAX = "max"
    NUMBER_BETWEEN = "number-between"
    NOT_NUMBER_BETWEEN = "not-number-between"

    # Type
    STRING = "string"
    NOT_STRING = "not-string"
    OBJECT = "object"
    NOT_OBJECT = "not-object"
    ARRAY = "array"
    NOT_ARRAY = "not-array"

    # Boolean
    BOOLEAN = "boolean"
    NOT_BOOLEAN = "not-boolean"
    BOOLEAN_STRING = "boolean-string"
    NOT_BOOLEAN_STRING = "not-boolean-string"
    BOOLEAN_NUMBER = "boolean-number"
    NOT_BOOLEAN_NUMBER = "not-boolean-number"
    BOOLEAN_NUMBER_STRING = "boolean-number-string"
    NOT_BOOLEAN_NUMBER_STRING = "not-boolean-number-string"
    TRUTHY = "truthy"
    NOT_TRUTHY = "not-truthy"
    FALSY = "falsy"
    NOT_FALSY = "not-falsy"

    # Existence
    EXISTS = "exists"
    NOT_EXISTS = "not-exists"
    NULL_OR_UNDEFINED = "null-or-undefined"
    NOT_NULL_OR_UNDEFINED = "not-null-or-undefined"
    EMPTY = "empty"
    NOT_EMPTY = "not-empty"
    NULL_OR_WHITE_SPACE = "null-or-white-space"
    NOT_NULL_OR_WHITE_SPACE = "not-null-or-white-space"

    # Date / time
    DATE = "date"
    NOT_DATE = "not-date"
    DATE_AFTER = "date-after"
    DATE_AFTER_OR_EQUALS = "date-after-or-equals"
    DATE_BEFORE = "date-before"
    DATE_BEFORE_OR_EQUALS = "date-before-or-equals"
    DATE_EQUALS = "date-equals"
    DATE_NOT_EQUALS = "date-not-equals"
    DATE_BETWEEN = "date-between"
    DATE_NOT_BETWEEN = "date-not-between"
    DATE_AFTER_NOW = "date-after-now"
    DATE_AFTER_NOW_OR_EQUALS = "date-after-now-or-equals"
    DATE_BEFORE_NOW = "date-before-now"
    DATE_BEFORE_NOW_OR_EQUALS = "date-before-now-or-equals"
    DATE_EQUALS_TO_NOW = "date-equals-to-now"
    DATE_NOT_EQUALS_TO_NOW = "date-not-equals-to-now"
    TIME_AFTER = "time-after"
    TIME_AFTER_OR_EQUALS = "time-after-or-equals"
    TIME_BEFORE = "time-before"
    TIME_BEFORE_OR_EQUALS = "time-before-or-equals"
    TIME_EQUALS = "time-equals"
    TIME_NOT_EQUALS = "time-not-equals"
    TIME_BETWEEN = "time-between"
    TIME_NOT_BETWEEN = "time-not-between"

    def __str__(self) -> str:
        return self.value


# Operators whose constraint value must be a list
LIST_VALUE_OPERATORS = frozenset(op.value for op in (
    Operators.IN,
    Operators.NOT_IN,
    Operators.BETWEEN,
    Operators.NOT_BETWEEN,
    Operators.CONTAINS_ANY,
    Operators.NOT_CONTAINS_ANY,
    Operators.CONTAINS_ALL,
    Operators.NOT_CONTAINS_ALL,
    Operators.SELF_CONTAINS_ANY,
    Operators.SELF_NOT_CONTAINS_ANY,
    Operators.SELF_CONTAINS_ALL,
    Operators.SELF_NOT_CONTAINS_ALL,
    Operators.SELF_CONTAINS_NONE,
    Operators.LENGTH_BETWEEN,
    Operators.NOT_LENGTH_BETWEEN,
    Operators.NUMBER_BETWEEN,
    Operators.NOT_NUMBER_BETWEEN,
    Operators.DATE_BETWEEN,
    Operators.DATE_NOT_BETWEEN,
    Operators.TIME_BETWEEN,
    Operators.TIME_NOT_BETWEEN,
))

# Operators whose constraint value must be a regular expression
REGEX_VALUE_OPERATORS = frozenset(op.value for op in (
    Operators.MATCHES,
    Operators.NOT_MATCHES,
))

# Introspection folds these into the shorthand {field: value} form
SHORTHAND_OPERATORS = frozenset(op.value for op in (
    Operators.EQUALS,
    Operators.IN,
))
