"""
Operators: names, implementations and the registry.

Usage:
    from rule_engine.operators import Operators, get_registry

    spec = get_registry().get(Operators.GREATER_THAN)
    spec.evaluate(10, 5)   # True
"""

from .constants import (
    LIST_VALUE_OPERATORS,
    REGEX_VALUE_OPERATORS,
    SHORTHAND_OPERATORS,
    Operators,
)
from .registry import (
    ALL_OPERATORS,
    NEGATION_PAIRS,
    OPERATOR_REGISTRY,
    OperatorCategory,
    OperatorRegistry,
    OperatorSpec,
    get_registry,
)

__all__ = [
    # Names
    "Operators",
    "LIST_VALUE_OPERATORS",
    "REGEX_VALUE_OPERATORS",
    "SHORTHAND_OPERATORS",
    # Registry
    "ALL_OPERATORS",
    "NEGATION_PAIRS",
    "OPERATOR_REGISTRY",
    "OperatorCategory",
    "OperatorRegistry",
    "OperatorSpec",
    "get_registry",
]
