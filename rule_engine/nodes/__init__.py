"""
Rule condition tree node types.

Nodes are frozen dataclasses built by rule_engine.parser. The tree is a
tagged union decided at parse time:

    Node = Condition | Constraint | InvalidNode

Usage:
    rule = Rule(
        conditions=(
            Condition(
                ConditionType.AND,
                (
                    Constraint("age", "greater-than-or-equals", 18),
                    Constraint("status", "equals", "active"),
                ),
                result=RuleResult(value="adult"),
            ),
        ),
        default=RuleResult(value="minor"),
    )
"""

from .constants import (
    CONDITION_KEYS,
    TEXT_PATH_PREFIX,
    UNDEFINED_SENTINEL,
    ConditionType,
)
from .condition import (
    Condition,
    Constraint,
    InvalidNode,
    Node,
    Rule,
    RuleResult,
)

__all__ = [
    # Constants
    "CONDITION_KEYS",
    "TEXT_PATH_PREFIX",
    "UNDEFINED_SENTINEL",
    "ConditionType",
    # Nodes
    "Condition",
    "Constraint",
    "InvalidNode",
    "Node",
    "Rule",
    "RuleResult",
]
