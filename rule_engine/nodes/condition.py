"""
Condition tree nodes.

This module defines the parsed form of a rule:
- RuleResult: payload returned when a condition decides the outcome
- Constraint: leaf test of one field against one operator/value
- Condition: AND / OR / NONE branch holding nested nodes
- InvalidNode: anything that is neither (kept so evaluation can report it)
- Rule: ordered root nodes plus an optional default result

Nodes compare and hash by identity (eq=False). Two results with the same
payload are still different outcomes; the introspector groups by identity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from .constants import ConditionType


# =============================================================================
# Result payload
# =============================================================================

@dataclass(frozen=True, eq=False)
class RuleResult:
    """
    Payload attached to a condition or used as the rule default.

    Attributes:
        value: Any JSON value handed back when this outcome is selected
        message: Optional message, may contain $.path placeholders
    """
    value: Any = None
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"value": self.value}
        if self.message is not None:
            d["message"] = self.message
        return d

    def __repr__(self) -> str:
        if self.message is None:
            return f"Result({self.value!r})"
        return f"Result({self.value!r}, {self.message!r})"


# =============================================================================
# Leaf and branch nodes
# =============================================================================

@dataclass(frozen=True, eq=False)
class Constraint:
    """
    Leaf node: test one criteria field with one operator.

    Attributes:
        field: Dotted path, or $.-prefixed path against the whole context
        operator: Operator name (kebab-case); None when the source omitted it
        value: Comparison value; strings/list items starting with $. are
            resolved against the criteria at evaluation time
        message: Optional diagnostic message ($.self.value / $.self.input
            are available in addition to criteria paths)
        has_value: False when the source omitted "value" entirely

    Examples:
        Constraint("age", "greater-than-or-equals", 18)
        Constraint("a", "equals", "$.b")   # field-to-field comparison
    """
    field: str
    operator: Optional[str]
    value: Any = None
    message: Optional[str] = None
    has_value: bool = field(default=True, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"field": self.field, "operator": self.operator}
        if self.has_value:
            d["value"] = self.value
        if self.message is not None:
            d["message"] = self.message
        return d

    def __repr__(self) -> str:
        return f"{self.field} {self.operator} {self.value!r}"


@dataclass(frozen=True, eq=False)
class Condition:
    """
    Branch node: AND / OR / NONE over child nodes.

    Attributes:
        type: Branch kind
        nodes: Child nodes in declaration order (may be empty)
        result: Payload when this condition decides the outcome
    """
    type: ConditionType
    nodes: Tuple["Node", ...]
    result: Optional[RuleResult] = None

    def __post_init__(self):
        """Validate branch type."""
        if not isinstance(self.type, ConditionType):
            raise ValueError(f"Condition: invalid type {self.type!r}")

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {self.type.value: [n.to_dict() for n in self.nodes]}
        if self.result is not None:
            d["result"] = self.result.to_dict()
        return d

    def __repr__(self) -> str:
        children = ", ".join(repr(n) for n in self.nodes)
        return f"{self.type.value.upper()}({children})"


@dataclass(frozen=True, eq=False)
class InvalidNode:
    """
    A node that is neither a condition nor a constraint.

    Root-level invalid nodes make evaluation return a failing result;
    nested ones are skipped.
    """
    raw: Any

    def to_dict(self) -> Any:
        return self.raw

    def __repr__(self) -> str:
        return f"Invalid({self.raw!r})"


Node = Union[Condition, Constraint, InvalidNode]


# =============================================================================
# Rule
# =============================================================================

@dataclass(frozen=True, eq=False)
class Rule:
    """
    Parsed rule.

    Root nodes are tried in order; the first passing one wins.
    """
    conditions: Tuple[Node, ...]
    default: Optional[RuleResult] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"conditions": [c.to_dict() for c in self.conditions]}
        if self.default is not None:
            d["default"] = self.default.to_dict()
        return d

    def __repr__(self) -> str:
        roots = ", ".join(repr(c) for c in self.conditions)
        return f"Rule([{roots}], default={self.default!r})"
