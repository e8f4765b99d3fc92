"""
Result types for the rule engine.

EvaluationResult is what the evaluator hands back for each criteria item.
ValidationResult is what the validator hands back for a rule.
CriteriaRange / IntrospectionResult carry the introspector output.
IntrospectionStep is introspector bookkeeping, alive for one call only.

All public results serialise to camelCase dicts via to_dict() so they can
be compared against (and shipped as) plain JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .nodes import ConditionType, RuleResult


# =============================================================================
# Evaluation
# =============================================================================

@dataclass(frozen=True)
class EvaluationResult:
    """
    Outcome of evaluating a rule (or one node of it) against one criteria item.

    Attributes:
        is_passed: Whether the node/rule passed
        value: Result payload value (root) or intermediate passthrough value
        message: Optional, already templated, human-readable message
    """
    is_passed: bool
    value: Any = None
    message: Optional[str] = None

    @classmethod
    def failure(cls, message: Optional[str] = None, value: Any = False) -> "EvaluationResult":
        return cls(is_passed=False, value=value, message=message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape {isPassed, value, message?}."""
        d: Dict[str, Any] = {"isPassed": self.is_passed, "value": self.value}
        if self.message is not None:
            d["message"] = self.message
        return d


# =============================================================================
# Validation
# =============================================================================

@dataclass(frozen=True)
class ValidationError:
    """First problem found in a rule and the fragment that caused it."""
    message: str
    element: Any = None


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error: Optional[ValidationError] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, message: str, element: Any = None) -> "ValidationResult":
        return cls(is_valid=False, error=ValidationError(message, element))

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"isValid": self.is_valid}
        if self.error is not None:
            d["error"] = {"message": self.error.message, "element": self.error.element}
        return d


# =============================================================================
# Introspection
# =============================================================================

@dataclass
class CriteriaRange:
    """
    Every input combination (one dict per alternative) reaching one result.

    options is an OR of ANDs: each dict maps a field to either a literal
    value, a list of acceptable values, or {"operator": ..., "value": ...}.
    """
    result: RuleResult
    options: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"result": self.result.to_dict(), "options": self.options}


@dataclass(frozen=True)
class StepChange:
    """A single field/value a step layered onto an existing option."""
    key: str
    value: Any


@dataclass
class IntrospectionStep:
    """What one condition contributed to a criteria range."""
    parent_type: Optional[ConditionType]
    curr_type: ConditionType
    depth: int
    option: Dict[str, Any]
    changes: Optional[List[StepChange]] = None

    def summary(self) -> str:
        parent = self.parent_type.value if self.parent_type else "root"
        changed = ", ".join(c.key for c in self.changes) if self.changes else "-"
        return f"depth={self.depth} {parent}->{self.curr_type.value} changes=[{changed}]"


@dataclass
class IntrospectionResult:
    """Full introspector output for a rule."""
    results: List[CriteriaRange]
    default: Optional[RuleResult] = None
    metadata: Optional[Dict[str, Any]] = None
    complexity: Optional[Dict[str, Any]] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"results": [r.to_dict() for r in self.results]}
        if self.default is not None:
            d["default"] = self.default.to_dict()
        if self.metadata is not None:
            d["metadata"] = self.metadata
        if self.complexity is not None:
            d["complexity"] = self.complexity
        if self.warnings:
            d["warnings"] = list(self.warnings)
        return d
