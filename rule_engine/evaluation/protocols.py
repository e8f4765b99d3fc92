"""
Shared protocols for rule evaluation.

Provides Protocol classes to avoid circular imports between evaluation modules.
"""

from __future__ import annotations

from typing import Any, Protocol

from ..nodes import Constraint, Node
from ..types import EvaluationResult


class EvaluatorProtocol(Protocol):
    """Protocol for the rule evaluator to avoid circular imports."""

    def evaluate_condition(self, node: Node, criteria: Any) -> EvaluationResult: ...

    def evaluate_constraint(self, constraint: Constraint, criteria: Any) -> EvaluationResult: ...
