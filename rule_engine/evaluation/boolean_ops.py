"""
Boolean branches for rule conditions.

Handles AND, OR and NONE evaluation:
- AND stops at the first failing constraint, or at a failing sub-condition
  that carries a message
- OR stops at the first passing constraint; sub-conditions never stop it
- NONE checks every node

Each node also updates a passthrough value: the node's own result value
for a sub-condition, the branch's result value for a constraint.
"""

from __future__ import annotations

from typing import Any, Optional

from ..nodes import Condition, Constraint, Node
from ..types import EvaluationResult
from .protocols import EvaluatorProtocol


def _passthrough(condition: Condition, node: Node) -> Any:
    if isinstance(node, Condition):
        return node.result.value if node.result else None
    return condition.result.value if condition.result else None


def eval_and(
    condition: Condition,
    criteria: Any,
    evaluator: EvaluatorProtocol,
) -> EvaluationResult:
    """
    Evaluate an AND branch with short-circuit.

    Returns on the first failing constraint with its message.
    """
    is_passed = True
    value: Any = is_passed
    message: Optional[str] = None

    for node in condition.nodes:
        value = _passthrough(condition, node)
        if isinstance(node, Condition):
            evaluation = evaluator.evaluate_condition(node, criteria)
            is_passed = is_passed and evaluation.is_passed
            if not evaluation.is_passed and evaluation.message:
                message = evaluation.message
                break
        elif isinstance(node, Constraint):
            evaluation = evaluator.evaluate_constraint(node, criteria)
            is_passed = is_passed and evaluation.is_passed
            if not evaluation.is_passed:
                message = evaluation.message
                break

    return EvaluationResult(is_passed=is_passed, value=value, message=message)


def eval_or(
    condition: Condition,
    criteria: Any,
    evaluator: EvaluatorProtocol,
) -> EvaluationResult:
    """
    Evaluate an OR branch with short-circuit.

    Returns on the first passing constraint. Failing constraints leave
    their message behind; the last one wins.
    """
    is_passed = False
    value: Any = is_passed
    message: Optional[str] = None

    for node in condition.nodes:
        value = _passthrough(condition, node)
        if isinstance(node, Condition):
            evaluation = evaluator.evaluate_condition(node, criteria)
            is_passed = is_passed or evaluation.is_passed
        elif isinstance(node, Constraint):
            evaluation = evaluator.evaluate_constraint(node, criteria)
            is_passed = is_passed or evaluation.is_passed
            if evaluation.is_passed:
                break
            message = evaluation.message

    return EvaluationResult(is_passed=is_passed, value=value, message=message)


def eval_none(
    condition: Condition,
    criteria: Any,
    evaluator: EvaluatorProtocol,
) -> EvaluationResult:
    """
    Evaluate a NONE branch.

    Every node is evaluated. A passing constraint fails the branch and
    its own message is kept.
    """
    is_passed = True
    value: Any = is_passed
    message: Optional[str] = None

    for node in condition.nodes:
        value = _passthrough(condition, node)
        if isinstance(node, Condition):
            evaluation = evaluator.evaluate_condition(node, criteria)
            is_passed = is_passed and not evaluation.is_passed
        elif isinstance(node, Constraint):
            evaluation = evaluator.evaluate_constraint(node, criteria)
            is_passed = is_passed and not evaluation.is_passed
            if evaluation.is_passed and evaluation.message:
                message = evaluation.message

    return EvaluationResult(is_passed=is_passed, value=value, message=message)
