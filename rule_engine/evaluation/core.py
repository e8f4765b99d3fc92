"""
Rule Evaluator.

Walks a parsed rule against criteria and produces EvaluationResult objects.

Key Features:
- Root conditions tried in declaration order, first passing one wins
- Short-circuit AND/OR, full-scan NONE (see boolean_ops)
- Operators dispatched through a precomputed OperatorRegistry
- $.path resolution for constraint values and message templates
- Never raises for data problems: unknown operators, invalid condition
  shapes and missing fields all come back as failing results

Usage:
    evaluator = Evaluator()
    result = evaluator.evaluate(rule, {"age": 21})
    results = evaluator.evaluate(rule, [{"age": 21}, {"age": 12}])
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Optional, Sequence, Union

from ..discovery import MISSING, resolve_property, resolve_text_path_expressions
from ..nodes import (
    TEXT_PATH_PREFIX,
    UNDEFINED_SENTINEL,
    Condition,
    ConditionType,
    Constraint,
    Node,
    Rule,
    RuleResult,
)
from ..operators import OperatorRegistry, get_registry
from ..parser import parse_rule
from ..types import EvaluationResult
from ..utils.logger import get_logger
from .boolean_ops import eval_and, eval_none, eval_or

INVALID_CONDITION_MESSAGE = (
    "Invalid condition type. Please provide a valid condition type. "
    "The condition type is case-sensitive."
)

_BRANCHES = {
    ConditionType.AND: eval_and,
    ConditionType.OR: eval_or,
    ConditionType.NONE: eval_none,
}


def invalid_operator_message(operator: Any) -> str:
    return (
        f"Invalid operator: {operator}. Please provide a valid operator. "
        "The operator is case-sensitive."
    )


class Evaluator:
    """
    Evaluates rules against criteria.

    Stateless apart from the registry reference; one instance can serve
    concurrent callers.

    Attributes:
        registry: Operator lookup (defaults to the process-wide registry)

    Example:
        evaluator = Evaluator()
        rule = {
            "conditions": [
                {"and": [{"field": "age", "operator": "greater-than", "value": 17}],
                 "result": {"value": "adult"}},
            ],
            "default": {"value": "minor"},
        }
        evaluator.evaluate(rule, {"age": 30}).value   # "adult"
    """

    def __init__(self, registry: Optional[OperatorRegistry] = None):
        self.registry = registry if registry is not None else get_registry()
        self._log = get_logger().component("evaluator")

    def evaluate(
        self,
        rule: Union[Rule, Mapping],
        criteria: Any,
    ) -> Union[EvaluationResult, List[EvaluationResult]]:
        """
        Evaluate a rule against one criteria object or a list of them.

        Args:
            rule: Parsed Rule or raw rule mapping (not validated here)
            criteria: Criteria object, or a list evaluated item by item

        Returns:
            One EvaluationResult, or a list in input order
        """
        parsed = parse_rule(rule)
        if isinstance(criteria, (list, tuple)):
            self._log.debug("Evaluating rule against %d criteria", len(criteria))
            return [self.evaluate_rule(parsed.conditions, item, parsed.default) for item in criteria]
        return self.evaluate_rule(parsed.conditions, criteria, parsed.default)

    def evaluate_rule(
        self,
        conditions: Sequence[Node],
        criteria: Any,
        default: Optional[RuleResult] = None,
    ) -> EvaluationResult:
        """
        Try root conditions in order.

        A failing root that produced a message ends the walk: the message is
        returned with the default value (or False) and later roots are not
        tried.
        """
        for condition in conditions:
            evaluation = self.evaluate_condition(condition, criteria)
            if evaluation.is_passed:
                result = condition.result if isinstance(condition, Condition) else None
                return self.mutate_result_message(
                    EvaluationResult(
                        is_passed=True,
                        value=result.value if result else None,
                        message=result.message if result else None,
                    ),
                    criteria,
                    True,
                )
            if evaluation.message:
                return EvaluationResult(
                    is_passed=False,
                    value=default.value if default and default.value is not None else False,
                    message=evaluation.message,
                )

        return self.mutate_result_message(
            EvaluationResult(
                is_passed=False,
                value=default.value if default else None,
                message=default.message if default else None,
            ),
            criteria,
            False,
        )

    def evaluate_condition(self, node: Node, criteria: Any) -> EvaluationResult:
        """Evaluate one branch node. Anything but a Condition is invalid."""
        if not isinstance(node, Condition):
            return EvaluationResult.failure(INVALID_CONDITION_MESSAGE, value=False)
        return _BRANCHES[node.type](node, criteria, self)

    def evaluate_constraint(self, constraint: Constraint, criteria: Any) -> EvaluationResult:
        """
        Test one constraint.

        A missing field is compared as the string "undefined". The boolean
        outcome is both the value and is_passed of the result.
        """
        criterion = resolve_property(constraint.field, criteria)
        if criterion is MISSING:
            criterion = UNDEFINED_SENTINEL

        spec = self.registry.get(constraint.operator)
        if spec is None:
            return EvaluationResult.failure(invalid_operator_message(constraint.operator), value=False)

        value = self.resolve_constraint_value(constraint.value, criteria)
        is_passed = bool(spec.evaluate(criterion, value))

        message = None
        if constraint.message:
            message = self.mutate_result_message(
                EvaluationResult(is_passed=is_passed, value=is_passed, message=constraint.message),
                _with_self(criteria, constraint.value, criterion),
                is_passed,
            ).message

        return EvaluationResult(is_passed=is_passed, value=is_passed, message=message)

    def resolve_constraint_value(self, value: Any, criteria: Any) -> Any:
        """
        Resolve $.path references in a constraint value.

        Lists are resolved element by element. A reference that does not
        resolve becomes None.
        """
        if isinstance(value, (list, tuple)):
            return [self._resolve_reference(item, criteria) for item in value]
        return self._resolve_reference(value, criteria)

    @staticmethod
    def _resolve_reference(value: Any, criteria: Any) -> Any:
        if isinstance(value, str) and value.startswith(TEXT_PATH_PREFIX):
            resolved = resolve_property(value, criteria)
            return None if resolved is MISSING else resolved
        return value

    @staticmethod
    def mutate_result_message(
        payload: EvaluationResult,
        criteria: Any,
        default_value: Any,
    ) -> EvaluationResult:
        """
        Template a result message and fill in a missing value.

        $.path expressions in the message are resolved against criteria.
        A None value is replaced by default_value.
        """
        value = payload.value if payload.value is not None else default_value
        message = payload.message
        if isinstance(message, str) and TEXT_PATH_PREFIX in message:
            message = resolve_text_path_expressions(message, criteria)
        return EvaluationResult(is_passed=payload.is_passed, value=value, message=message)


def _with_self(criteria: Any, configured: Any, criterion: Any) -> dict:
    """Criteria plus a "self" entry for $.self.value / $.self.input."""
    context = dict(criteria) if isinstance(criteria, Mapping) else {}
    context["self"] = {"value": configured, "input": criterion}
    return context


def evaluate(
    rule: Union[Rule, Mapping],
    criteria: Any,
    registry: Optional[OperatorRegistry] = None,
) -> Union[EvaluationResult, List[EvaluationResult]]:
    """
    Convenience function to evaluate a rule.

    Args:
        rule: Parsed Rule or raw rule mapping
        criteria: Criteria object or list of them
        registry: Optional operator registry

    Returns:
        EvaluationResult (or list of them)
    """
    return Evaluator(registry=registry).evaluate(rule, criteria)
