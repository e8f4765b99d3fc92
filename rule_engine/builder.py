"""
Fluent rule builder.

Assembles plain rule mappings (the same shape the parser, validator and
evaluator accept) without writing the JSON by hand.

Usage:
    builder = RuleBuilder()
    rule = (
        builder
        .add(builder.condition(
            "and",
            [builder.constraint("age", Operators.GREATER_THAN_OR_EQUALS, 18)],
            {"value": "adult"},
        ))
        .default({"value": "minor"})
        .build(validate=True)
    )
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from .errors import RuleError
from .nodes import ConditionType
from .operators import OperatorRegistry, Operators
from .validator import RuleValidator


class RuleBuilder:
    """
    Builds a rule one root condition at a time.

    condition() and constraint() only create nodes; add() puts a condition
    at the root of the rule being built.
    """

    def __init__(self, registry: Optional[OperatorRegistry] = None):
        self.validator = RuleValidator(registry)
        self._rule: Dict[str, Any] = {"conditions": []}

    def add(self, condition: Dict[str, Any]) -> "RuleBuilder":
        """Append a root condition."""
        self._rule["conditions"].append(condition)
        return self

    def default(self, payload: Dict[str, Any]) -> "RuleBuilder":
        """Set the payload returned when no root condition passes."""
        self._rule["default"] = payload
        return self

    def build(self, validate: bool = False) -> Dict[str, Any]:
        """
        Return the rule built so far.

        Args:
            validate: Run the rule through RuleValidator first

        Raises:
            RuleError: If validate is set and the rule is invalid
        """
        if not validate:
            return self._rule

        result = self.validator.validate(self._rule)
        if not result.is_valid:
            raise RuleError(result)
        return self._rule

    @staticmethod
    def condition(
        type: Union[ConditionType, str],
        nodes: List[Dict[str, Any]],
        result: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Condition node; result only for conditions that decide an outcome."""
        node: Dict[str, Any] = {ConditionType(type).value: nodes}
        if result is not None:
            node["result"] = result
        return node

    @staticmethod
    def constraint(field: str, operator: Union[Operators, str], value: Any) -> Dict[str, Any]:
        if isinstance(operator, Operators):
            operator = operator.value
        return {"field": field, "operator": operator, "value": value}
