"""
Rule Validator: structural validation of raw rule documents.

Runs on untrusted input before anything is parsed. The first problem found
wins and is reported together with the fragment that caused it.

Checks:
- rule is a mapping with at least one condition
- every condition has exactly one of and / or / none, holding a list
- every node is a condition or a constraint
- constraint field is a string and operator is registered
- list-valued operators carry a list, regex operators a compilable pattern
- result / default payloads are mappings with a "value" key
"""

from __future__ import annotations

import difflib
from collections.abc import Mapping
from typing import Any, Optional

from .discovery import condition_type, get_conditions, is_constraint
from .nodes import CONDITION_KEYS, TEXT_PATH_PREFIX
from .operators import LIST_VALUE_OPERATORS, REGEX_VALUE_OPERATORS, OperatorRegistry, get_registry
from .operators.pattern import compile_pattern
from .types import ValidationResult


class RuleValidator:
    """
    Validates raw rule mappings.

    Usage:
        validator = RuleValidator()
        result = validator.validate(rule)
        if not result.is_valid:
            print(result.error.message, result.error.element)
    """

    def __init__(self, registry: Optional[OperatorRegistry] = None):
        self.registry = registry if registry is not None else get_registry()

    def validate(self, rule: Any) -> ValidationResult:
        if not isinstance(rule, Mapping):
            return ValidationResult.invalid("The rule must be a valid JSON object.", rule)

        conditions = get_conditions(rule)
        if not conditions or (isinstance(conditions[0], Mapping) and not conditions[0]):
            return ValidationResult.invalid(
                "The conditions property must contain at least one condition.", rule
            )

        for condition in conditions:
            result = self._validate_condition(condition)
            if not result.is_valid:
                return result

        if "default" in rule and rule["default"] is not None:
            result = self._validate_result(rule["default"], 'Rule "default"')
            if not result.is_valid:
                return result

        return ValidationResult.ok()

    # =========================================================================
    # Conditions
    # =========================================================================

    def _validate_condition(self, condition: Any) -> ValidationResult:
        if isinstance(condition, Mapping):
            present = [key for key in CONDITION_KEYS if key in condition]
            if len(present) > 1:
                return ValidationResult.invalid(
                    'A condition cannot have more than one "and", "or", or "none" property.',
                    condition,
                )

        ctype = condition_type(condition) if not is_constraint(condition) else None
        if ctype is None:
            return ValidationResult.invalid("Invalid condition structure.", condition)

        nodes = condition[ctype.value]
        if not isinstance(nodes, (list, tuple)):
            return ValidationResult.invalid(
                f"The condition '{ctype.value}' should be iterable.", condition
            )

        if condition.get("result") is not None:
            result = self._validate_result(condition["result"], 'Condition "result"')
            if not result.is_valid:
                return result

        for node in nodes:
            if is_constraint(node):
                result = self._validate_constraint(node)
            elif isinstance(node, Mapping) and any(key in node for key in CONDITION_KEYS):
                result = self._validate_condition(node)
            else:
                return ValidationResult.invalid("Each node should be a condition or constraint.", node)
            if not result.is_valid:
                return result

        return ValidationResult.ok()

    def _validate_result(self, payload: Any, label: str) -> ValidationResult:
        if not isinstance(payload, Mapping) or "value" not in payload:
            return ValidationResult.invalid(
                f'{label} must be an object with a "value" property.', payload
            )
        return ValidationResult.ok()

    # =========================================================================
    # Constraints
    # =========================================================================

    def _validate_constraint(self, constraint: Mapping) -> ValidationResult:
        if not isinstance(constraint.get("field"), str):
            return ValidationResult.invalid('Constraint "field" must be of type string.', constraint)

        operator = constraint.get("operator")
        if not isinstance(operator, str) or not self.registry.has(operator):
            return ValidationResult.invalid(self._operator_message(operator), constraint)

        value = constraint.get("value")
        if operator in LIST_VALUE_OPERATORS and not isinstance(value, (list, tuple)):
            return ValidationResult.invalid(
                'Constraint "value" must be an array if the "operator" is in '
                f"{','.join(sorted(LIST_VALUE_OPERATORS))}",
                constraint,
            )

        if operator in REGEX_VALUE_OPERATORS and not _is_reference(value):
            if not isinstance(value, str) or compile_pattern(value) is None:
                return ValidationResult.invalid(
                    'Constraint "value" must be a valid regular expression if the "operator" is in '
                    f"{','.join(sorted(REGEX_VALUE_OPERATORS))}",
                    constraint,
                )

        return ValidationResult.ok()

    def _operator_message(self, operator: Any) -> str:
        msg = f'Constraint "operator" with value {operator} is invalid.'
        if isinstance(operator, str):
            suggestions = difflib.get_close_matches(operator, self.registry.names(), n=3, cutoff=0.6)
            if suggestions:
                msg += f" (did you mean: {', '.join(suggestions)}?)"
        return msg


def _is_reference(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(TEXT_PATH_PREFIX)


def validate_rule(rule: Any, registry: Optional[OperatorRegistry] = None) -> ValidationResult:
    """Convenience function to validate a rule."""
    return RuleValidator(registry=registry).validate(rule)
