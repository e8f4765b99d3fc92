"""
Rule Introspector.

Derives, for every distinct result of a granular rule, the input
combinations that produce it.

Algorithm:
1. Group root conditions by result identity (the same RuleResult object
   reached through several roots is one outcome with several routes)
2. For each condition, fold its direct constraints into options:
   AND folds them into one option, OR / NONE yield one option per field
3. Constraints inside (or anywhere below) a NONE take their registered
   negated operator
4. Recurse into nested conditions one level deeper, with this condition
   as the parent; add_option decides whether the result forks a new
   option or merges into the last one

Usage:
    introspector = Introspector()
    result = introspector.introspect(rule)
    for criteria_range in result.results:
        print(criteria_range.result.value, criteria_range.options)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Union

from ..discovery import is_granular
from ..errors import RuleTypeError
from ..nodes import Condition, ConditionType, Constraint, Rule, RuleResult
from ..operators import OperatorRegistry, get_registry
from ..parser import parse_rule
from ..types import CriteriaRange, IntrospectionResult
from ..utils.logger import get_logger
from .context import IntrospectionContext
from .options import add_option, merge_field_options, update_option

NOT_GRANULAR_MESSAGE = (
    "The provided rule is not granular. A granular rule is required for Introspection"
)


class Introspector:
    """
    Reverse analysis of granular rules.

    Holds no per-call state: every introspect() call builds its own
    IntrospectionContext.

    Attributes:
        registry: Operator lookup used for negation and metadata
    """

    def __init__(self, registry: Optional[OperatorRegistry] = None):
        self.registry = registry if registry is not None else get_registry()
        self._log = get_logger().component("introspector")

    def introspect(
        self,
        rule: Union[Rule, Mapping],
        include_metadata: bool = False,
        include_complexity: bool = False,
    ) -> IntrospectionResult:
        """
        Derive criteria ranges for every result of a rule.

        Args:
            rule: Parsed Rule or raw rule mapping
            include_metadata: Add fields, operators by category and field types
            include_complexity: Add depth / size counters

        Returns:
            IntrospectionResult with one CriteriaRange per distinct result

        Raises:
            RuleTypeError: If the rule is not granular
        """
        parsed = parse_rule(rule)
        if not is_granular(parsed):
            raise RuleTypeError(NOT_GRANULAR_MESSAGE)

        ctx = IntrospectionContext()

        # Identity-keyed: RuleResult compares by identity
        condition_map: Dict[RuleResult, List[Condition]] = {}
        for condition in parsed.conditions:
            condition_map.setdefault(condition.result, []).append(condition)

        ranges = [CriteriaRange(result=result) for result in condition_map]
        for criteria_range in ranges:
            self._log.debug("Introspecting result %r", criteria_range.result)
            for condition in condition_map[criteria_range.result]:
                self._resolve_condition(ctx, criteria_range, condition, None, 0, False)

        for warning in ctx.warnings:
            self._log.warning(warning)

        return IntrospectionResult(
            results=ranges,
            default=parsed.default,
            metadata=ctx.metadata() if include_metadata else None,
            complexity=ctx.complexity() if include_complexity else None,
            warnings=list(ctx.warnings),
        )

    # -------------------------------------------------------------------------
    # Recursion
    # -------------------------------------------------------------------------

    def _resolve_condition(
        self,
        ctx: IntrospectionContext,
        criteria_range: CriteriaRange,
        condition: Condition,
        parent_type: Optional[ConditionType],
        depth: int,
        inside_none: bool,
    ) -> None:
        ctx.record_condition(depth)
        negate = inside_none or condition.type is ConditionType.NONE

        self._populate_options(ctx, criteria_range, condition, parent_type, depth, negate)

        for node in condition.nodes:
            if isinstance(node, Condition):
                self._resolve_condition(ctx, criteria_range, node, condition.type, depth + 1, negate)

    def _populate_options(
        self,
        ctx: IntrospectionContext,
        criteria_range: CriteriaRange,
        condition: Condition,
        parent_type: Optional[ConditionType],
        depth: int,
        negate: bool,
    ) -> None:
        ctype = condition.type
        field_options: Dict[Any, Dict[str, Any]] = {}

        for node in condition.nodes:
            if not isinstance(node, Constraint):
                continue
            self._log.debug(
                "Processing %s (%s) in %s condition", node.field, node.operator, ctype.value
            )
            operator = self._effective_operator(ctx, node, negate)
            option = field_options.get(node.field, {})
            field_options[node.field] = update_option(option, node, operator, ctype)

        if ctype is ConditionType.AND:
            add_option(
                ctx, ctype, parent_type, criteria_range,
                merge_field_options(list(field_options.values())), depth,
            )
            self._debug_step(ctx)
            return

        for option in field_options.values():
            add_option(ctx, ctype, parent_type, criteria_range, option, depth)
            self._debug_step(ctx)

    def _effective_operator(self, ctx: IntrospectionContext, constraint: Constraint, negate: bool) -> Any:
        """Operator as it should appear in the option (negated under NONE)."""
        operator = constraint.operator
        spec = self.registry.get(operator)
        ctx.record_constraint(constraint.field, operator, spec)

        if spec is None:
            ctx.warn(f"Unknown operator '{operator}' on field '{constraint.field}'")
            return operator
        if not negate:
            return operator

        negated = self.registry.get_negated_operator(operator)
        if negated is None:
            ctx.warn(
                f"No negation registered for operator '{operator}' on field "
                f"'{constraint.field}'; kept as is"
            )
            return operator
        return negated

    def _debug_step(self, ctx: IntrospectionContext) -> None:
        step = ctx.last_step
        if step is not None:
            self._log.debug("Step complete: %s", step.summary())

    # -------------------------------------------------------------------------
    # Operator collection (no granularity requirement)
    # -------------------------------------------------------------------------

    def get_used_operators(self, rule: Union[Rule, Mapping]) -> List[str]:
        """Operator names used anywhere in a rule, first-seen order."""
        used: List[str] = []
        for constraint in _iter_constraints(parse_rule(rule).conditions):
            operator = constraint.operator
            if isinstance(operator, str) and operator not in used:
                used.append(operator)
        return used

    def validate_operators(self, rule: Union[Rule, Mapping]) -> Dict[str, Any]:
        """
        Check every operator in a rule against the registry.

        Returns:
            {"isValid": bool, "invalidOperators": [...]} (first-seen order)
        """
        invalid: List[Any] = []
        for constraint in _iter_constraints(parse_rule(rule).conditions):
            operator = constraint.operator
            if self.registry.get(operator) is None and operator not in invalid:
                invalid.append(operator)
        return {"isValid": not invalid, "invalidOperators": invalid}


def _iter_constraints(nodes):
    for node in nodes:
        if isinstance(node, Constraint):
            yield node
        elif isinstance(node, Condition):
            yield from _iter_constraints(node.nodes)


def introspect(
    rule: Union[Rule, Mapping],
    include_metadata: bool = False,
    include_complexity: bool = False,
    registry: Optional[OperatorRegistry] = None,
) -> IntrospectionResult:
    """Convenience function to introspect a rule."""
    return Introspector(registry=registry).introspect(
        rule,
        include_metadata=include_metadata,
        include_complexity=include_complexity,
    )
