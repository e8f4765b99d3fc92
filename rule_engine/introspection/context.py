"""
Call-scoped introspection state.

One IntrospectionContext is created per introspect() call and threaded
through the recursion. Nothing here outlives the call, so a single
Introspector can serve concurrent callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from ..nodes import ConditionType
from ..operators import OperatorSpec
from ..types import IntrospectionStep, StepChange


@dataclass
class IntrospectionContext:
    """
    Mutable accumulator for a single introspection.

    Attributes:
        steps: What each processed option contributed, in order
        warnings: Non-fatal problems (unknown operator, missing negation)
        max_depth: Deepest nesting level seen (root conditions are level 1)
        total_conditions: Conditions visited
        total_constraints: Constraints visited
        fields: Field names in first-seen order
        operators: Operator names in first-seen order
        operators_by_category: category -> operator names
        field_types: field -> accepted field types shared by all its operators
    """
    steps: List[IntrospectionStep] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    max_depth: int = 0
    total_conditions: int = 0
    total_constraints: int = 0
    fields: List[str] = field(default_factory=list)
    operators: List[str] = field(default_factory=list)
    operators_by_category: Dict[str, List[str]] = field(default_factory=dict)
    field_types: Dict[str, Optional[Set[str]]] = field(default_factory=dict)

    @property
    def last_step(self) -> Optional[IntrospectionStep]:
        return self.steps[-1] if self.steps else None

    def push_step(
        self,
        parent_type: Optional[ConditionType],
        curr_type: ConditionType,
        depth: int,
        option: Dict[str, Any],
        changes: Optional[List[StepChange]] = None,
    ) -> IntrospectionStep:
        step = IntrospectionStep(
            parent_type=parent_type,
            curr_type=curr_type,
            depth=depth,
            option=option,
            changes=changes,
        )
        self.steps.append(step)
        return step

    def warn(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def record_condition(self, depth: int) -> None:
        self.total_conditions += 1
        self.max_depth = max(self.max_depth, depth + 1)

    def record_constraint(self, field_name: Any, operator: Any, spec: Optional[OperatorSpec]) -> None:
        self.total_constraints += 1
        name = str(field_name)
        if name not in self.fields:
            self.fields.append(name)
        if isinstance(operator, str) and operator not in self.operators:
            self.operators.append(operator)
        if spec is None:
            return

        by_category = self.operators_by_category.setdefault(spec.category.value, [])
        if spec.name not in by_category:
            by_category.append(spec.name)

        # "any" does not narrow the type
        if "any" in spec.accepted_field_types:
            self.field_types.setdefault(name, None)
            return
        current = self.field_types.get(name)
        accepted = set(spec.accepted_field_types)
        self.field_types[name] = accepted if current is None else current & accepted

    def metadata(self) -> Dict[str, Any]:
        field_types = {}
        for name in self.fields:
            types = self.field_types.get(name)
            field_types[name] = ["any"] if types is None else sorted(types)
        return {
            "uniqueFields": len(self.fields),
            "fields": list(self.fields),
            "operatorsByCategory": {k: list(v) for k, v in self.operators_by_category.items()},
            "fieldTypes": field_types,
        }

    def complexity(self) -> Dict[str, Any]:
        return {
            "maxDepth": self.max_depth,
            "totalConditions": self.total_conditions,
            "totalConstraints": self.total_constraints,
            "uniqueFields": len(self.fields),
            "score": self.total_conditions + self.total_constraints + self.max_depth,
        }
