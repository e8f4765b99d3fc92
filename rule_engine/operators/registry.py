"""
Operator Registry - single source of truth for operator semantics.

Used by:
- Evaluator (predicate dispatch)
- Introspector (negation under NONE, field type metadata)
- Validator (reject unknown operators)

Design:
- Each operator is an OperatorSpec: name, pure predicate, category,
  accepted field types
- The name -> spec map is built once; lookups never allocate
- Negations are registered as pairs and resolve in both directions
- Only true logical inverses are paired (date-after pairs with
  date-before-or-equals, never with date-before)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Union

from . import array, boolean, comparison, date_time, existence, numeric, pattern, string, type_checks
from .constants import Operators


class OperatorCategory(str, Enum):
    """Operator families."""
    COMPARISON = "comparison"
    ARRAY = "array"
    STRING = "string"
    PATTERN = "pattern"
    NUMERIC = "numeric"
    TYPE = "type"
    BOOLEAN = "boolean"
    EXISTENCE = "existence"
    DATE_TIME = "date_time"
    CUSTOM = "custom"


# Field types an operator can meaningfully test
FIELD_TYPES = frozenset({"any", "string", "number", "boolean", "date", "time", "array", "object"})


@dataclass(frozen=True)
class OperatorSpec:
    """
    Specification for a single operator.

    Attributes:
        name: Public operator name (kebab-case)
        evaluate: Pure predicate (criterion, value) -> bool, never raises
            on type mismatch
        category: Operator family
        accepted_field_types: Criterion types the operator is meant for
    """
    name: str
    evaluate: Callable[[Any, Any], bool]
    category: OperatorCategory
    accepted_field_types: FrozenSet[str] = frozenset({"any"})

    def metadata(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "acceptedFieldTypes": sorted(self.accepted_field_types),
        }


# =============================================================================
# Negation pairs
# =============================================================================

NEGATION_PAIRS = (
    (Operators.EQUALS, Operators.NOT_EQUALS),
    (Operators.LIKE, Operators.NOT_LIKE),
    (Operators.GREATER_THAN, Operators.LESS_THAN_OR_EQUALS),
    (Operators.LESS_THAN, Operators.GREATER_THAN_OR_EQUALS),
    (Operators.IN, Operators.NOT_IN),
    (Operators.BETWEEN, Operators.NOT_BETWEEN),
    (Operators.CONTAINS, Operators.NOT_CONTAINS),
    (Operators.CONTAINS_ANY, Operators.NOT_CONTAINS_ANY),
    (Operators.CONTAINS_ALL, Operators.NOT_CONTAINS_ALL),
    (Operators.SELF_CONTAINS_ANY, Operators.SELF_NOT_CONTAINS_ANY),
    (Operators.SELF_CONTAINS_ALL, Operators.SELF_NOT_CONTAINS_ALL),
    (Operators.STRING_LENGTH, Operators.NOT_STRING_LENGTH),
    (Operators.LENGTH_BETWEEN, Operators.NOT_LENGTH_BETWEEN),
    (Operators.MATCHES, Operators.NOT_MATCHES),
    (Operators.EMAIL, Operators.NOT_EMAIL),
    (Operators.URL, Operators.NOT_URL),
    (Operators.UUID, Operators.NOT_UUID),
    (Operators.ALPHA, Operators.NOT_ALPHA),
    (Operators.ALPHA_NUMERIC, Operators.NOT_ALPHA_NUMERIC),
    (Operators.LOWER_CASE, Operators.NOT_LOWER_CASE),
    (Operators.UPPER_CASE, Operators.NOT_UPPER_CASE),
    (Operators.PERSIAN_ALPHA, Operators.NOT_PERSIAN_ALPHA),
    (Operators.PERSIAN_ALPHA_NUMERIC, Operators.NOT_PERSIAN_ALPHA_NUMERIC),
    (Operators.NUMERIC, Operators.NOT_NUMERIC),
    (Operators.NUMBER, Operators.NOT_NUMBER),
    (Operators.INTEGER, Operators.NOT_INTEGER),
    (Operators.FLOAT, Operators.NOT_FLOAT),
    (Operators.POSITIVE, Operators.NOT_POSITIVE),
    (Operators.NEGATIVE, Operators.NOT_NEGATIVE),
    (Operators.ZERO, Operators.NOT_ZERO),
    (Operators.NUMBER_BETWEEN, Operators.NOT_NUMBER_BETWEEN),
    (Operators.STRING, Operators.NOT_STRING),
    (Operators.OBJECT, Operators.NOT_OBJECT),
    (Operators.ARRAY, Operators.NOT_ARRAY),
    (Operators.BOOLEAN, Operators.NOT_BOOLEAN),
    (Operators.BOOLEAN_STRING, Operators.NOT_BOOLEAN_STRING),
    (Operators.BOOLEAN_NUMBER, Operators.NOT_BOOLEAN_NUMBER),
    (Operators.BOOLEAN_NUMBER_STRING, Operators.NOT_BOOLEAN_NUMBER_STRING),
    (Operators.TRUTHY, Operators.NOT_TRUTHY),
    (Operators.FALSY, Operators.NOT_FALSY),
    (Operators.EXISTS, Operators.NOT_EXISTS),
    (Operators.NULL_OR_UNDEFINED, Operators.NOT_NULL_OR_UNDEFINED),
    (Operators.EMPTY, Operators.NOT_EMPTY),
    (Operators.NULL_OR_WHITE_SPACE, Operators.NOT_NULL_OR_WHITE_SPACE),
    (Operators.DATE, Operators.NOT_DATE),
    (Operators.DATE_AFTER, Operators.DATE_BEFORE_OR_EQUALS),
    (Operators.DATE_BEFORE, Operators.DATE_AFTER_OR_EQUALS),
    (Operators.DATE_EQUALS, Operators.DATE_NOT_EQUALS),
    (Operators.DATE_BETWEEN, Operators.DATE_NOT_BETWEEN),
    (Operators.DATE_EQUALS_TO_NOW, Operators.DATE_NOT_EQUALS_TO_NOW),
    (Operators.DATE_AFTER_NOW, Operators.DATE_BEFORE_NOW_OR_EQUALS),
    (Operators.DATE_BEFORE_NOW, Operators.DATE_AFTER_NOW_OR_EQUALS),
    (Operators.TIME_AFTER, Operators.TIME_BEFORE_OR_EQUALS),
    (Operators.TIME_BEFORE, Operators.TIME_AFTER_OR_EQUALS),
    (Operators.TIME_EQUALS, Operators.TIME_NOT_EQUALS),
    (Operators.TIME_BETWEEN, Operators.TIME_NOT_BETWEEN),
)


def _build_negations(pairs) -> Dict[str, str]:
    negations: Dict[str, str] = {}
    for positive, negative in pairs:
        negations[positive.value] = negative.value
        negations[negative.value] = positive.value
    return negations


# =============================================================================
# Registry
# =============================================================================

_BUILTIN_MODULES = (
    (OperatorCategory.COMPARISON, comparison),
    (OperatorCategory.ARRAY, array),
    (OperatorCategory.STRING, string),
    (OperatorCategory.PATTERN, pattern),
    (OperatorCategory.NUMERIC, numeric),
    (OperatorCategory.TYPE, type_checks),
    (OperatorCategory.BOOLEAN, boolean),
    (OperatorCategory.EXISTENCE, existence),
    (OperatorCategory.DATE_TIME, date_time),
)

OperatorName = Union[str, Operators]


def _key(name: Any) -> Any:
    return name.value if isinstance(name, Operators) else name


class OperatorRegistry:
    """
    Name -> OperatorSpec lookup with negation pairs.

    Usage:
        registry = OperatorRegistry.with_builtins()
        spec = registry.get("equals")
        spec.evaluate(5, 5)                          # True
        registry.get_negated_operator("less-than")   # "greater-than-or-equals"
    """

    def __init__(
        self,
        specs: Iterable[OperatorSpec] = (),
        negations: Optional[Dict[str, str]] = None,
    ):
        self._specs: Dict[str, OperatorSpec] = {}
        self._negations: Dict[str, str] = dict(negations or {})
        for spec in specs:
            self.register(spec)

    @classmethod
    def with_builtins(cls) -> "OperatorRegistry":
        """Registry holding every built-in operator."""
        specs = []
        for category, module in _BUILTIN_MODULES:
            for name, (fn, field_types) in module.IMPLEMENTATIONS.items():
                specs.append(OperatorSpec(
                    name=name,
                    evaluate=fn,
                    category=category,
                    accepted_field_types=frozenset(field_types),
                ))
        return cls(specs, _build_negations(NEGATION_PAIRS))

    def copy(self) -> "OperatorRegistry":
        return OperatorRegistry(self._specs.values(), self._negations)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def has(self, name: OperatorName) -> bool:
        return self.get(name) is not None

    def get(self, name: OperatorName) -> Optional[OperatorSpec]:
        """Spec for name, None if unknown (case-sensitive)."""
        try:
            return self._specs.get(_key(name))
        except TypeError:
            # unhashable operator value from a malformed rule
            return None

    def get_negated_operator(self, name: OperatorName) -> Optional[str]:
        """Registered logical inverse of name, None if there is none."""
        try:
            return self._negations.get(_key(name))
        except TypeError:
            return None

    def names(self) -> List[str]:
        return list(self._specs)

    def by_category(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for spec in self._specs.values():
            grouped.setdefault(spec.category.value, []).append(spec.name)
        return grouped

    def export(self) -> List[Dict[str, Any]]:
        """Name + metadata for every operator (for tooling / UIs)."""
        return [
            {"name": spec.name, "negation": self._negations.get(spec.name), **spec.metadata()}
            for spec in self._specs.values()
        ]

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def register(self, spec: OperatorSpec, negation: Optional[OperatorName] = None) -> None:
        """
        Add or replace an operator.

        Args:
            spec: Operator specification
            negation: Optional inverse operator name (registered both ways)
        """
        if not spec.name:
            raise ValueError("OperatorSpec: name must be non-empty")
        unknown = spec.accepted_field_types - FIELD_TYPES
        if unknown:
            raise ValueError(f"OperatorSpec '{spec.name}': unknown field types {sorted(unknown)}")
        self._specs[spec.name] = spec
        if negation is not None:
            self._negations[spec.name] = _key(negation)
            self._negations[_key(negation)] = spec.name

    def unregister(self, name: OperatorName) -> bool:
        """Remove an operator and its negation links. Returns True if it existed."""
        key = _key(name)
        existed = self._specs.pop(key, None) is not None
        partner = self._negations.pop(key, None)
        if partner is not None and self._negations.get(partner) == key:
            del self._negations[partner]
        return existed

    def __contains__(self, name: object) -> bool:
        return self.has(name)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._specs)


# Process-wide registry of built-in operators
OPERATOR_REGISTRY = OperatorRegistry.with_builtins()

# All built-in names
ALL_OPERATORS: FrozenSet[str] = frozenset(OPERATOR_REGISTRY.names())


def get_registry() -> OperatorRegistry:
    return OPERATOR_REGISTRY
