"""
Declarative JSON rule engine.

Provides evaluation and reverse analysis of condition trees with:
- AND / OR / NONE conditions nesting field constraints
- A registry of named operators with declared negations
- $.path references in constraint values and result messages
- Criteria mutations (sync or async) applied before evaluation
- Introspection: the input combinations producing each rule result

Usage:
    from rule_engine import RuleEngine

    engine = RuleEngine()
    result = await engine.evaluate(rule, {"age": 30})
    ranges = engine.introspect(rule)
"""

from .errors import RuleEngineError, RuleError, RuleTypeError
from .nodes import (
    Condition,
    ConditionType,
    Constraint,
    InvalidNode,
    Rule,
    RuleResult,
)
from .types import (
    CriteriaRange,
    EvaluationResult,
    IntrospectionResult,
    ValidationError,
    ValidationResult,
)
from .operators import (
    OperatorCategory,
    OperatorRegistry,
    Operators,
    OperatorSpec,
    get_registry,
)
from .parser import load_document, load_rule, parse_rule
from .evaluation import Evaluator, evaluate
from .introspection import Introspector, introspect
from .validator import RuleValidator, validate_rule
from .builder import RuleBuilder
from .mutator import Mutator
from .engine import RuleEngine

__all__ = [
    # Facade
    "RuleEngine",
    # Services
    "Evaluator",
    "Introspector",
    "Mutator",
    "RuleBuilder",
    "RuleValidator",
    "evaluate",
    "introspect",
    "validate_rule",
    # Nodes
    "Condition",
    "ConditionType",
    "Constraint",
    "InvalidNode",
    "Rule",
    "RuleResult",
    "parse_rule",
    "load_document",
    "load_rule",
    # Results
    "CriteriaRange",
    "EvaluationResult",
    "IntrospectionResult",
    "ValidationError",
    "ValidationResult",
    # Operators
    "OperatorCategory",
    "OperatorRegistry",
    "Operators",
    "OperatorSpec",
    "get_registry",
    # Errors
    "RuleEngineError",
    "RuleError",
    "RuleTypeError",
]
