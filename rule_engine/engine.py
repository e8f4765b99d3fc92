"""
Rule Engine facade.

One object wiring together validation, criteria mutation, evaluation and
introspection. Evaluation is async because mutations may be coroutines;
everything that only reads the rule is sync.

Usage:
    engine = RuleEngine()
    engine.add_mutation("country", lambda value, criteria: value.upper())

    result = await engine.evaluate(rule, {"country": "gb", "age": 30})
    passed = await engine.check_is_passed(rule, [{"age": 30}, {"age": 12}])
    ranges = engine.introspect(rule, include_metadata=True)
    rule = engine.builder().add(...).build(validate=True)
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .builder import RuleBuilder
from .errors import RuleError
from .evaluation import Evaluator
from .introspection import Introspector
from .mutator import MutationFn, Mutator
from .nodes import Rule
from .operators import OperatorRegistry, get_registry
from .parser import load_rule
from .types import EvaluationResult, IntrospectionResult, ValidationResult
from .utils.logger import get_logger
from .validator import RuleValidator

RuleInput = Union[Rule, Mapping, str, Path]
EvaluateOutput = Union[EvaluationResult, List[EvaluationResult]]


class RuleEngine:
    """
    Public entry point of the rule engine.

    Attributes:
        registry: Operator registry shared by every service of this engine
        trust_rules: Default for skipping validation before evaluation
    """

    def __init__(
        self,
        registry: Optional[OperatorRegistry] = None,
        trust_rules: Optional[bool] = None,
        mutation_cache: Optional[bool] = None,
    ):
        if trust_rules is None:
            from .config import get_config
            trust_rules = get_config().engine.trust_rules

        self.registry = registry if registry is not None else get_registry()
        self.trust_rules = trust_rules
        self.validator = RuleValidator(self.registry)
        self.evaluator = Evaluator(self.registry)
        self.introspector = Introspector(self.registry)
        self.mutator = Mutator(cache_enabled=mutation_cache)
        self._log = get_logger().component("engine")

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_mutation(self, name: str, mutation: MutationFn) -> "RuleEngine":
        """Register a criteria transform for a field path."""
        self.mutator.add(name, mutation)
        return self

    register_mutation = add_mutation

    def remove_mutation(self, name: str) -> "RuleEngine":
        """Unregister a mutation and purge its cached results."""
        self.mutator.remove(name)
        return self

    def clear_mutation_cache(self, name: Optional[str] = None) -> "RuleEngine":
        self.mutator.clear_cache(name)
        return self

    # =========================================================================
    # Evaluation
    # =========================================================================

    async def evaluate(
        self,
        rule: RuleInput,
        criteria: Any,
        trust_rule: Optional[bool] = None,
    ) -> EvaluateOutput:
        """
        Evaluate a rule against criteria (or each item of a criteria list).

        Args:
            rule: Rule mapping, parsed Rule, or JSON/YAML file path or text
            criteria: Criteria object or list of criteria objects
            trust_rule: Skip validation (defaults to the engine setting)

        Raises:
            RuleError: If validation is on and the rule is invalid
        """
        rule = self._load(rule)
        trusted = self.trust_rules if trust_rule is None else trust_rule
        if not trusted:
            self._ensure_valid(rule)

        mutated = await self.mutator.mutate(criteria)
        return self.evaluator.evaluate(rule, mutated)

    async def check_is_passed(
        self,
        rule: RuleInput,
        criteria: Any,
        trust_rule: Optional[bool] = None,
    ) -> bool:
        """True if the rule passed (for every item, given a criteria list)."""
        result = await self.evaluate(rule, criteria, trust_rule)
        if isinstance(result, list):
            return all(r.is_passed for r in result)
        return result.is_passed

    async def get_evaluate_result(
        self,
        rule: RuleInput,
        criteria: Any,
        trust_rule: Optional[bool] = None,
    ) -> Any:
        """Result value (or list of values) of an evaluation."""
        result = await self.evaluate(rule, criteria, trust_rule)
        if isinstance(result, list):
            return [r.value for r in result]
        return result.value

    async def evaluate_multiple(
        self,
        rules: Sequence[RuleInput],
        criteria: Any,
        trust_rule: Optional[bool] = None,
    ) -> List[EvaluateOutput]:
        """Evaluate several rules against the same criteria concurrently."""
        return list(await asyncio.gather(
            *(self.evaluate(rule, criteria, trust_rule) for rule in rules)
        ))

    # =========================================================================
    # Rule inspection
    # =========================================================================

    def introspect(
        self,
        rule: RuleInput,
        include_metadata: bool = False,
        include_complexity: bool = False,
    ) -> IntrospectionResult:
        """
        Criteria ranges for every result of a granular rule.

        Raises:
            RuleError: If the rule is invalid
            RuleTypeError: If the rule is not granular
        """
        rule = self._load(rule)
        self._ensure_valid(rule)
        return self.introspector.introspect(
            rule,
            include_metadata=include_metadata,
            include_complexity=include_complexity,
        )

    def validate(self, rule: RuleInput) -> ValidationResult:
        rule = self._load(rule)
        if isinstance(rule, Rule):
            rule = rule.to_dict()
        return self.validator.validate(rule)

    def validate_operators(self, rule: RuleInput) -> Dict[str, Any]:
        return self.introspector.validate_operators(self._load(rule))

    def get_used_operators(self, rule: RuleInput) -> List[str]:
        return self.introspector.get_used_operators(self._load(rule))

    def operators(self) -> List[Dict[str, Any]]:
        """Every registered operator with its negation and metadata."""
        return self.registry.export()

    def builder(self) -> RuleBuilder:
        """New rule builder validating against this engine's registry."""
        return RuleBuilder(self.registry)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _load(rule: RuleInput) -> Union[Rule, Mapping]:
        if isinstance(rule, (str, Path)):
            return load_rule(rule)
        return rule

    def _ensure_valid(self, rule: Union[Rule, Mapping]) -> None:
        result = self.validate(rule)
        if not result.is_valid:
            self._log.debug("Rule rejected: %s", result.error.message)
            raise RuleError(result)
