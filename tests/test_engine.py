"""
Tests for the RuleEngine facade.

Validates that:
1. Rules are validated before evaluation unless trusted
2. Mutations registered on the engine apply before evaluation
3. The boolean / value / multi-rule helpers shape results correctly
4. Introspection and validation accept mappings, parsed rules and files
"""

import json

import pytest

from rule_engine import RuleEngine, RuleError, RuleTypeError, parse_rule
from rule_engine.evaluation import INVALID_CONDITION_MESSAGE, invalid_operator_message


@pytest.fixture
def engine():
    return RuleEngine(trust_rules=False, mutation_cache=False)


class TestEvaluate:

    @pytest.mark.asyncio
    async def test_validated_evaluation(self, engine, valid1_rule):
        result = await engine.evaluate(valid1_rule, {"payload": {"ProfitPercentage": 11}})
        assert result.is_passed
        assert result.value is True

    @pytest.mark.asyncio
    async def test_invalid_rule_raises(self, engine, invalid2_rule):
        with pytest.raises(RuleError) as exc_info:
            await engine.evaluate(invalid2_rule, {})
        assert exc_info.value.element == {"foo": "bar"}

    @pytest.mark.asyncio
    async def test_empty_conditions_raise(self, engine):
        with pytest.raises(RuleError, match="at least one condition"):
            await engine.evaluate({"conditions": []}, {})

    @pytest.mark.asyncio
    async def test_trusted_rule_skips_validation(self, engine, invalid2_rule):
        result = await engine.evaluate(invalid2_rule, {}, trust_rule=True)
        assert not result.is_passed
        assert result.value == 2
        assert result.message == INVALID_CONDITION_MESSAGE

    @pytest.mark.asyncio
    async def test_trusted_engine(self, invalid2_rule):
        engine = RuleEngine(trust_rules=True, mutation_cache=False)
        result = await engine.evaluate(invalid2_rule, {"Leverage": 1000})
        assert result.value == 3

    @pytest.mark.asyncio
    async def test_trusted_unknown_operator(self, engine):
        rule = {"conditions": [{"and": [{"field": "a", "operator": "foo", "value": 1}]}]}
        result = await engine.evaluate(rule, {"a": 1}, trust_rule=True)
        assert not result.is_passed
        assert result.message == invalid_operator_message("foo")

    @pytest.mark.asyncio
    async def test_rule_from_file(self, engine, tmp_path, valid3_rule):
        path = tmp_path / "pricing.json"
        path.write_text(json.dumps(valid3_rule), encoding="utf-8")
        assert (await engine.evaluate(str(path), {"Category": "Islamic"})).value == 4

    @pytest.mark.asyncio
    async def test_parsed_rule(self, engine, valid3_rule):
        assert (await engine.evaluate(parse_rule(valid3_rule), {"Leverage": 1000})).value == 3


class TestHelpers:

    @pytest.mark.asyncio
    async def test_check_is_passed(self, engine, valid5_rule):
        assert await engine.check_is_passed(valid5_rule, {"countries": ["US"]})
        assert await engine.check_is_passed(valid5_rule, [{"countries": ["US"]}, {"states": ["TN"]}])
        assert not await engine.check_is_passed(valid5_rule, [{"countries": ["US"]}, {"states": ["NY"]}])

    @pytest.mark.asyncio
    async def test_get_evaluate_result(self, engine, valid3_rule):
        assert await engine.get_evaluate_result(valid3_rule, {"Leverage": 1000}) == 3
        assert await engine.get_evaluate_result(valid3_rule, [{"Leverage": 1000}, {}]) == [3, 2]

    @pytest.mark.asyncio
    async def test_evaluate_multiple(self, engine, valid3_rule, valid9_rule):
        results = await engine.evaluate_multiple([valid3_rule, valid9_rule], {"country": "SE", "Leverage": 1000})
        assert [r.value for r in results] == [3, 5]

    @pytest.mark.asyncio
    async def test_evaluate_multiple_propagates_invalid_rule(self, engine, valid3_rule, invalid2_rule):
        with pytest.raises(RuleError):
            await engine.evaluate_multiple([valid3_rule, invalid2_rule], {})


class TestMutations:

    @pytest.mark.asyncio
    async def test_mutation_applies_before_evaluation(self, engine, valid1_rule):
        engine.add_mutation("$.payload.ProfitPercentage", lambda value, criteria: value * 2)
        criteria = {"payload": {"ProfitPercentage": 5}}
        assert await engine.check_is_passed(valid1_rule, criteria)
        assert criteria["payload"]["ProfitPercentage"] == 5

    @pytest.mark.asyncio
    async def test_async_mutation_on_nested_path(self, engine):
        async def double(value, criteria):
            return value * 2

        rule = {"conditions": [{"and": [{"field": "$.foo.bar", "operator": "greater-than", "value": 6}]}]}
        engine.register_mutation("$.foo.bar", double)
        assert await engine.check_is_passed(rule, {"foo": {"bar": 5}})

    @pytest.mark.asyncio
    async def test_remove_mutation(self, engine, valid3_rule):
        engine.add_mutation("Leverage", lambda value, criteria: 1000)
        assert await engine.get_evaluate_result(valid3_rule, {"Leverage": 10}) == 3

        engine.remove_mutation("Leverage").clear_mutation_cache()
        assert await engine.get_evaluate_result(valid3_rule, {"Leverage": 10}) == 2


class TestInspection:

    def test_introspect(self, engine, valid9_rule):
        result = engine.introspect(valid9_rule, include_complexity=True)
        assert [r.result.value for r in result.results] == [5, 10]
        assert result.complexity["score"] == 11

    def test_introspect_invalid_rule(self, engine, invalid2_rule):
        with pytest.raises(RuleError):
            engine.introspect(invalid2_rule)

    def test_introspect_not_granular(self, engine, valid2_rule):
        with pytest.raises(RuleTypeError):
            engine.introspect(valid2_rule)

    def test_introspect_yaml_text(self, engine):
        text = (
            "conditions:\n"
            "  - or:\n"
            "      - field: tier\n"
            "        operator: in\n"
            "        value: [gold, platinum]\n"
            "    result:\n"
            "      value: 20\n"
        )
        result = engine.introspect(text)
        assert result.to_dict()["results"] == [
            {"result": {"value": 20}, "options": [{"tier": ["gold", "platinum"]}]},
        ]

    def test_validate(self, engine, valid3_rule, invalid2_rule):
        assert engine.validate(valid3_rule).is_valid
        assert engine.validate(parse_rule(valid3_rule)).is_valid
        assert not engine.validate(invalid2_rule).is_valid

    def test_operator_queries(self, engine, valid3_rule):
        assert engine.get_used_operators(valid3_rule) == ["in", "less-than", "equals", "greater-than-or-equals"]
        assert engine.validate_operators(valid3_rule)["isValid"]

    def test_operators_export(self, engine):
        exported = {op["name"]: op for op in engine.operators()}
        assert exported["equals"] == {
            "name": "equals",
            "negation": "not-equals",
            "category": "comparison",
            "acceptedFieldTypes": ["any"],
        }
        assert exported["starts-with"]["negation"] is None

    @pytest.mark.asyncio
    async def test_custom_registry(self, custom_registry):
        engine = RuleEngine(registry=custom_registry, trust_rules=False, mutation_cache=False)
        rule = {"conditions": [{"and": [{"field": "n", "operator": "divisible-by", "value": 5}]}]}
        assert await engine.check_is_passed(rule, {"n": 25})
        assert any(op["name"] == "divisible-by" for op in engine.operators())
