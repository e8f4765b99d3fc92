"""
Tests for rule evaluation.

Validates that:
1. Root conditions are tried in order and the first passing one wins
2. AND / OR / NONE branches pass and fail as documented
3. Constraint messages short-circuit the walk with the default value
4. $.path references resolve in constraint values and messages
5. Data problems come back as failing results, never as exceptions
"""

import pytest

from rule_engine.evaluation import (
    INVALID_CONDITION_MESSAGE,
    Evaluator,
    evaluate,
    invalid_operator_message,
)
from rule_engine.types import EvaluationResult


@pytest.fixture
def evaluator():
    return Evaluator()


def _rule(*roots, default=None):
    rule = {"conditions": list(roots)}
    if default is not None:
        rule["default"] = default
    return rule


class TestRootOrder:

    def test_non_granular_rule_yields_bool(self, evaluator, valid1_rule):
        assert evaluator.evaluate(valid1_rule, {"payload": {"ProfitPercentage": 9}}).value is False
        assert evaluator.evaluate(valid1_rule, {"payload": {"ProfitPercentage": 11}}).value is True

    def test_all_and_constraints_required(self, evaluator, valid1_rule):
        criteria = {"WinRate": 80, "AverageTradeDuration": 5, "Duration": 9000000}
        assert evaluator.evaluate(valid1_rule, criteria).is_passed is False
        criteria["TotalDaysTraded"] = 5
        assert evaluator.evaluate(valid1_rule, criteria).is_passed is True

    @pytest.mark.parametrize("criteria,expected", [
        ({}, 2),
        ({"Leverage": 1000}, 3),
        ({"Leverage": 999}, 2),
        ({"Category": "Islamic"}, 4),
        ({"Monetization": "Real"}, 2),
        ({"Monetization": "Real", "Leverage": 150, "CountryIso": "FI"}, 3),
    ])
    def test_granular_results(self, evaluator, valid3_rule, criteria, expected):
        assert evaluator.evaluate(valid3_rule, criteria).value == expected

    def test_first_passing_root_wins(self, evaluator, valid3_rule):
        result = evaluator.evaluate(valid3_rule, {"Leverage": 1000, "Category": "Islamic"})
        assert result == EvaluationResult(is_passed=True, value=3)

    def test_no_default_fails_with_false_value(self, evaluator, valid9_rule):
        result = evaluator.evaluate(valid9_rule, {"country": "US"})
        assert result.is_passed is False
        assert result.value is False

    def test_list_criteria_keeps_order(self, evaluator, valid3_rule):
        results = evaluator.evaluate(valid3_rule, [{"Leverage": 1000}, {}, {"Category": "Islamic"}])
        assert [r.value for r in results] == [3, 2, 4]

    def test_module_level_evaluate(self, valid9_rule):
        criteria = {"country": "GB", "hasCoupon": True, "totalCheckoutPrice": 150}
        assert evaluate(valid9_rule, criteria).value == 5


class TestBranches:

    def test_none_branch(self, evaluator, valid2_rule):
        assert evaluator.evaluate(valid2_rule, {"AverageTradeDuration": 10, "Foo": 10}).is_passed
        assert not evaluator.evaluate(valid2_rule, {"AverageTradeDuration": 11, "Foo": 10}).is_passed

    def test_and_branch_with_leverage(self, evaluator, valid2_rule):
        criteria = {
            "Leverage": 100,
            "WinRate": 80,
            "AverageTradeDuration": 5,
            "Duration": 9000000,
            "TotalDaysTraded": 5,
        }
        assert evaluator.evaluate(valid2_rule, criteria).is_passed

    @pytest.mark.parametrize("criteria,expected", [
        ({"countries": ["US", "FR"]}, True),
        ({"countries": ["GB", "DE"]}, False),
        ({"states": ["CA", "TN"]}, True),
        ({"states": ["NY", "WI"]}, False),
    ])
    def test_array_membership(self, evaluator, valid5_rule, criteria, expected):
        assert evaluator.evaluate(valid5_rule, criteria).is_passed is expected

    @pytest.mark.parametrize("criteria,expected", [
        ({"Leverage": 500}, 3),
        ({"Leverage": 700}, 2),
        ({"Leverage": 700, "Category": "Islamic"}, 4),
    ])
    def test_failing_sub_condition_does_not_stop_or(self, evaluator, valid4_rule, criteria, expected):
        assert evaluator.evaluate(valid4_rule, criteria).value == expected

    def test_empty_branches(self, evaluator):
        assert evaluator.evaluate(_rule({"and": []}), {}).is_passed
        assert not evaluator.evaluate(_rule({"or": []}), {}).is_passed
        assert evaluator.evaluate(_rule({"none": []}), {}).is_passed

    def test_missing_field_is_undefined(self, evaluator):
        rule = _rule({"and": [{"field": "a", "operator": "equals", "value": "undefined"}]})
        assert evaluator.evaluate(rule, {}).is_passed

    def test_existence_treats_missing_as_absent(self, evaluator):
        rule = _rule({"and": [{"field": "a", "operator": "exists"}]})
        assert not evaluator.evaluate(rule, {}).is_passed
        assert evaluator.evaluate(rule, {"a": 0}).is_passed


class TestMessages:

    def test_failing_constraint_message_short_circuits(self, evaluator):
        rule = _rule(
            {
                "and": [{
                    "field": "age",
                    "operator": "greater-than",
                    "value": 17,
                    "message": "Expected more than $.self.value, got $.self.input",
                }],
                "result": {"value": "adult"},
            },
            {"and": [{"field": "age", "operator": "exists"}], "result": {"value": "anyone"}},
            default={"value": "rejected"},
        )
        result = evaluator.evaluate(rule, {"age": 12})
        assert result == EvaluationResult(
            is_passed=False,
            value="rejected",
            message="Expected more than 17, got 12",
        )

    def test_short_circuit_without_default_is_false(self, evaluator):
        rule = _rule({"and": [{"field": "a", "operator": "equals", "value": 1, "message": "bad a"}]})
        result = evaluator.evaluate(rule, {"a": 2})
        assert (result.is_passed, result.value, result.message) == (False, False, "bad a")

    def test_or_keeps_last_failing_message(self, evaluator):
        rule = _rule({"or": [
            {"field": "a", "operator": "equals", "value": 1, "message": "first"},
            {"field": "b", "operator": "equals", "value": 1, "message": "second"},
        ]})
        assert evaluator.evaluate(rule, {"a": 0, "b": 0}).message == "second"
        assert evaluator.evaluate(rule, {"a": 0, "b": 1}).message is None

    def test_none_keeps_passing_constraint_message(self, evaluator):
        rule = _rule({"none": [
            {"field": "role", "operator": "equals", "value": "banned", "message": "$.name is banned"},
        ]})
        result = evaluator.evaluate(rule, {"role": "banned", "name": "Ann"})
        assert result.message == "Ann is banned"
        assert not result.is_passed

    def test_result_message_is_templated(self, evaluator, self_fields_rule):
        criteria = {
            "meta": {"default": {"password": "^@Axyz"}},
            "username": "bob",
            "name": "Bob",
            "family": "Smith",
        }
        result = evaluator.evaluate(self_fields_rule, criteria)
        assert result.value is True
        assert result.message == "Password is valid and contains username(bob), name(Bob) and family(Smith)"

    def test_default_message_is_templated(self, evaluator, self_fields_rule):
        criteria = {
            "meta": {"default": {"password": "^@A bob Bob Smith"}},
            "username": "bob",
            "name": "Bob",
            "family": "Smith",
        }
        result = evaluator.evaluate(self_fields_rule, criteria)
        assert result.value is False
        assert result.message == "Password is invalid and contains username(bob), name(Bob) and family(Smith)"


class TestReferences:

    def test_root_path_field(self, evaluator):
        rule = _rule({"and": [{"field": "$.foo.bar", "operator": "equals", "value": "test"}]})
        assert evaluator.evaluate(rule, {"foo": {"bar": "test"}}).is_passed
        assert not evaluator.evaluate(rule, {"foo": {"foo": "test"}}).is_passed

    def test_field_to_field_comparison(self, evaluator):
        rule = _rule({"and": [{"field": "a", "operator": "equals", "value": "$.b"}]})
        assert evaluator.evaluate(rule, {"a": 1, "b": 1}).is_passed
        assert not evaluator.evaluate(rule, {"a": 1, "b": 2}).is_passed
        # unresolved reference compares as None
        assert not evaluator.evaluate(rule, {"a": 1}).is_passed

    def test_references_inside_lists(self, evaluator):
        rule = _rule({"and": [{"field": "a", "operator": "in", "value": ["$.b", "$.c"]}]})
        assert evaluator.evaluate(rule, {"a": 3, "b": 1, "c": 3}).is_passed

    def test_array_criteria_with_root_paths(self, evaluator):
        rule = _rule({"and": [{"field": "$.foo.bar", "operator": "equals", "value": "bar"}]})
        results = evaluator.evaluate(rule, [{"foo": {"bar": "test"}}, {"foo": {"bar": "bar"}}, {}])
        assert [r.is_passed for r in results] == [False, True, False]


class TestInvalidInput:

    def test_unknown_operator(self, evaluator):
        rule = _rule({"and": [{"field": "a", "operator": "foo", "value": 1}]})
        result = evaluator.evaluate(rule, {"a": 1})
        assert not result.is_passed
        assert result.message == invalid_operator_message("foo")

    def test_invalid_condition(self, evaluator):
        result = evaluator.evaluate(_rule({"any": [{"field": "a", "operator": "equals", "value": 1}]}), {"a": 1})
        assert not result.is_passed
        assert result.message == INVALID_CONDITION_MESSAGE

    def test_huge_integers_do_not_abort_a_batch(self, evaluator):
        rule = _rule(
            {"and": [{"field": "n", "operator": "integer"}], "result": {"value": "int"}},
            {"and": [{"field": "n", "operator": "greater-than", "value": 0.5}], "result": {"value": "big"}},
            default={"value": "other"},
        )
        results = evaluator.evaluate(rule, [{"n": 10 ** 400}, {"n": 0.75}, {"n": "x"}])
        assert [r.value for r in results] == ["int", "big", "other"]

    def test_invalid_nested_node_is_skipped(self, evaluator):
        rule = _rule({"and": [
            {"foo": "bar"},
            {"field": "a", "operator": "equals", "value": 1},
        ]})
        assert evaluator.evaluate(rule, {"a": 1}).is_passed


class TestCustomRegistry:

    def test_custom_operator(self, custom_registry):
        rule = _rule({"and": [{"field": "n", "operator": "divisible-by", "value": 3}]})
        evaluator = Evaluator(registry=custom_registry)
        assert evaluator.evaluate(rule, {"n": 9}).is_passed
        assert not evaluator.evaluate(rule, {"n": 10}).is_passed
        assert custom_registry.calls == [(9, 3), (10, 3)]

    def test_default_registry_does_not_see_it(self, evaluator, custom_registry):
        rule = _rule({"and": [{"field": "n", "operator": "divisible-by", "value": 3}]})
        assert evaluator.evaluate(rule, {"n": 9}).message == invalid_operator_message("divisible-by")


class TestShortCircuit:
    """Call counts through a recording operator (n = 10)."""

    @staticmethod
    def _divisible(*divisors):
        return [{"field": "n", "operator": "divisible-by", "value": d} for d in divisors]

    def test_and_stops_at_first_failure(self, custom_registry):
        rule = _rule({"and": self._divisible(3, 5)})
        assert not Evaluator(custom_registry).evaluate(rule, {"n": 10}).is_passed
        assert custom_registry.calls == [(10, 3)]

    def test_or_stops_at_first_success(self, custom_registry):
        rule = _rule({"or": self._divisible(3, 5, 7)})
        assert Evaluator(custom_registry).evaluate(rule, {"n": 10}).is_passed
        assert custom_registry.calls == [(10, 3), (10, 5)]

    def test_none_checks_every_node(self, custom_registry):
        rule = _rule({"none": self._divisible(5, 3)})
        assert not Evaluator(custom_registry).evaluate(rule, {"n": 10}).is_passed
        assert custom_registry.calls == [(10, 5), (10, 3)]

    def test_sentinel_regression(self, evaluator):
        equals = _rule({"and": [{"field": "missing", "operator": "equals", "value": "undefined"}]})
        not_equals = _rule({"and": [{"field": "missing", "operator": "not-equals", "value": "undefined"}]})
        assert evaluator.evaluate(equals, {}).is_passed
        assert not evaluator.evaluate(not_equals, {}).is_passed

    def test_default_fallback(self, evaluator):
        rule = _rule(
            {"and": [{"field": "a", "operator": "equals", "value": 1}], "result": {"value": 1}},
            default={"value": 42},
        )
        assert evaluator.evaluate(rule, {"a": 2}) == EvaluationResult(is_passed=False, value=42)
