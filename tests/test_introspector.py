"""
Tests for rule introspection.

Validates that:
1. Each distinct result gets the input combinations that reach it
2. Constraints under NONE take their registered negation
3. Nested OR / AND branches fork and merge options correctly
4. Metadata and complexity counters describe the rule
5. Unknown operators and missing negations are reported, not raised
"""

import logging

import pytest

from rule_engine.errors import RuleTypeError
from rule_engine.evaluation import Evaluator
from rule_engine.introspection import NOT_GRANULAR_MESSAGE, Introspector, introspect
from rule_engine.parser import parse_rule


GTE = "greater-than-or-equals"
LT = "less-than"


@pytest.fixture
def introspector():
    return Introspector()


def _ranges(result):
    return [(r.result.value, r.options) for r in result.results]


class TestCriteriaRanges:

    def test_flat_or_with_nested_and(self, introspector, valid3_rule):
        result = introspector.introspect(valid3_rule)
        assert _ranges(result) == [
            (3, [
                {"Leverage": {"operator": GTE, "value": 1000}},
                {"CountryIso": ["GB", "FI"], "Leverage": {"operator": LT, "value": 200}, "Monetization": "Real"},
            ]),
            (4, [{"Category": "Islamic"}]),
        ]
        assert result.default.value == 2

    def test_deeply_nested_branches(self, introspector, valid4_rule):
        contains = {"operator": "contains", "value": ["GB", "FI"]}
        result = introspector.introspect(valid4_rule)
        assert _ranges(result) == [
            (3, [
                {"Leverage": [1000, 500]},
                {
                    "CountryIso": contains,
                    "Monetization": "Real",
                    "Category": [{"operator": GTE, "value": 1000}, 22, 11, 12],
                },
                {
                    "CountryIso": contains,
                    "Monetization": "Real",
                    "Category": [{"operator": GTE, "value": 1000}, 22],
                    "HasStudentCard": True,
                    "IsUnder18": True,
                },
            ]),
            (4, [{"Category": "Islamic"}]),
        ]

    def test_and_branch_folds_into_enclosing_or(self, introspector, valid6_rule):
        contains = {"operator": "contains", "value": ["GB", "FI"]}
        low_leverage = {"operator": LT, "value": 200}
        result = introspector.introspect(valid6_rule)
        assert _ranges(result) == [
            (3, [
                {"Leverage": [1000, 500]},
                {
                    "CountryIso": contains,
                    "Leverage": low_leverage,
                    "Monetization": "Real",
                    "Category": [{"operator": GTE, "value": 1000}, 22, 11, 12],
                },
                {
                    "CountryIso": contains,
                    "Leverage": low_leverage,
                    "Monetization": "Real",
                    "Category": [{"operator": GTE, "value": 1000}, 22, 122],
                    "IsUnder18": True,
                },
            ]),
            (4, [{"Category": "Islamic"}]),
        ]
        assert result.default.value == 2

    def test_none_roots_are_negated(self, introspector, valid7_rule):
        result = introspector.introspect(valid7_rule)
        assert _ranges(result) == [
            (3, [{
                "Leverage": [{"operator": LT, "value": 1000}, {"operator": GTE, "value": 200}],
                "CountryIso": {"operator": "not-in", "value": ["GB", "FI"]},
                "Monetization": {"operator": "not-equals", "value": "Real"},
            }]),
            (4, [{"Category": {"operator": "not-equals", "value": "Islamic"}}]),
        ]
        assert result.default is None

    def test_negation_reaches_nested_or(self, introspector, valid8_rule):
        result = introspector.introspect(valid8_rule)
        assert _ranges(result) == [
            (3, [
                {
                    "Leverage": {"operator": LT, "value": 1000},
                    "Type": "Demo",
                    "OtherType": ["Live", "Fun"],
                },
                {
                    "Leverage": [{"operator": LT, "value": 1000}, {"operator": GTE, "value": 200}],
                    "CountryIso": {"operator": "not-in", "value": ["GB", "FI"]},
                    "Monetization": {"operator": "not-equals", "value": "Real"},
                    "OtherType": [],
                },
            ]),
            (4, [{"Category": {"operator": "not-equals", "value": "Islamic"}}]),
        ]

    def test_checkout_discounts(self, introspector, valid9_rule):
        result = introspector.introspect(valid9_rule)
        assert _ranges(result) == [
            (5, [
                {"country": "SE"},
                {
                    "country": ["GB", "FI"],
                    "hasCoupon": True,
                    "totalCheckoutPrice": {"operator": GTE, "value": 120},
                },
            ]),
            (10, [{"age": {"operator": GTE, "value": 18}, "hasStudentCard": True}]),
        ]

    def test_self_referencing_values_kept_verbatim(self, introspector, self_fields_rule):
        result = introspector.introspect(self_fields_rule)
        assert result.to_dict()["results"][0] == {
            "result": {
                "value": True,
                "message": "Password is valid and contains username($.username), name($.name) and family($.family)",
            },
            "options": [{
                "$.meta.default.password": [
                    {"operator": "self-not-contains-all", "value": ["$.username", "$.name", "$.family"]},
                    {"operator": "not-like", "value": "^A"},
                    {"operator": "like", "value": "^@A%"},
                ],
            }],
        }
        assert result.to_dict()["default"]["value"] is False

    def test_shared_result_groups_roots(self, introspector):
        gold = {"value": "gold"}
        rule = {
            "conditions": [
                {"and": [{"field": "a", "operator": "equals", "value": 1}], "result": gold},
                {"and": [{"field": "b", "operator": "equals", "value": 2}], "result": gold},
            ]
        }
        result = introspector.introspect(rule)
        assert _ranges(result) == [("gold", [{"a": 1}, {"b": 2}])]

    def test_options_do_not_alias_the_rule(self, introspector, valid3_rule):
        result = introspector.introspect(valid3_rule)
        result.results[0].options[1]["CountryIso"].append("SE")
        assert valid3_rule["conditions"][0]["or"][0]["and"][0]["value"] == ["GB", "FI"]

    def test_not_granular_raises(self, introspector, valid2_rule):
        with pytest.raises(RuleTypeError) as exc_info:
            introspector.introspect(valid2_rule)
        assert exc_info.value.message == NOT_GRANULAR_MESSAGE

    def test_accepts_parsed_rule(self, valid9_rule):
        assert _ranges(introspect(parse_rule(valid9_rule))) == _ranges(introspect(valid9_rule))


class TestMetadataAndComplexity:

    def test_omitted_by_default(self, introspector, valid9_rule):
        result = introspector.introspect(valid9_rule)
        assert result.metadata is None
        assert result.complexity is None
        assert "metadata" not in result.to_dict()

    def test_metadata(self, introspector, valid9_rule):
        result = introspector.introspect(valid9_rule, include_metadata=True)
        assert result.metadata == {
            "uniqueFields": 5,
            "fields": ["country", "hasCoupon", "totalCheckoutPrice", "age", "hasStudentCard"],
            "operatorsByCategory": {"comparison": ["equals", "in", GTE]},
            "fieldTypes": {
                "country": ["any"],
                "hasCoupon": ["any"],
                "totalCheckoutPrice": ["number", "string"],
                "age": ["number", "string"],
                "hasStudentCard": ["any"],
            },
        }

    def test_complexity(self, introspector, valid9_rule):
        result = introspector.introspect(valid9_rule, include_complexity=True)
        assert result.complexity == {
            "maxDepth": 2,
            "totalConditions": 3,
            "totalConstraints": 6,
            "uniqueFields": 5,
            "score": 11,
        }

    def test_field_types_narrow_across_operators(self, introspector):
        rule = {
            "conditions": [{
                "and": [
                    {"field": "code", "operator": "greater-than", "value": "A"},
                    {"field": "code", "operator": "starts-with", "value": "AB"},
                ],
                "result": {"value": 1},
            }]
        }
        result = introspector.introspect(rule, include_metadata=True)
        assert result.metadata["fieldTypes"] == {"code": ["string"]}
        assert result.metadata["operatorsByCategory"] == {
            "comparison": ["greater-than"],
            "string": ["starts-with"],
        }


class TestWarnings:

    def test_unknown_operator_is_kept(self, introspector, caplog):
        rule = {
            "conditions": [{
                "and": [{"field": "a", "operator": "foo", "value": 1}],
                "result": {"value": 1},
            }]
        }
        with caplog.at_level(logging.WARNING):
            result = introspector.introspect(rule)

        assert _ranges(result) == [(1, [{"a": {"operator": "foo", "value": 1}}])]
        assert result.warnings == ["Unknown operator 'foo' on field 'a'"]
        assert "Unknown operator 'foo' on field 'a'" in caplog.text

    def test_missing_negation_is_kept(self, introspector):
        rule = {
            "conditions": [{
                "none": [{"field": "name", "operator": "starts-with", "value": "A"}],
                "result": {"value": 1},
            }]
        }
        result = introspector.introspect(rule)
        assert _ranges(result) == [(1, [{"name": {"operator": "starts-with", "value": "A"}}])]
        assert result.warnings == [
            "No negation registered for operator 'starts-with' on field 'name'; kept as is"
        ]
        assert result.to_dict()["warnings"] == result.warnings

    def test_clean_rule_has_no_warnings(self, introspector, valid9_rule):
        result = introspector.introspect(valid9_rule)
        assert result.warnings == []
        assert "warnings" not in result.to_dict()


class TestOperatorQueries:

    def test_used_operators_first_seen(self, introspector, valid3_rule):
        assert introspector.get_used_operators(valid3_rule) == ["in", LT, "equals", GTE]

    def test_used_operators_without_granularity(self, introspector, valid2_rule):
        assert introspector.get_used_operators(valid2_rule) == [
            "less-than-or-equals", "greater-than", LT, GTE, "not-equals", "not-in",
        ]

    def test_validate_operators(self, introspector, valid3_rule):
        assert introspector.validate_operators(valid3_rule) == {"isValid": True, "invalidOperators": []}
        valid3_rule["conditions"][1]["and"].append({"field": "x", "operator": "foo", "value": 1})
        valid3_rule["conditions"][1]["and"].append({"field": "y", "operator": "foo", "value": 2})
        assert introspector.validate_operators(valid3_rule) == {"isValid": False, "invalidOperators": ["foo"]}

    def test_custom_operator_known_to_its_registry(self, custom_registry):
        rule = {
            "conditions": [{
                "and": [{"field": "n", "operator": "divisible-by", "value": 3}],
                "result": {"value": "fizz"},
            }]
        }
        result = Introspector(registry=custom_registry).introspect(rule, include_metadata=True)
        assert result.warnings == []
        assert result.metadata["operatorsByCategory"] == {"custom": ["divisible-by"]}
        assert result.metadata["fieldTypes"] == {"n": ["number"]}


class TestRoundTrip:
    """Criteria built from a derived option evaluate to that option's result."""

    @pytest.mark.parametrize("index,criteria,expected", [
        (0, {"country": "SE"}, 5),
        (0, {"country": "GB", "hasCoupon": True, "totalCheckoutPrice": 120}, 5),
        (1, {"age": 18, "hasStudentCard": True}, 10),
    ])
    def test_options_reach_their_result(self, introspector, valid9_rule, index, criteria, expected):
        criteria_range = introspector.introspect(valid9_rule).results[index]
        assert criteria_range.result.value == expected

        result = Evaluator().evaluate(valid9_rule, criteria)
        assert result.is_passed
        assert result.value == expected

    def test_negated_option_reaches_result(self, introspector, valid7_rule):
        option = introspector.introspect(valid7_rule).results[1].options[0]
        assert option == {"Category": {"operator": "not-equals", "value": "Islamic"}}
        # Leverage 1000 fails the first NONE root
        assert Evaluator().evaluate(valid7_rule, {"Category": "Sharia", "Leverage": 1000}).value == 4
