"""
Pytest configuration: shared rule documents and registries.

Every rule fixture returns a fresh mapping so tests may mutate it.
"""

import copy

import pytest

from rule_engine.operators import OperatorCategory, OperatorSpec, get_registry
from rule_engine.operators.base import is_number


@pytest.fixture
def valid1_rule() -> dict:
    """Single OR root without result: performance metrics OR profit."""
    return {
        "conditions": {
            "or": [
                {
                    "and": [
                        {"field": "WinRate", "operator": "greater-than", "value": 60},
                        {"field": "AverageTradeDuration", "operator": "less-than", "value": 60},
                        {"field": "Duration", "operator": "greater-than", "value": 259200},
                        {"field": "TotalDaysTraded", "operator": "greater-than-or-equals", "value": 3},
                    ]
                },
                {
                    "and": [
                        {"field": "$.payload.ProfitPercentage", "operator": "greater-than-or-equals", "value": 10},
                    ]
                },
            ]
        }
    }


@pytest.fixture
def valid2_rule() -> dict:
    """OR of an AND and a NONE, no results (not granular)."""
    return {
        "conditions": {
            "or": [
                {
                    "and": [
                        {"field": "Leverage", "operator": "less-than-or-equals", "value": 100},
                        {"field": "WinRate", "operator": "greater-than", "value": 60},
                        {"field": "AverageTradeDuration", "operator": "less-than", "value": 60},
                        {"field": "Duration", "operator": "greater-than", "value": 259200},
                        {"field": "TotalDaysTraded", "operator": "greater-than-or-equals", "value": 3},
                    ]
                },
                {
                    "none": [
                        {"field": "AverageTradeDuration", "operator": "not-equals", "value": 10},
                        {"field": "Foo", "operator": "not-in", "value": [10, 11, 12]},
                    ]
                },
            ]
        }
    }


@pytest.fixture
def valid3_rule() -> dict:
    """Granular: result 3 (OR of AND / Leverage), result 4 (Islamic), default 2."""
    return {
        "conditions": [
            {
                "or": [
                    {
                        "and": [
                            {"field": "CountryIso", "operator": "in", "value": ["GB", "FI"]},
                            {"field": "Leverage", "operator": "less-than", "value": 200},
                            {"field": "Monetization", "operator": "equals", "value": "Real"},
                        ]
                    },
                    {"field": "Leverage", "operator": "greater-than-or-equals", "value": 1000},
                ],
                "result": {"value": 3},
            },
            {
                "and": [
                    {"field": "Category", "operator": "equals", "value": "Islamic"},
                ],
                "result": {"value": 4},
            },
        ],
        "default": {"value": 2},
    }


@pytest.fixture
def valid4_rule() -> dict:
    """Granular: nested OR inside AND inside OR."""
    return {
        "conditions": [
            {
                "or": [
                    {"field": "Leverage", "operator": "equals", "value": 1000},
                    {"field": "Leverage", "operator": "equals", "value": 500},
                    {
                        "and": [
                            {"field": "CountryIso", "operator": "contains", "value": ["GB", "FI"]},
                            {"field": "Monetization", "operator": "equals", "value": "Real"},
                            {
                                "or": [
                                    {"field": "Category", "operator": "greater-than-or-equals", "value": 1000},
                                    {"field": "Category", "operator": "equals", "value": 22},
                                    {
                                        "or": [
                                            {"field": "Category", "operator": "equals", "value": 11},
                                            {"field": "Category", "operator": "equals", "value": 12},
                                            {
                                                "and": [
                                                    {"field": "HasStudentCard", "operator": "equals", "value": True},
                                                    {"field": "IsUnder18", "operator": "equals", "value": True},
                                                ]
                                            },
                                        ]
                                    },
                                ]
                            },
                        ]
                    },
                ],
                "result": {"value": 3},
            },
            {
                "and": [
                    {"field": "Category", "operator": "equals", "value": "Islamic"},
                ],
                "result": {"value": 4},
            },
        ],
        "default": {"value": 2},
    }


@pytest.fixture
def valid5_rule() -> dict:
    """Array membership: countries contains US, or states contains-any KY/TN."""
    return {
        "conditions": {
            "or": [
                {"field": "countries", "operator": "contains", "value": "US"},
                {"field": "states", "operator": "contains-any", "value": ["KY", "TN"]},
            ]
        }
    }


@pytest.fixture
def valid6_rule() -> dict:
    """Granular: OR > AND > OR > OR > AND, with a field repeated across levels."""
    return {
        "conditions": [
            {
                "or": [
                    {"field": "Leverage", "operator": "equals", "value": 1000},
                    {"field": "Leverage", "operator": "equals", "value": 500},
                    {
                        "and": [
                            {"field": "CountryIso", "operator": "contains", "value": ["GB", "FI"]},
                            {"field": "Leverage", "operator": "less-than", "value": 200},
                            {"field": "Monetization", "operator": "equals", "value": "Real"},
                            {
                                "or": [
                                    {"field": "Category", "operator": "greater-than-or-equals", "value": 1000},
                                    {"field": "Category", "operator": "equals", "value": 22},
                                    {
                                        "or": [
                                            {"field": "Category", "operator": "equals", "value": 11},
                                            {"field": "Category", "operator": "equals", "value": 12},
                                            {
                                                "and": [
                                                    {"field": "Category", "operator": "equals", "value": 122},
                                                    {"field": "IsUnder18", "operator": "equals", "value": True},
                                                ]
                                            },
                                        ]
                                    },
                                ]
                            },
                        ]
                    },
                ],
                "result": {"value": 3},
            },
            {
                "and": [
                    {"field": "Category", "operator": "equals", "value": "Islamic"},
                ],
                "result": {"value": 4},
            },
        ],
        "default": {"value": 2},
    }


@pytest.fixture
def valid7_rule() -> dict:
    """Granular NONE roots (negation during introspection)."""
    return {
        "conditions": [
            {
                "none": [
                    {
                        "and": [
                            {"field": "CountryIso", "operator": "in", "value": ["GB", "FI"]},
                            {"field": "Leverage", "operator": "less-than", "value": 200},
                            {"field": "Monetization", "operator": "equals", "value": "Real"},
                        ]
                    },
                    {"field": "Leverage", "operator": "greater-than-or-equals", "value": 1000},
                ],
                "result": {"value": 3},
            },
            {
                "none": [
                    {"field": "Category", "operator": "equals", "value": "Islamic"},
                ],
                "result": {"value": 4},
            },
        ]
    }


@pytest.fixture
def valid8_rule() -> dict:
    """Granular NONE root holding an OR that holds an AND."""
    return {
        "conditions": [
            {
                "none": [
                    {"field": "Leverage", "operator": "greater-than-or-equals", "value": 1000},
                    {
                        "or": [
                            {"field": "Type", "operator": "not-equals", "value": "Demo"},
                            {"field": "OtherType", "operator": "not-in", "value": ["Live", "Fun"]},
                            {
                                "and": [
                                    {"field": "CountryIso", "operator": "in", "value": ["GB", "FI"]},
                                    {"field": "Leverage", "operator": "less-than", "value": 200},
                                    {"field": "Monetization", "operator": "equals", "value": "Real"},
                                ]
                            },
                        ]
                    },
                ],
                "result": {"value": 3},
            },
            {
                "none": [
                    {"field": "Category", "operator": "equals", "value": "Islamic"},
                ],
                "result": {"value": 4},
            },
        ]
    }


@pytest.fixture
def valid9_rule() -> dict:
    """Granular checkout discounts: result 5 and result 10, no default."""
    return {
        "conditions": [
            {
                "or": [
                    {
                        "and": [
                            {"field": "country", "operator": "in", "value": ["GB", "FI"]},
                            {"field": "hasCoupon", "operator": "equals", "value": True},
                            {"field": "totalCheckoutPrice", "operator": "greater-than-or-equals", "value": 120.0},
                        ]
                    },
                    {"field": "country", "operator": "equals", "value": "SE"},
                ],
                "result": {"value": 5},
            },
            {
                "and": [
                    {"field": "age", "operator": "greater-than-or-equals", "value": 18},
                    {"field": "hasStudentCard", "operator": "equals", "value": True},
                ],
                "result": {"value": 10},
            },
        ]
    }


@pytest.fixture
def self_fields_rule() -> dict:
    """Password checks referencing other criteria fields through $.paths."""
    return {
        "conditions": [
            {
                "and": [
                    {
                        "field": "$.meta.default.password",
                        "operator": "self-not-contains-all",
                        "value": ["$.username", "$.name", "$.family"],
                    },
                    {"field": "$.meta.default.password", "operator": "not-like", "value": "^A"},
                    {"field": "$.meta.default.password", "operator": "like", "value": "^@A%"},
                ],
                "result": {
                    "value": True,
                    "message": "Password is valid and contains username($.username), name($.name) and family($.family)",
                },
            }
        ],
        "default": {
            "value": False,
            "message": "Password is invalid and contains username($.username), name($.name) and family($.family)",
        },
    }


@pytest.fixture
def invalid2_rule(valid3_rule) -> dict:
    """valid3 with a third root that is not a condition."""
    rule = copy.deepcopy(valid3_rule)
    rule["conditions"].append({"foo": "bar"})
    return rule


@pytest.fixture
def custom_registry():
    """
    Built-in registry copy plus a "divisible-by" operator.

    The predicate counts its calls in custom_registry.calls.
    """
    registry = get_registry().copy()
    calls = []

    def divisible_by(criterion, value=None):
        calls.append((criterion, value))
        return is_number(criterion) and is_number(value) and value != 0 and criterion % value == 0

    registry.register(OperatorSpec(
        name="divisible-by",
        evaluate=divisible_by,
        category=OperatorCategory.CUSTOM,
        accepted_field_types=frozenset({"number"}),
    ))
    registry.calls = calls
    return registry
