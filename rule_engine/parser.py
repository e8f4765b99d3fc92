"""
Rule parser: raw JSON-like mappings -> node tree.

The condition/constraint discrimination happens once here; the evaluator
and introspector then dispatch on node classes instead of probing keys.

Result identity:
    A raw result mapping referenced from several conditions parses to ONE
    RuleResult instance. The introspector groups conditions by result
    identity, so this mirrors reference sharing in the source document.

Usage:
    from rule_engine.parser import parse_rule, load_rule

    rule = parse_rule({"conditions": [{"and": [...], "result": {"value": 1}}]})
    raw = load_rule("rules/discount.yml")   # YAML or JSON file / text
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .discovery import condition_type, get_conditions, is_constraint
from .errors import RuleTypeError
from .nodes import Condition, Constraint, InvalidNode, Node, Rule, RuleResult


class _ParseState:
    """Per-call memo of raw result mapping id -> RuleResult."""

    def __init__(self):
        self.results: Dict[int, RuleResult] = {}
        # Hold raw mappings so their ids stay unique for the whole parse
        self._keep_alive: list = []

    def result_for(self, raw: Any) -> Optional[RuleResult]:
        if isinstance(raw, RuleResult):
            return raw
        if not isinstance(raw, Mapping):
            return None
        cached = self.results.get(id(raw))
        if cached is None:
            cached = RuleResult(value=raw.get("value"), message=raw.get("message"))
            self.results[id(raw)] = cached
            self._keep_alive.append(raw)
        return cached


def parse_rule(raw: Union[Rule, Mapping]) -> Rule:
    """
    Build a Rule from a raw mapping. A Rule passes through unchanged.

    Raises:
        RuleTypeError: If raw is neither a Rule nor a mapping
    """
    if isinstance(raw, Rule):
        return raw
    if not isinstance(raw, Mapping):
        raise RuleTypeError("The rule must be a valid JSON object.")

    state = _ParseState()
    conditions = tuple(_parse_node(node, state) for node in get_conditions(raw))
    return Rule(conditions=conditions, default=state.result_for(raw.get("default")))


def parse_node(raw: Any) -> Node:
    """Parse a single condition or constraint."""
    return _parse_node(raw, _ParseState())


def _parse_node(raw: Any, state: _ParseState) -> Node:
    if isinstance(raw, (Condition, Constraint, InvalidNode)):
        return raw

    if is_constraint(raw):
        return Constraint(
            field=raw["field"],
            operator=raw.get("operator"),
            value=raw.get("value"),
            message=raw.get("message"),
            has_value="value" in raw,
        )

    ctype = condition_type(raw)
    if ctype is None:
        return InvalidNode(raw)

    children = raw[ctype.value]
    if isinstance(children, Mapping):
        children = [children]
    elif not isinstance(children, (list, tuple)):
        return InvalidNode(raw)

    return Condition(
        type=ctype,
        nodes=tuple(_parse_node(child, state) for child in children),
        result=state.result_for(raw.get("result")),
    )


# =============================================================================
# Loading documents
# =============================================================================

def _is_file(text: Any) -> bool:
    if not isinstance(text, str) or "\n" in text:
        return False
    try:
        return Path(text).is_file()
    except (OSError, ValueError):
        return False


def load_document(source: Union[str, Path]) -> Any:
    """
    Load a JSON or YAML document from a file path or from text.

    .json files go through json; everything else through yaml.safe_load
    (which also reads plain JSON text).
    """
    if isinstance(source, Path) or _is_file(source):
        path = Path(source)
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    return yaml.safe_load(source)


def load_rule(source: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a raw rule mapping from a file path or text.

    Raises:
        ValueError: If the document is empty or not a mapping
    """
    raw = load_document(source)
    if not raw:
        raise ValueError(f"Empty or invalid rule document: {source}")
    if not isinstance(raw, Mapping):
        raise ValueError(f"Rule document must be a mapping, got {type(raw).__name__}")
    return dict(raw)
