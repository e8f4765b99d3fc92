"""
Object discovery helpers.

Structural questions about rules and criteria, shared by the parser,
validator, evaluator and introspector:

- resolve_property: walk a dotted or $.-prefixed path through criteria
- update_property: write a value back at an existing path (mutations)
- resolve_text_path_expressions: fill $.path placeholders in a message
- condition_type / is_condition / is_constraint: node discrimination
- get_conditions / is_granular: rule-level queries

Every helper accepts both raw JSON mappings and parsed nodes, so the
validator can run on untrusted input before anything is parsed.

Path syntax:
    name                 plain key (looked up as-is first)
    a.b.c                nested keys
    items[0].sku         list index
    $.a.b                path from the root of the evaluation context
    $['odd key'][1]      bracket keys
    $.items[*].sku       wildcard (yields a list)
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from typing import Any, List, Optional, Tuple

from .nodes import (
    CONDITION_KEYS,
    TEXT_PATH_PREFIX,
    Condition,
    ConditionType,
    Constraint,
    Rule,
)


class _Missing:
    """Marker for a path that did not resolve. Falsy, prints as undefined."""

    _instance: Optional["_Missing"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __str__(self) -> str:
        return "undefined"


MISSING = _Missing()


# =============================================================================
# Path tokenising
# =============================================================================

# One segment: .key | .* | [0] | [*] | ['key'] | ["key"]
_SEGMENT_RE = re.compile(
    r"""
    \.(?P<key>[^.\[\]]+)
    | \[\s*(?P<index>-?\d+)\s*\]
    | \[\s*(?P<wild>\*)\s*\]
    | \[\s*(?P<quote>['"])(?P<qkey>.*?)(?P=quote)\s*\]
    """,
    re.VERBOSE,
)

# Text-path expression inside free text: $ followed by path characters and
# optional trailing bracket/paren groups.
_TEXT_PATH_RE = re.compile(r"\$[^\s,()]+(?:\[[^\[\]]*]|\([^()]*\))*")


def _tokenize(path: str) -> Optional[List[Tuple[str, Any]]]:
    """
    Split a path (without its leading $) into (kind, arg) tokens.

    Returns None when the path has characters no segment can consume.
    """
    if path and path[0] not in ".[":
        path = "." + path
    tokens: List[Tuple[str, Any]] = []
    pos = 0
    while pos < len(path):
        match = _SEGMENT_RE.match(path, pos)
        if match is None:
            return None
        if match.group("key") is not None:
            key = match.group("key")
            tokens.append(("wild", None) if key == "*" else ("key", key))
        elif match.group("index") is not None:
            tokens.append(("index", int(match.group("index"))))
        elif match.group("wild") is not None:
            tokens.append(("wild", None))
        else:
            tokens.append(("key", match.group("qkey")))
        pos = match.end()
    return tokens


def _walk(tokens: List[Tuple[str, Any]], root: Any) -> Tuple[List[Any], bool]:
    """Apply tokens to root. Returns (matches, used_wildcard)."""
    current = [root]
    used_wildcard = False
    for kind, arg in tokens:
        following: List[Any] = []
        for obj in current:
            if kind == "key":
                if isinstance(obj, Mapping) and arg in obj:
                    following.append(obj[arg])
            elif kind == "index":
                if isinstance(obj, (list, tuple)) and -len(obj) <= arg < len(obj):
                    following.append(obj[arg])
            else:
                used_wildcard = True
                if isinstance(obj, Mapping):
                    following.extend(obj.values())
                elif isinstance(obj, (list, tuple)):
                    following.extend(obj)
        current = following
        if not current:
            break
    return current, used_wildcard


# =============================================================================
# Property resolution
# =============================================================================

def resolve_property(path: str, root: Any) -> Any:
    """
    Resolve a path against an object graph.

    A path without a leading $ is first tried as a literal key of a
    mapping root, then walked as a dotted path. A $-prefixed path is
    walked from the root. Wildcard paths return a list (a single match is unwrapped).

    Args:
        path: Path expression
        root: Criteria (or any JSON-like value)

    Returns:
        The resolved value, or MISSING if any segment is absent. Never raises.
    """
    if not isinstance(path, str):
        return MISSING

    if path.startswith("$"):
        tokens = _tokenize(path[1:])
    else:
        if isinstance(root, Mapping) and path in root:
            return root[path]
        tokens = _tokenize(path)

    if tokens is None:
        return MISSING

    matches, used_wildcard = _walk(tokens, root)
    if not matches:
        return MISSING
    if used_wildcard and len(matches) != 1:
        return matches
    return matches[0]


def update_property(path: str, root: Any, value: Any) -> bool:
    """
    Set the value at an existing path, in place.

    Same lookup order as resolve_property; wildcard paths are not
    writable. Returns False (and leaves root untouched) when the path
    does not resolve.
    """
    if not isinstance(path, str):
        return False
    if isinstance(root, dict) and path in root:
        root[path] = value
        return True

    tokens = _tokenize(path[1:] if path.startswith("$") else path)
    if not tokens or any(kind == "wild" for kind, _ in tokens):
        return False

    parents, _ = _walk(tokens[:-1], root)
    if not parents:
        return False
    parent = parents[0]
    kind, arg = tokens[-1]
    if kind == "key" and isinstance(parent, dict) and arg in parent:
        parent[arg] = value
        return True
    if kind == "index" and isinstance(parent, list) and -len(parent) <= arg < len(parent):
        parent[arg] = value
        return True
    return False


def extract_text_path_expressions(text: str) -> List[str]:
    """
    Find every $.path expression in free text.

    Unbalanced closing parens/brackets and a trailing full stop are trimmed
    so "name($.name)." yields "$.name".
    """
    expressions = []
    for match in _TEXT_PATH_RE.finditer(text):
        expression = match.group(0)
        while expression.count(")") > expression.count("("):
            expression = expression[: expression.rindex(")")]
        while expression.count("]") > expression.count("["):
            expression = expression[: expression.rindex("]")]
        expression = expression.rstrip(".")
        if expression.startswith(TEXT_PATH_PREFIX) or expression.startswith("$["):
            expressions.append(expression)
    return expressions


def stringify(value: Any) -> str:
    """Render a resolved value the way it reads in a JSON document."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    if isinstance(value, Mapping):
        return json.dumps(value, default=str)
    return str(value)


def resolve_text_path_expressions(template: str, criteria: Any) -> str:
    """
    Replace each $.path in template with its value from criteria.

    Unresolved paths stay in the text unchanged.

    Example:
        resolve_text_path_expressions(
            "Hello $.name, you are $.age",
            {"name": "Ann", "age": 30},
        )  # -> "Hello Ann, you are 30"
    """
    result = template
    for expression in extract_text_path_expressions(template):
        value = resolve_property(expression, criteria)
        if value is MISSING:
            continue
        result = result.replace(expression, stringify(value), 1)
    return result


# =============================================================================
# Node discrimination
# =============================================================================

def condition_type(node: Any) -> Optional[ConditionType]:
    """
    Branch type of a condition, or None.

    Raw mappings must carry exactly one of and/or/none; none or several
    means the node is not a valid condition.
    """
    if isinstance(node, Condition):
        return node.type
    if not isinstance(node, Mapping):
        return None
    present = [key for key in CONDITION_KEYS if key in node]
    if len(present) != 1:
        return None
    return ConditionType(present[0])


def is_constraint(node: Any) -> bool:
    """A node is a constraint iff it carries a field."""
    if isinstance(node, Constraint):
        return True
    return isinstance(node, Mapping) and "field" in node


def is_condition(node: Any) -> bool:
    if isinstance(node, Condition):
        return True
    return isinstance(node, Mapping) and not is_constraint(node) and condition_type(node) is not None


# =============================================================================
# Rule-level queries
# =============================================================================

def get_conditions(rule: Any) -> List[Any]:
    """Root conditions of a rule, normalised to a list in declaration order."""
    if isinstance(rule, Rule):
        return list(rule.conditions)
    if not isinstance(rule, Mapping):
        return []
    conditions = rule.get("conditions")
    if conditions is None:
        return []
    if isinstance(conditions, (list, tuple)):
        return list(conditions)
    return [conditions]


def _result_of(condition: Any) -> Any:
    if isinstance(condition, Condition):
        return condition.result
    return condition.get("result")


def is_granular(rule: Any) -> bool:
    """
    True when every root condition carries a result.

    Nested conditions may omit one; introspection attributes their options
    to the enclosing root result.
    """
    for condition in get_conditions(rule):
        if not is_condition(condition) or _result_of(condition) is None:
            return False
    return True
