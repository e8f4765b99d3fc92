"""
Criteria range option building.

An option is one alternative input combination: field -> requirement,
where a requirement is a literal value, a list of acceptable entries or
{"operator": ..., "value": ...}.

- update_option: fold one constraint into a per-field option
- merge_field_options: fold AND siblings into a single option
- add_option: attach an option to a criteria range, forking or merging
  depending on the current and parent branch types
"""

from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

from ..nodes import ConditionType, Constraint
from ..operators import Operators, SHORTHAND_OPERATORS
from ..operators.base import json_equal
from ..types import CriteriaRange, StepChange
from .context import IntrospectionContext

Option = Dict[str, Any]

_AND_LIKE = (ConditionType.AND, ConditionType.NONE)


def dedup_flatten(*values: Any) -> List[Any]:
    """Concatenate values (lists flattened one level), dropping repeats."""
    merged: List[Any] = []
    for value in values:
        items = value if isinstance(value, (list, tuple)) else [value]
        for item in items:
            if not any(json_equal(item, seen) for seen in merged):
                merged.append(item)
    return merged


def _requirement(constraint: Constraint, operator: Any) -> Dict[str, Any]:
    requirement: Dict[str, Any] = {"operator": operator}
    if constraint.has_value:
        requirement["value"] = copy.deepcopy(constraint.value)
    return requirement


def update_option(
    option: Option,
    constraint: Constraint,
    operator: Any,
    ctype: ConditionType,
) -> Option:
    """
    Fold a constraint (with its possibly negated operator) into an option.

    New field: equals / in use the bare value, other operators the
    {operator, value} form; under OR a fresh option is returned.
    Known field: the new requirement is appended to the field's list.
    """
    field_name = constraint.field

    if field_name not in option:
        if operator in SHORTHAND_OPERATORS:
            entry = copy.deepcopy(constraint.value)
        else:
            entry = _requirement(constraint, operator)
        if ctype is ConditionType.OR:
            return {field_name: entry}
        option[field_name] = entry
        return option

    if operator == Operators.EQUALS.value:
        entry = copy.deepcopy(constraint.value)
    else:
        entry = _requirement(constraint, operator)
    option[field_name] = dedup_flatten(option[field_name], entry)
    return option


def merge_field_options(field_options: List[Option]) -> Option:
    """Single option holding every field of an AND branch."""
    merged: Option = {}
    for field_option in field_options:
        for key, value in field_option.items():
            merged[key] = dedup_flatten(merged[key], value) if key in merged else value
    return merged


def _merge_into(target: Option, option: Option) -> None:
    for key, value in option.items():
        target[key] = dedup_flatten(target[key], value) if key in target else value


def _is_scalar(value: Any) -> bool:
    return not isinstance(value, (list, tuple, dict))


def _same_scalar(a: Any, b: Any) -> bool:
    return _is_scalar(a) and _is_scalar(b) and json_equal(a, b)


def _undo_sibling_changes(base: Option, ctx: IntrospectionContext, depth: int) -> None:
    """
    Remove what the previous steps at `depth` layered onto the cloned option.

    base is a deep copy, so only scalar entries can match a recorded
    change; containers are filtered item by item.
    """
    for step in reversed(ctx.steps):
        if step.depth != depth:
            break
        for change in step.changes or ():
            if change.key not in base:
                continue
            current = base[change.key]
            if _same_scalar(current, change.value):
                del base[change.key]
                continue
            if isinstance(current, list):
                removed = change.value if isinstance(change.value, (list, tuple)) else [change.value]
                base[change.key] = [
                    item for item in current
                    if not any(_same_scalar(item, r) for r in removed)
                ]


def add_option(
    ctx: IntrospectionContext,
    curr_type: ConditionType,
    parent_type: Optional[ConditionType],
    entry: CriteriaRange,
    option: Option,
    depth: int,
) -> CriteriaRange:
    """
    Attach an option to a criteria range.

    - AND/NONE directly under OR forks a new option. Deeper than one level
      the fork starts from a clone of the last option with the previous
      sibling's changes undone.
    - OR under any branch, and AND/NONE under AND/NONE, merge into the
      last option and record what they changed.
    - Everything else (root conditions) appends the option as is.
    """
    options = entry.options

    if curr_type in _AND_LIKE and parent_type is ConditionType.OR:
        if depth > 1:
            base = copy.deepcopy(options[-1]) if options else {}
            last = ctx.last_step
            if last is not None and last.changes:
                _undo_sibling_changes(base, ctx, last.depth)
            _merge_into(base, option)
            ctx.push_step(parent_type, curr_type, depth, base)
            options.append(base)
            return entry

        ctx.push_step(parent_type, curr_type, depth, option)
        options.append(option)
        return entry

    if parent_type is not None and (curr_type is ConditionType.OR or parent_type in _AND_LIKE):
        if not options:
            options.append({})
        target = options[-1]
        changes = []
        for key, value in option.items():
            target[key] = dedup_flatten(target[key], value) if key in target else value
            changes.append(StepChange(key=key, value=value))
        ctx.push_step(parent_type, curr_type, depth, target, changes)
        return entry

    ctx.push_step(parent_type, curr_type, depth, option)
    options.append(option)
    return entry
