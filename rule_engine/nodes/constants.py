"""
Node constants for the rule condition tree.

- ConditionType: the three branch kinds (and / or / none)
- CONDITION_KEYS: their JSON keys, in lookup order
- UNDEFINED_SENTINEL: what a missing criteria field evaluates as
"""

from __future__ import annotations

from enum import Enum


class ConditionType(str, Enum):
    """Branch node kinds. Values are the JSON keys."""
    AND = "and"    # every child must pass
    OR = "or"      # at least one child must pass
    NONE = "none"  # no child may pass


CONDITION_KEYS = tuple(t.value for t in ConditionType)

# A field missing from the criteria is compared as this literal string.
# exists / not-exists are the dedicated presence checks.
UNDEFINED_SENTINEL = "undefined"

# Prefix marking a path resolved against the whole evaluation context.
TEXT_PATH_PREFIX = "$."
