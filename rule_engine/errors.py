"""
Exceptions raised by the rule engine.

Only engine-level misuse raises. Problems met while walking a single
criteria item (unknown operator, bad condition shape, missing field)
come back as failing EvaluationResult objects instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .types import ValidationResult


class RuleEngineError(Exception):
    """Base class for all rule engine errors."""


class RuleError(RuleEngineError):
    """Rule failed structural validation."""

    def __init__(self, result: "ValidationResult"):
        self.result = result
        message = result.error.message if result.error else "Invalid rule."
        super().__init__(message)

    @property
    def element(self) -> Optional[Any]:
        """The rule fragment that caused validation to fail."""
        return self.result.error.element if self.result.error else None


class RuleTypeError(RuleEngineError):
    """Rule has the wrong type for the requested operation (e.g. not granular)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)
