"""
Rule Evaluation Package.

- core.py: Evaluator class, root-order walk, constraint dispatch and
  message templating
- boolean_ops.py: AND / OR / NONE branch evaluation
- protocols.py: Evaluator protocol shared by the branch functions

Usage:
    from rule_engine.evaluation import Evaluator, evaluate

    evaluator = Evaluator()
    result = evaluator.evaluate(rule, criteria)
"""

from .core import (
    INVALID_CONDITION_MESSAGE,
    Evaluator,
    evaluate,
    invalid_operator_message,
)

__all__ = [
    "Evaluator",
    "evaluate",
    "INVALID_CONDITION_MESSAGE",
    "invalid_operator_message",
]
