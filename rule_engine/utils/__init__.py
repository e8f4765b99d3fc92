"""
Utility modules.
"""

from .logger import RuleEngineLogger, get_logger, setup_logger

__all__ = [
    "RuleEngineLogger",
    "get_logger",
    "setup_logger",
]
