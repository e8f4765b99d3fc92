"""
Configuration management.
"""

from .config import (
    Config,
    EngineConfig,
    LogConfig,
    get_config,
)

__all__ = [
    # Config classes
    "Config",
    "EngineConfig",
    "LogConfig",
    # Accessor
    "get_config",
]
