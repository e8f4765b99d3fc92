"""
Configuration management for the rule engine.
Loads settings from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class EngineConfig:
    """
    Rule engine behaviour.

    trust_rules skips validation before evaluation. Only turn it on for
    rules that were validated when they were stored.
    """
    trust_rules: bool = False
    mutation_cache: bool = True


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = False

    def __post_init__(self):
        """Normalise and validate level."""
        self.level = self.level.upper()
        if self.level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"LogConfig: invalid level {self.level!r}")


class Config:
    """
    Central configuration manager.

    Loads configuration from environment variables (and .env files) and
    provides typed access to all settings.
    """

    _instance: Optional['Config'] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, env_file: str = ".env"):
        if self._initialized:
            return

        # Later files override earlier ones
        for env_name in [".env", env_file]:
            env_path = Path(env_name)
            if env_path.exists():
                load_dotenv(env_path, override=True)

        self.engine = self._load_engine_config()
        self.log = self._load_log_config()

        self._initialized = True

    def _load_engine_config(self) -> EngineConfig:
        """Load engine configuration from environment."""
        return EngineConfig(
            trust_rules=_env_bool("RULE_ENGINE_TRUST_RULES", "false"),
            mutation_cache=_env_bool("RULE_ENGINE_MUTATION_CACHE", "true"),
        )

    def _load_log_config(self) -> LogConfig:
        """Load logging configuration from environment."""
        return LogConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR", "logs"),
            log_to_file=_env_bool("LOG_TO_FILE", "false"),
        )

    def reload(self, env_file: str = ".env"):
        """Reload configuration from environment."""
        self._initialized = False
        Config._instance = None
        return Config(env_file)

    def validate(self) -> tuple[bool, List[str]]:
        """
        Check the configuration for inconsistent settings.

        Returns:
            (is_valid, list of problems)
        """
        problems: List[str] = []
        if self.log.log_to_file and not self.log.log_dir:
            problems.append("LOG_TO_FILE is set but LOG_DIR is empty")
        return not problems, problems

    def summary_short(self) -> str:
        """Generate a short one-line configuration summary."""
        trust = "trusted" if self.engine.trust_rules else "validated"
        cache = "on" if self.engine.mutation_cache else "off"
        return f"Rules: {trust} | Mutation cache: {cache} | Log: {self.log.level}"


def get_config(env_file: str = ".env") -> Config:
    """Get or create the global config instance."""
    return Config(env_file)
