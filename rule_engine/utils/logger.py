"""
Logging system for the rule engine.
Provides human-readable console logs and an optional dated log file.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    BOLD = "\033[1m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record):
        # Work on a copy so the file handler still sees plain text
        record = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        record.levelname = f"{color}{record.levelname}{Colors.RESET}"
        record.msg = f"{color}{record.msg}{Colors.RESET}"
        return super().format(record)


class RuleEngineLogger:
    """
    Central logging system for the rule engine.

    Features:
    - Console output with colors
    - Optional file output, one file per day
    - Component loggers (evaluator, introspector, mutator) share handlers
      through the "rule_engine" parent logger
    """

    _instance: Optional['RuleEngineLogger'] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, log_dir: str = "logs", log_level: str = "INFO", log_to_file: bool = False):
        if RuleEngineLogger._initialized:
            return

        self.log_dir = Path(log_dir)
        self.log_to_file = log_to_file
        if log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_logger = self._create_logger("rule_engine", log_level)

        RuleEngineLogger._initialized = True

    def _create_logger(self, name: str, level: str, file_prefix: str = "rule_engine") -> logging.Logger:
        """Create a configured logger instance."""
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper()))
        logger.handlers.clear()

        # Console handler with colors
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(ColoredFormatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)

        # File handler (plain text, no colors)
        if self.log_to_file:
            log_file = self.log_dir / f"{file_prefix}_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            logger.addHandler(file_handler)

        return logger

    def component(self, name: str) -> logging.Logger:
        """Child logger (rule_engine.<name>) using the shared handlers."""
        return self.main_logger.getChild(name)

    def is_debug(self) -> bool:
        return self.main_logger.isEnabledFor(logging.DEBUG)


# Global logger instance
_logger: Optional[RuleEngineLogger] = None


def get_logger(
    log_dir: Optional[str] = None,
    log_level: Optional[str] = None,
    log_to_file: Optional[bool] = None,
) -> RuleEngineLogger:
    """
    Get or create the global logger instance.

    Unset arguments come from the LOG_* settings of get_config().
    """
    global _logger
    if _logger is None:
        _logger = RuleEngineLogger(*_resolve_settings(log_dir, log_level, log_to_file))
    return _logger


def setup_logger(
    log_dir: Optional[str] = None,
    log_level: Optional[str] = None,
    log_to_file: Optional[bool] = None,
) -> RuleEngineLogger:
    """Initialize the logger with custom settings."""
    global _logger
    RuleEngineLogger._initialized = False
    RuleEngineLogger._instance = None
    _logger = RuleEngineLogger(*_resolve_settings(log_dir, log_level, log_to_file))
    return _logger


def _resolve_settings(log_dir, log_level, log_to_file):
    from ..config import get_config

    log_config = get_config().log
    return (
        log_dir if log_dir is not None else log_config.log_dir,
        log_level if log_level is not None else log_config.level,
        log_to_file if log_to_file is not None else log_config.log_to_file,
    )
