"""Centralized logging configuration for neo-authz.

Environment variables:
    LOG_LEVEL           explicit level, wins over LOG_VERBOSITY
    LOG_VERBOSITY       QUIET | NORMAL | VERBOSE | DEBUG (default NORMAL)
    LOG_FORMAT          simple | detailed | json (default simple)
    ENABLE_SQL_LOGGING  "true" keeps asyncpg at the package level

Cache and lock adapters log on every request, so they stay at WARNING unless
the package runs at DEBUG.
"""

import logging
import logging.config
import os
from enum import Enum
from typing import Any, Dict


class LogVerbosity(str, Enum):
    """Log verbosity modes."""
    QUIET = "QUIET"      # Only errors and critical
    NORMAL = "NORMAL"    # Warnings and above
    VERBOSE = "VERBOSE"  # Info level logging
    DEBUG = "DEBUG"      # Full debug logging


class LogFormat(str, Enum):
    """Log format options."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


_VERBOSITY_LEVELS = {
    LogVerbosity.QUIET: "ERROR",
    LogVerbosity.NORMAL: "WARNING",
    LogVerbosity.VERBOSE: "INFO",
    LogVerbosity.DEBUG: "DEBUG",
}

_FORMATS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
}

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_log_level_from_verbosity(verbosity: str) -> str:
    """Map verbosity mode to log level; unknown modes mean WARNING."""
    try:
        return _VERBOSITY_LEVELS[LogVerbosity(verbosity.upper())]
    except ValueError:
        return "WARNING"


def build_logging_config(level: str, log_format: str = "simple", sql_logging: bool = False) -> Dict[str, Any]:
    """Build the dictConfig mapping for the package loggers."""
    level = level.upper() if level.upper() in _LEVELS else "WARNING"
    try:
        format_string = _FORMATS[LogFormat(log_format.lower())]
    except ValueError:
        format_string = _FORMATS[LogFormat.SIMPLE]

    def console_logger(logger_level: str) -> Dict[str, Any]:
        return {"level": logger_level, "handlers": ["console"], "propagate": False}

    loggers = {"neo_authz": console_logger(level)}

    adapter_level = "DEBUG" if level == "DEBUG" else "WARNING"
    for module in LoggingConfig.QUIET_MODULES:
        loggers[module] = console_logger(adapter_level)

    for module in LoggingConfig.ERROR_ONLY_MODULES:
        loggers[module] = console_logger("ERROR")

    if not sql_logging:
        loggers["asyncpg"] = console_logger("WARNING")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": format_string, "datefmt": "%Y-%m-%d %H:%M:%S"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": loggers,
    }


class LoggingConfig:
    """Centralized logging configuration manager."""

    QUIET_MODULES = [
        "neo_authz.features.cache.adapters",
    ]

    ERROR_ONLY_MODULES = [
        "asyncio",
        "redis",
    ]

    @classmethod
    def configure(cls) -> None:
        """Configure logging based on environment variables."""
        level = os.getenv("LOG_LEVEL", "").upper() or get_log_level_from_verbosity(
            os.getenv("LOG_VERBOSITY", LogVerbosity.NORMAL.value)
        )
        log_format = os.getenv("LOG_FORMAT", LogFormat.SIMPLE.value)
        sql_logging = os.getenv("ENABLE_SQL_LOGGING", "false").lower() == "true"

        logging.config.dictConfig(build_logging_config(level, log_format, sql_logging))
        logging.getLogger(__name__).debug(f"Logging configured: level={level}, format={log_format}")

    @classmethod
    def set_module_level(cls, module_name: str, level: str) -> None:
        """Set log level for a specific module."""
        logging.getLogger(module_name).setLevel(level.upper())


def setup_logging() -> None:
    """Setup logging configuration from environment variables.

    Called once when the package is imported; services may call it again
    after changing the environment.
    """
    LoggingConfig.configure()


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the configured hierarchy."""
    return logging.getLogger(name)
