"""Configuration module for neo-authz."""

from .constants import (
    NO_TEAM,
    UNTYPED_SUBJECT_SEGMENT,
    CacheKeys,
    CacheTTL,
    LockDefaults,
    CacheBackend,
)
from .logging_config import (
    setup_logging,
    get_logger,
    build_logging_config,
    LogVerbosity,
    LogFormat,
    LoggingConfig,
)
from .settings import AuthorizationSettings

__all__ = [
    # Constants
    "NO_TEAM",
    "UNTYPED_SUBJECT_SEGMENT",
    "CacheKeys",
    "CacheTTL",
    "LockDefaults",
    "CacheBackend",

    # Logging
    "setup_logging",
    "get_logger",
    "build_logging_config",
    "LogVerbosity",
    "LogFormat",
    "LoggingConfig",

    # Settings
    "AuthorizationSettings",
]
