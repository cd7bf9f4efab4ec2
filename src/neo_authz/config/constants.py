"""Constants and enums for neo-authz.

Key templates, TTL defaults and sentinel values shared by the role catalog,
the cache coordinator and the stores.
"""

from enum import Enum
from typing import Final


# Team sentinel used when a subject's assignments are not team-scoped
NO_TEAM: Final[str] = "__no_team__"

# Cache key segment of subjects without a type; explicit types are never empty
UNTYPED_SUBJECT_SEGMENT: Final[str] = ""


class CacheKeys:
    """Cache key patterns for effective permission sets."""

    EFFECTIVE_PERMISSIONS: Final[str] = "{prefix}:permissions:{subject_type}:{subject_id}:{team_key}"
    EFFECTIVE_PERMISSIONS_PATTERN: Final[str] = "{prefix}:permissions:*"
    LOCK: Final[str] = "{prefix}:lock:permissions:{subject_type}:{subject_id}:{team_key}"


class CacheTTL:
    """Cache TTL values in seconds."""

    PERMISSIONS: Final[int] = 3600           # 1 hour
    LOCK_LEASE: Final[int] = 10              # 10 seconds


class LockDefaults:
    """Lock acquisition defaults in seconds."""

    WAIT_TIMEOUT: Final[float] = 5.0
    RETRY_INTERVAL: Final[float] = 0.05


class CacheBackend(str, Enum):
    """Supported cache and lock backends."""

    MEMORY = "memory"
    REDIS = "redis"
