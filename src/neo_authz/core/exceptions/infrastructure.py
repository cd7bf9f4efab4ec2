"""Infrastructure-specific exceptions for neo-authz.

Errors raised by the cache, the distributed lock and the record stores.
"""

from typing import Optional

from .base import NeoAuthzError


# Cache Errors
class CacheError(NeoAuthzError):
    """Base class for cache-related errors."""
    pass


class CacheConnectionError(CacheError):
    """Raised when cache connection fails."""

    retryable = True


class CacheSerializationError(CacheError):
    """Raised when a cached permission set cannot be decoded."""
    pass


# Lock Errors
class LockError(NeoAuthzError):
    """Base class for distributed lock errors."""
    pass


class LockTimeoutError(LockError):
    """Raised when the recompute lock is not acquired before the wait timeout.

    Transient: callers may retry or surface a temporary failure.
    """

    retryable = True

    def __init__(self, key: str, timeout: Optional[float] = None):
        self.key = key
        self.timeout = timeout
        super().__init__(
            f"Timed out after {timeout}s waiting for lock {key}",
            details={"key": key, "timeout": timeout},
        )


# Storage Errors
class StorageError(NeoAuthzError):
    """Raised when an authorization record cannot be read or persisted."""
    pass
