"""Cache protocols for neo-authz.

The coordinator depends only on these two contracts, so any externally shared
cache and lock backend can be plugged in.
"""

from abc import abstractmethod
from typing import Optional, Protocol, Union, runtime_checkable


CacheValue = Union[bytes, str]


@runtime_checkable
class Cache(Protocol):
    """Protocol for a key-value cache with per-key expiry."""

    @abstractmethod
    async def get(self, key: str) -> Optional[CacheValue]:
        """Get value by key; expired or missing keys return None."""
        ...

    @abstractmethod
    async def set(self, key: str, value: CacheValue, ttl: Optional[int] = None) -> None:
        """Set value with TTL in seconds; None never expires."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key and return whether it existed."""
        ...

    @abstractmethod
    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern and return how many were removed."""
        ...


@runtime_checkable
class DistributedLock(Protocol):
    """Protocol for a named mutual-exclusion lock shared across processes."""

    @abstractmethod
    async def acquire(self, key: str, wait_timeout: float) -> Optional[str]:
        """Wait up to ``wait_timeout`` seconds for the lock.

        Returns:
            Ownership token when acquired, None on timeout
        """
        ...

    @abstractmethod
    async def release(self, key: str, token: str) -> bool:
        """Release the lock if ``token`` still owns it."""
        ...
