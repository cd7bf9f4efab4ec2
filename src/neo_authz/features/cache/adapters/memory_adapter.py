"""Memory cache and lock adapters for neo-authz.

In-process implementations for tests and single-process deployments. They
give no guarantee across processes; use the Redis adapters whenever more than
one process shares the permission cache.
"""

import asyncio
import logging
import time
import weakref
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Callable, Dict, Optional, Tuple
from uuid import uuid4

from ..entities.protocols import CacheValue

logger = logging.getLogger(__name__)


@dataclass
class MemoryCacheEntry:
    """Memory cache entry with expiry metadata."""
    value: CacheValue
    created_at: float
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        """Check if entry is expired at ``now``."""
        return self.expires_at is not None and now >= self.expires_at


class MemoryAdapter:
    """Dictionary-backed cache with TTL support."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._store: Dict[str, MemoryCacheEntry] = {}
        self._clock = clock

    async def get(self, key: str) -> Optional[CacheValue]:
        """Get value by key; expired entries are dropped and count as misses."""
        entry = self._store.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._clock()):
            self._store.pop(key, None)
            logger.debug(f"Memory cache entry expired: {key}")
            return None

        return entry.value

    async def set(self, key: str, value: CacheValue, ttl: Optional[int] = None) -> None:
        """Set value with optional TTL in seconds."""
        now = self._clock()
        expires_at = now + ttl if ttl and ttl > 0 else None
        self._store[key] = MemoryCacheEntry(value=value, created_at=now, expires_at=expires_at)

    async def delete(self, key: str) -> bool:
        """Delete key and return whether it existed."""
        return self._store.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching a glob pattern, e.g. ``neo_authz:permissions:*``."""
        now = self._clock()
        deleted = 0
        for key in [key for key in self._store if fnmatchcase(key, pattern)]:
            if not self._store.pop(key).is_expired(now):
                deleted += 1
        return deleted


class MemoryLock:
    """Per-key asyncio locks with ownership tokens.

    Waiters queue on the key's lock and are woken in order when the holder
    releases it.
    """

    def __init__(self):
        # Waiters keep their lock alive; holders are pinned in _held
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()
        self._held: Dict[str, Tuple[asyncio.Lock, str]] = {}

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    async def acquire(self, key: str, wait_timeout: float) -> Optional[str]:
        """Wait up to ``wait_timeout`` seconds for the key's lock."""
        lock = self._lock_for(key)
        try:
            await asyncio.wait_for(lock.acquire(), timeout=wait_timeout)
        except asyncio.TimeoutError:
            logger.debug(f"Timed out waiting for memory lock {key}")
            return None

        token = uuid4().hex
        self._held[key] = (lock, token)
        return token

    async def release(self, key: str, token: str) -> bool:
        """Release the key's lock if ``token`` owns it."""
        held = self._held.get(key)
        if held is None or held[1] != token:
            logger.warning(f"Refusing to release memory lock {key} not owned by token")
            return False

        lock, _ = self._held.pop(key)
        lock.release()
        return True

    def locked(self, key: str) -> bool:
        """Check if the key's lock is currently held."""
        return key in self._held
