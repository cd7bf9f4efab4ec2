"""Cached, lock-guarded effective permission resolution.

Read path for one (subject, team) key:

1. Read the cache. A hit is returned as is; expired entries are misses.
2. On a miss, wait for the key's lock up to ``lock_wait_timeout_seconds``.
   If it cannot be acquired, raise LockTimeoutError. There is no unlocked
   fallback because it could let a stale recompute overwrite a fresh one.
3. Holding the lock, read the cache again: a waiter queued behind another
   recompute usually finds the fresh value here and returns it.
4. Otherwise fetch the record, resolve it, store it with the configured TTL,
   then release the lock.

At most one recompute per key runs at a time across every process sharing
the cache and lock backend. Waiters block until the holder finishes instead
of being served a stale value.
"""

import json
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, FrozenSet, Optional

from ..entities.keys import PermissionCacheKeys
from ..entities.protocols import Cache, CacheValue, DistributedLock
from ...permissions.entities.protocols import AuthorizationStore
from ...permissions.services.resolver import resolve_permissions
from ...roles.services.catalog import RoleCatalog
from ....config.constants import NO_TEAM
from ....config.settings import AuthorizationSettings
from ....core.exceptions import CacheSerializationError, LockTimeoutError
from ....core.value_objects import RecordKey


logger = logging.getLogger(__name__)


class CacheCoordinator:
    """Owns the cache key scheme, the TTL and the guarded recompute protocol."""

    def __init__(
        self,
        catalog: RoleCatalog,
        store: AuthorizationStore,
        cache: Cache,
        lock: DistributedLock,
        settings: Optional[AuthorizationSettings] = None
    ):
        self.catalog = catalog
        self.store = store
        self.cache = cache
        self.lock = lock
        self.settings = settings or AuthorizationSettings()
        self.keys = PermissionCacheKeys(prefix=self.settings.cache_key_prefix)

    # Public operations

    async def get(
        self,
        subject_id: str,
        team_key: str = NO_TEAM,
        subject_type: Optional[str] = None
    ) -> FrozenSet[str]:
        """Get the effective permission set, recomputing on a miss."""
        return await self.get_for_key(RecordKey(subject_id, team_key, subject_type))

    async def invalidate(
        self,
        subject_id: str,
        team_key: str = NO_TEAM,
        subject_type: Optional[str] = None
    ) -> bool:
        """Remove the cached set so the next read recomputes it."""
        return await self.invalidate_key(RecordKey(subject_id, team_key, subject_type))

    async def get_for_key(self, key: RecordKey) -> FrozenSet[str]:
        """Get the effective permission set for a RecordKey."""
        entry_key = self.keys.entry(key)

        cached = await self._read(entry_key)
        if cached is not None:
            logger.debug(f"Permission cache hit for {key}")
            return cached

        logger.debug(f"Permission cache miss for {key}")
        async with self.locked(key):
            # Another holder may have filled the entry while we waited
            cached = await self._read(entry_key)
            if cached is not None:
                return cached
            return await self._recompute(key, entry_key)

    async def invalidate_key(self, key: RecordKey) -> bool:
        """Remove the cached set for a RecordKey."""
        existed = await self.cache.delete(self.keys.entry(key))
        logger.debug(f"Invalidated permission cache for {key} (existed={existed})")
        return existed

    async def invalidate_all(self) -> int:
        """Remove every cached set under the key prefix, e.g. after a catalog change.

        Per-key locks are not taken, so a recompute already running may still
        store its result afterwards.
        """
        removed = await self.cache.delete_pattern(self.keys.entry_pattern())
        logger.info(f"Invalidated {removed} cached permission sets")
        return removed

    async def warm(self, key: RecordKey) -> FrozenSet[str]:
        """Recompute and store the set even if a cached value exists."""
        async with self.locked(key):
            return await self._recompute(key, self.keys.entry(key))

    @asynccontextmanager
    async def locked(self, key: RecordKey) -> AsyncIterator[None]:
        """Hold the key's recompute lock.

        Raises:
            LockTimeoutError: the lock was not acquired within the wait timeout
        """
        lock_key = self.keys.lock(key)
        timeout = self.settings.lock_wait_timeout_seconds

        token = await self.lock.acquire(lock_key, timeout)
        if token is None:
            logger.warning(f"Timed out after {timeout}s waiting for permission lock of {key}")
            raise LockTimeoutError(lock_key, timeout)

        try:
            yield
        finally:
            await self.lock.release(lock_key, token)

    # Internals

    async def _recompute(self, key: RecordKey, entry_key: str) -> FrozenSet[str]:
        """Fetch, resolve and store. Caller must hold the key's lock."""
        record = await self.store.fetch_record(key)
        permissions = resolve_permissions(record, self.catalog)
        await self.cache.set(entry_key, self._encode(permissions), self.settings.effective_ttl)
        logger.debug(f"Recomputed {len(permissions)} permissions for {key}")
        return permissions

    async def _read(self, entry_key: str) -> Optional[FrozenSet[str]]:
        """Read and decode an entry; undecodable entries count as misses."""
        raw = await self.cache.get(entry_key)
        if raw is None:
            return None

        try:
            return self._decode(raw)
        except CacheSerializationError as e:
            logger.warning(f"Discarding unreadable permission cache entry {entry_key}: {e}")
            return None

    @staticmethod
    def _encode(permissions: FrozenSet[str]) -> str:
        return json.dumps(sorted(permissions))

    @staticmethod
    def _decode(raw: CacheValue) -> FrozenSet[str]:
        try:
            value = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise CacheSerializationError(f"Invalid JSON: {e}")

        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise CacheSerializationError("Expected a JSON array of permission names")
        return frozenset(value)
