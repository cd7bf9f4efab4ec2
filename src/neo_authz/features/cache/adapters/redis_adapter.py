"""Redis cache and lock adapters for neo-authz.

Both adapters share one ``redis.asyncio`` client, so the cache and the
recompute lock live in the same externally shared backend.
"""

import asyncio
import logging
from typing import Any, Optional
from uuid import uuid4

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import RedisError

from ..entities.protocols import CacheValue
from ....config.constants import CacheTTL, LockDefaults
from ....core.exceptions import CacheConnectionError, CacheError, LockError

logger = logging.getLogger(__name__)


# Deletes the lock only if the caller's token still owns it
RELEASE_LOCK_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


class RedisAdapter:
    """Redis cache backend adapter."""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        client: Optional[Redis] = None,
        **connection_kwargs: Any
    ):
        if redis_url is None and client is None:
            raise CacheConnectionError("RedisAdapter requires a redis_url or a client")

        self.redis_url = redis_url
        self.connection_kwargs = connection_kwargs
        self.redis_client: Optional[Redis] = client
        self._connected = client is not None
        self._connect_lock = asyncio.Lock()

    async def connect(self) -> None:
        """Connect to Redis; concurrent first callers share one client."""
        if self._connected:
            return

        async with self._connect_lock:
            if self._connected:
                return

            client = redis.from_url(self.redis_url, **self.connection_kwargs)
            try:
                await client.ping()
            except Exception as e:
                await client.aclose()
                raise CacheConnectionError(f"Failed to connect to Redis: {e}")

            self.redis_client = client
            self._connected = True
            logger.info("Connected to Redis permission cache")

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis_client:
            try:
                await self.redis_client.aclose()
            except Exception as e:
                logger.error(f"Error closing Redis connection: {e}")
            finally:
                self.redis_client = None
                self._connected = False

    async def client(self) -> Redis:
        """Get the connected client, connecting on first use."""
        if not self._connected:
            await self.connect()
        return self.redis_client

    async def get(self, key: str) -> Optional[CacheValue]:
        """Get value by key."""
        client = await self.client()
        try:
            return await client.get(key)
        except RedisError as e:
            raise CacheError(f"Redis get error for key {key}: {e}")

    async def set(self, key: str, value: CacheValue, ttl: Optional[int] = None) -> None:
        """Set key-value pair; no TTL means the key never expires."""
        client = await self.client()
        try:
            await client.set(key, value, ex=ttl if ttl and ttl > 0 else None)
        except RedisError as e:
            raise CacheError(f"Redis set error for key {key}: {e}")

    async def delete(self, key: str) -> bool:
        """Delete key and return whether it existed."""
        client = await self.client()
        try:
            result = await client.delete(key)
            return result > 0
        except RedisError as e:
            raise CacheError(f"Redis delete error for key {key}: {e}")

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching pattern, e.g. ``neo_authz:permissions:*``."""
        client = await self.client()
        try:
            deleted = 0
            async for key in client.scan_iter(match=pattern):
                deleted += await client.delete(key)
            return deleted
        except RedisError as e:
            raise CacheError(f"Redis delete pattern error: {e}")


class RedisLock:
    """Redis distributed lock.

    Acquisition is ``SET key token NX PX lease`` retried until the wait
    deadline. The lease bounds how long a crashed holder can block others.
    Release is an atomic compare-and-delete so an expired holder never frees
    a lock that someone else has since acquired.
    """

    def __init__(
        self,
        adapter: RedisAdapter,
        lease_seconds: int = CacheTTL.LOCK_LEASE,
        retry_interval: float = LockDefaults.RETRY_INTERVAL,
    ):
        self.adapter = adapter
        self.lease_seconds = lease_seconds
        self.retry_interval = retry_interval

    async def acquire(self, key: str, wait_timeout: float) -> Optional[str]:
        """Wait up to ``wait_timeout`` seconds for the lock."""
        client = await self.adapter.client()
        token = uuid4().hex
        loop = asyncio.get_running_loop()
        deadline = loop.time() + wait_timeout

        while True:
            try:
                acquired = await client.set(key, token, nx=True, px=int(self.lease_seconds * 1000))
            except RedisError as e:
                raise LockError(f"Failed to acquire lock {key}: {e}")

            if acquired:
                return token

            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.debug(f"Timed out waiting for Redis lock {key}")
                return None
            await asyncio.sleep(min(self.retry_interval, remaining))

    async def release(self, key: str, token: str) -> bool:
        """Release the lock if ``token`` still owns it."""
        client = await self.adapter.client()
        try:
            released = await client.eval(RELEASE_LOCK_SCRIPT, 1, key, token)
        except RedisError as e:
            logger.error(f"Failed to release lock {key}: {e}")
            return False

        if not released:
            logger.warning(f"Lock {key} expired before release; lease of {self.lease_seconds}s too short?")
        return bool(released)
