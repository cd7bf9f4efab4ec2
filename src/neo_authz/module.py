"""Wiring of the authorization engine from settings.

Builds the cache and lock adapters for the configured backend and assembles
the coordinator and the authorization service around an explicitly passed
role catalog and store.
"""

import logging
from typing import Optional, Tuple

from .config.constants import CacheBackend
from .config.settings import AuthorizationSettings
from .core.exceptions import ValidationError
from .features.authorization import AuthorizationService
from .features.cache.adapters import MemoryAdapter, MemoryLock, RedisAdapter, RedisLock
from .features.cache.entities.protocols import Cache, DistributedLock
from .features.cache.services import CacheCoordinator
from .features.permissions.entities import AuthorizationStore
from .features.roles import RoleCatalog

logger = logging.getLogger(__name__)


def create_cache_backend(settings: AuthorizationSettings) -> Tuple[Cache, DistributedLock]:
    """Create the cache and lock adapters for the configured backend."""
    if settings.cache_backend == CacheBackend.REDIS:
        if not settings.redis_url:
            raise ValidationError("redis_url is required when cache_backend is 'redis'")
        adapter = RedisAdapter(redis_url=settings.redis_url)
        lock = RedisLock(
            adapter,
            lease_seconds=settings.lock_lease_seconds,
            retry_interval=settings.lock_retry_interval_seconds,
        )
        return adapter, lock

    logger.info("Using in-process permission cache; not safe across multiple processes")
    return MemoryAdapter(), MemoryLock()


def create_authorization_service(
    catalog: RoleCatalog,
    store: AuthorizationStore,
    settings: Optional[AuthorizationSettings] = None,
    cache: Optional[Cache] = None,
    lock: Optional[DistributedLock] = None
) -> AuthorizationService:
    """Assemble an AuthorizationService.

    Args:
        catalog: Compiled role catalog, shared read-only for the process lifetime
        store: Record store
        settings: Settings, read from the environment when omitted
        cache: Cache override; must be given together with ``lock``
        lock: Lock override; must be given together with ``cache``
    """
    settings = settings or AuthorizationSettings()

    if (cache is None) != (lock is None):
        raise ValidationError("cache and lock must be provided together")
    if cache is None:
        cache, lock = create_cache_backend(settings)

    coordinator = CacheCoordinator(catalog, store, cache, lock, settings)
    return AuthorizationService(catalog, store, coordinator)
