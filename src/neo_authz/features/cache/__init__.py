"""Cache feature for neo-authz.

Feature-First architecture for caching effective permission sets:
- entities/: Cache and lock protocols, key scheme
- adapters/: Redis and in-memory cache and lock implementations
- services/: The lock-guarded recompute coordinator
"""

from .entities import Cache, DistributedLock, PermissionCacheKeys
from .adapters import MemoryAdapter, MemoryLock, RedisAdapter, RedisLock
from .services import CacheCoordinator

__all__ = [
    # Protocols
    "Cache",
    "DistributedLock",
    "PermissionCacheKeys",

    # Adapters
    "MemoryAdapter",
    "MemoryLock",
    "RedisAdapter",
    "RedisLock",

    # Services
    "CacheCoordinator",
]
