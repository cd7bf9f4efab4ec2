"""Cache entities package."""

from .protocols import Cache, CacheValue, DistributedLock
from .keys import PermissionCacheKeys

__all__ = [
    "Cache",
    "CacheValue",
    "DistributedLock",
    "PermissionCacheKeys",
]
