"""Cache services package."""

from .cache_coordinator import CacheCoordinator

__all__ = ["CacheCoordinator"]
