"""Cache and lock adapters."""

from .memory_adapter import MemoryAdapter, MemoryLock
from .redis_adapter import RedisAdapter, RedisLock

__all__ = ["MemoryAdapter", "MemoryLock", "RedisAdapter", "RedisLock"]
