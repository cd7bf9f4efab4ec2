"""Concrete AuthorizationStore implementations."""

from .memory_store import InMemoryAuthorizationStore
from .asyncpg_store import AsyncPGAuthorizationStore

__all__ = ["InMemoryAuthorizationStore", "AsyncPGAuthorizationStore"]
