"""Pytest configuration and fixtures for neo-authz tests."""

import asyncio

import pytest

from neo_authz.config.settings import AuthorizationSettings
from neo_authz.features.authorization import AuthorizationService
from neo_authz.features.cache.adapters import MemoryAdapter, MemoryLock
from neo_authz.features.cache.services import CacheCoordinator
from neo_authz.features.permissions.entities import AuthorizationRecord, Subject
from neo_authz.features.roles import RoleCatalog, role
from neo_authz.features.stores import InMemoryAuthorizationStore


class CountingStore(InMemoryAuthorizationStore):
    """In-memory store double counting calls, with optional fetch latency."""

    def __init__(self, fetch_delay: float = 0.0):
        super().__init__()
        self.fetch_delay = fetch_delay
        self.fetch_calls = 0
        self.save_calls = 0

    async def fetch_record(self, key):
        self.fetch_calls += 1
        if self.fetch_delay:
            await asyncio.sleep(self.fetch_delay)
        return await super().fetch_record(key)

    async def save_record(self, key, record):
        self.save_calls += 1
        await super().save_record(key, record)

    def seed(self, key, record: AuthorizationRecord) -> None:
        """Write directly, bypassing counters."""
        self._records[key] = record


@pytest.fixture
def store_catalog():
    """Catalog of the store scenario: cashier, clerk and manager."""
    return RoleCatalog.compile([
        role("cashier").can("see orders", "modify orders", "complete orders"),
        role("clerk").can("manage inventory"),
        role("manager").based_on("cashier", "clerk").except_("complete orders"),
    ])


@pytest.fixture
def settings():
    """Settings with short timeouts for tests."""
    return AuthorizationSettings(
        cache_key_prefix="test_authz",
        cache_ttl_seconds=300,
        lock_wait_timeout_seconds=1.0,
        lock_lease_seconds=5,
        lock_retry_interval_seconds=0.01,
    )


@pytest.fixture
def store():
    """Counting in-memory store."""
    return CountingStore()


@pytest.fixture
def cache():
    return MemoryAdapter()


@pytest.fixture
def lock():
    return MemoryLock()


@pytest.fixture
def coordinator(store_catalog, store, cache, lock, settings):
    """Cache coordinator over in-memory collaborators."""
    return CacheCoordinator(store_catalog, store, cache, lock, settings)


@pytest.fixture
def service(store_catalog, store, coordinator):
    """Authorization service over in-memory collaborators."""
    return AuthorizationService(store_catalog, store, coordinator)


@pytest.fixture
def user():
    """Sample user without a team."""
    return Subject("user-1", type="user")


@pytest.fixture
def team_user():
    """Sample user acting in a team by default."""
    return Subject("user-2", type="user", team="store-7")
