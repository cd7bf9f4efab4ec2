"""Tests for the authorization service."""

import asyncio

import pytest

from neo_authz.config.settings import AuthorizationSettings
from neo_authz.core.exceptions import LockTimeoutError, StorageError, ValidationError
from neo_authz.core.value_objects import RecordKey
from neo_authz.features.authorization import AuthorizationService
from neo_authz.features.cache.services import CacheCoordinator
from neo_authz.features.permissions import AuthorizationRecord, Subject
from neo_authz.features.roles import RoleCatalog


class TestScenario:
    """Test the store staff scenario end to end."""

    @pytest.mark.asyncio
    async def test_manager_permissions(self, service, user):
        await service.attach_role(user, "manager")

        assert await service.is_granted(user, "see orders", "modify orders", "manage inventory")
        assert not await service.is_granted(user, "complete orders")
        assert await service.list_permissions(user) == frozenset({
            "see orders", "modify orders", "manage inventory",
        })

    @pytest.mark.asyncio
    async def test_denial_beats_role(self, service, user):
        await service.attach_role(user, "manager")
        await service.deny_permission(user, "modify orders")

        assert not await service.is_granted(user, "modify orders")
        assert await service.is_denied(user, "modify orders")
        assert await service.is_granted(user, "see orders")

    @pytest.mark.asyncio
    async def test_grant_adds_permission(self, service, user):
        await service.attach_role(user, "clerk")
        await service.grant_permission(user, "see finances")

        assert await service.is_granted(user, "manage inventory", "see finances")

    @pytest.mark.asyncio
    async def test_grant_after_deny_restores_permission(self, service, user):
        await service.deny_permission(user, "x")
        await service.grant_permission(user, "x")

        assert await service.is_granted(user, "x")

    @pytest.mark.asyncio
    async def test_detach_permission_reverts_to_roles(self, service, user):
        await service.attach_role(user, "cashier")
        await service.deny_permission(user, "see orders")
        assert not await service.is_granted(user, "see orders")

        assert await service.detach_permission(user, "see orders") is True
        assert await service.is_granted(user, "see orders")


class TestMutations:
    """Test idempotence and return values."""

    @pytest.mark.asyncio
    async def test_attach_is_idempotent(self, service, store, user):
        assert await service.attach_role(user, "cashier") is True
        assert await service.attach_role(user, "cashier") is False

        assert store.save_calls == 1
        assert await service.list_roles(user) == frozenset({"cashier"})

    @pytest.mark.asyncio
    async def test_detach_unattached_role_is_noop(self, service, store, user):
        assert await service.detach_role(user, "cashier") is False
        assert store.save_calls == 0

    @pytest.mark.asyncio
    async def test_attach_several_roles(self, service, user):
        await service.attach_role(user, "cashier", "clerk")
        await service.detach_role(user, ["cashier"])

        assert await service.list_roles(user) == frozenset({"clerk"})

    @pytest.mark.asyncio
    async def test_clear_roles_keeps_explicit(self, service, user):
        await service.attach_role(user, "cashier", "clerk")
        await service.grant_permission(user, "x")

        assert await service.clear_roles(user) is True

        assert await service.list_roles(user) == frozenset()
        assert await service.list_permissions(user) == frozenset({"x"})

    @pytest.mark.asyncio
    async def test_clear_explicit_keeps_roles(self, service, user):
        await service.attach_role(user, "clerk")
        await service.grant_permission(user, "x")
        await service.deny_permission(user, "manage inventory")

        assert await service.clear_explicit_permissions(user) is True

        assert await service.list_permissions(user) == frozenset({"manage inventory"})

    @pytest.mark.asyncio
    async def test_clear_on_empty_record(self, service, user):
        assert await service.clear_roles(user) is False
        assert await service.clear_explicit_permissions(user) is False

    @pytest.mark.asyncio
    async def test_unknown_role_can_be_attached(self, service, user):
        assert await service.attach_role(user, "ghost") is True

        assert await service.list_roles(user) == frozenset({"ghost"})
        assert await service.list_permissions(user) == frozenset()

    @pytest.mark.asyncio
    async def test_empty_record_is_removed_from_store(self, service, store, user):
        await service.attach_role(user, "cashier")
        await service.detach_role(user, "cashier")

        assert store.keys() == []


class TestValidation:
    """Test argument validation."""

    @pytest.mark.asyncio
    async def test_check_requires_names(self, service, user):
        with pytest.raises(ValidationError):
            await service.is_granted(user)
        with pytest.raises(ValidationError):
            await service.is_granted_any(user)

    @pytest.mark.asyncio
    async def test_mutation_requires_names(self, service, user):
        with pytest.raises(ValidationError):
            await service.attach_role(user)
        with pytest.raises(ValidationError):
            await service.grant_permission(user, [])

    @pytest.mark.asyncio
    async def test_empty_name_rejected(self, service, user):
        with pytest.raises(ValidationError):
            await service.deny_permission(user, "")

    @pytest.mark.asyncio
    async def test_subject_must_be_authorizable(self, service):
        with pytest.raises(ValidationError):
            await service.is_granted("user-1", "see orders")


class TestChecks:
    """Test all/any semantics."""

    @pytest.mark.asyncio
    async def test_is_granted_requires_all(self, service, user):
        await service.attach_role(user, "clerk")

        assert not await service.is_granted(user, "manage inventory", "see orders")
        assert await service.is_denied(user, "manage inventory", "see orders")

    @pytest.mark.asyncio
    async def test_is_granted_any(self, service, user):
        await service.attach_role(user, "clerk")

        assert await service.is_granted_any(user, "manage inventory", "see orders")
        assert not await service.is_granted_any(user, "see orders", "complete orders")

    @pytest.mark.asyncio
    async def test_names_are_case_sensitive(self, service, user):
        await service.attach_role(user, "clerk")

        assert not await service.is_granted(user, "Manage Inventory")


class TestCoherence:
    """Test that mutations are visible to the next read."""

    @pytest.mark.asyncio
    async def test_mutation_invalidates_cached_set(self, service, store, user):
        assert not await service.is_granted(user, "see orders")
        fetches = store.fetch_calls

        await service.attach_role(user, "cashier")

        assert await service.is_granted(user, "see orders")
        assert store.fetch_calls > fetches

    @pytest.mark.asyncio
    async def test_noop_mutation_keeps_cache(self, service, coordinator, cache, user):
        await service.attach_role(user, "cashier")
        await service.list_permissions(user)
        entry = coordinator.keys.entry(service.record_key(user))

        await service.attach_role(user, "cashier")

        assert await cache.get(entry) is not None

    @pytest.mark.asyncio
    async def test_storage_failure_leaves_cache_intact(self, service, store, coordinator, cache, lock, user):
        await service.attach_role(user, "cashier")
        before = await service.list_permissions(user)
        key = service.record_key(user)

        async def failing_save(record_key, record):
            raise StorageError("database unavailable")

        store.save_record = failing_save

        with pytest.raises(StorageError):
            await service.attach_role(user, "clerk")

        assert await cache.get(coordinator.keys.entry(key)) is not None
        assert await service.list_permissions(user) == before
        assert not lock.locked(coordinator.keys.lock(key))

    @pytest.mark.asyncio
    async def test_mutation_waits_for_recompute(self, service, store, user):
        store.fetch_delay = 0.05

        read = asyncio.create_task(service.list_permissions(user))
        await asyncio.sleep(0.01)
        await service.attach_role(user, "clerk")
        await read

        assert await service.list_permissions(user) == frozenset({"manage inventory"})

    @pytest.mark.asyncio
    async def test_mutation_times_out_when_lock_held(self, store_catalog, store, cache, lock, user):
        settings = AuthorizationSettings(lock_wait_timeout_seconds=0.05)
        coordinator = CacheCoordinator(store_catalog, store, cache, lock, settings)
        service = AuthorizationService(store_catalog, store, coordinator)
        lock_key = coordinator.keys.lock(service.record_key(user))
        token = await lock.acquire(lock_key, 0.1)

        with pytest.raises(LockTimeoutError):
            await service.attach_role(user, "cashier")

        assert store.save_calls == 0
        await lock.release(lock_key, token)


class TestTeams:
    """Test team scoping of records."""

    @pytest.mark.asyncio
    async def test_teams_are_isolated(self, service, user):
        await service.attach_role(user, "cashier", team="store-1")

        assert await service.is_granted(user, "see orders", team="store-1")
        assert not await service.is_granted(user, "see orders", team="store-2")
        assert not await service.is_granted(user, "see orders")

    @pytest.mark.asyncio
    async def test_subject_default_team(self, service, team_user):
        await service.attach_role(team_user, "clerk")

        assert service.record_key(team_user) == RecordKey("user-2", "store-7", "user")
        assert await service.is_granted(team_user, "manage inventory", team="store-7")

    @pytest.mark.asyncio
    async def test_explicit_team_overrides_subject_team(self, service, team_user):
        await service.attach_role(team_user, "clerk", team="store-9")

        assert await service.is_granted(team_user, "manage inventory", team="store-9")
        assert not await service.is_granted(team_user, "manage inventory")

    @pytest.mark.asyncio
    async def test_subject_types_are_isolated(self, service):
        await service.attach_role(Subject("1", type="user"), "clerk")

        assert not await service.is_granted(Subject("1", type="api_client"), "manage inventory")

    @pytest.mark.asyncio
    async def test_untyped_subject_does_not_see_typed_grants(self, service):
        untyped = Subject("42")
        typed = Subject("42", type="subject")
        await service.grant_permission(untyped, "see finances")

        assert await service.is_granted(untyped, "see finances")
        assert not await service.is_granted(typed, "see finances")
        assert await service.list_roles(typed) == frozenset()

    def test_record_key_without_team(self, service, user):
        key = service.record_key(user)

        assert key == RecordKey("user-1", subject_type="user")
        assert not key.has_team


class TestListing:
    """Test listing and cache management operations."""

    @pytest.mark.asyncio
    async def test_list_roles_and_permissions(self, service, user):
        await service.attach_role(user, "manager", "ghost")
        await service.deny_permission(user, "see orders")
        await service.grant_permission(user, "see finances")

        breakdown = await service.list_roles_and_permissions(user)

        assert breakdown.roles["manager"] == frozenset({"see orders", "modify orders", "manage inventory"})
        assert breakdown.unknown_roles == frozenset({"ghost"})
        assert breakdown.effective == frozenset({"modify orders", "manage inventory", "see finances"})

    @pytest.mark.asyncio
    async def test_warm_cache(self, service, store, user):
        store.seed(service.record_key(user), AuthorizationRecord(roles={"clerk"}))

        assert await service.warm_cache(user) == frozenset({"manage inventory"})
        fetches = store.fetch_calls
        await service.list_permissions(user)

        assert store.fetch_calls == fetches

    @pytest.mark.asyncio
    async def test_invalidate_cache_after_direct_store_edit(self, service, store, user):
        await service.attach_role(user, "clerk")
        assert await service.is_granted(user, "manage inventory")

        store.seed(service.record_key(user), AuthorizationRecord(roles={"cashier"}))
        assert await service.is_granted(user, "manage inventory")

        assert await service.invalidate_cache(user) is True
        assert await service.is_granted(user, "see orders")

    @pytest.mark.asyncio
    async def test_invalidate_all_caches_after_catalog_change(self, service, store, cache, lock, settings, user, team_user):
        store.seed(RecordKey("user-1", subject_type="user"), AuthorizationRecord(roles={"clerk"}))
        store.seed(RecordKey("user-2", "store-7", "user"), AuthorizationRecord(roles={"clerk"}))
        assert await service.list_permissions(user) == frozenset({"manage inventory"})
        assert await service.list_permissions(team_user) == frozenset({"manage inventory"})

        new_catalog = RoleCatalog.from_mapping({"clerk": ["manage inventory", "see orders"]})
        redeployed = AuthorizationService(new_catalog, store, CacheCoordinator(new_catalog, store, cache, lock, settings))
        assert not await redeployed.is_granted(user, "see orders")

        assert await redeployed.invalidate_all_caches() == 2

        assert await redeployed.is_granted(user, "see orders")
        assert await redeployed.is_granted(team_user, "see orders", team="store-7")
