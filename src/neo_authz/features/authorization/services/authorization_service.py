"""Authorization service: the public operation surface.

Mutations hold the subject's recompute lock while they read, change and
persist the record, then invalidate the cached set before releasing it. A
recompute can therefore never write a set computed from a record that a
concurrent mutation has already replaced. If persisting fails, the cache is
left untouched and the storage error propagates.
"""

import logging
from typing import Callable, FrozenSet, Optional, Tuple

from ...cache.services.cache_coordinator import CacheCoordinator
from ...permissions.entities import (
    Authorizable,
    AuthorizationRecord,
    AuthorizationStore,
    RolesAndPermissions,
)
from ...permissions.services.resolver import describe_record
from ...roles.services.catalog import RoleCatalog
from ....config.constants import NO_TEAM
from ....core.exceptions import ValidationError
from ....core.value_objects import RecordKey, flatten_names, normalize_names


logger = logging.getLogger(__name__)


class AuthorizationService:
    """Service orchestrating role/permission assignment and permission checks."""

    def __init__(
        self,
        catalog: RoleCatalog,
        store: AuthorizationStore,
        coordinator: CacheCoordinator
    ):
        self.catalog = catalog
        self.store = store
        self.coordinator = coordinator

    def record_key(self, subject: Authorizable, team: Optional[str] = None) -> RecordKey:
        """Key of the subject's record; ``team`` overrides the subject's own team."""
        if not isinstance(subject, Authorizable):
            raise ValidationError(f"Subject must implement Authorizable, got: {type(subject).__name__}")

        team_key = team if team is not None else subject.authorization_team
        return RecordKey(
            subject_id=subject.authorization_id,
            team_key=team_key if team_key is not None else NO_TEAM,
            subject_type=subject.authorization_type,
        )

    # Role assignment

    async def attach_role(self, subject: Authorizable, *roles: str, team: Optional[str] = None) -> bool:
        """Attach roles; attaching an already attached role changes nothing."""
        names = self._names(roles, "Role name")
        unknown = [name for name in names if name not in self.catalog]
        if unknown:
            logger.warning(f"Attaching role(s) not defined in the catalog: {', '.join(unknown)}")
        return await self._mutate(subject, team, lambda r: r.with_roles(names), f"Attached roles {list(names)}")

    async def detach_role(self, subject: Authorizable, *roles: str, team: Optional[str] = None) -> bool:
        """Detach roles; detaching a role that is not attached is a no-op."""
        names = self._names(roles, "Role name")
        return await self._mutate(subject, team, lambda r: r.without_roles(names), f"Detached roles {list(names)}")

    async def clear_roles(self, subject: Authorizable, team: Optional[str] = None) -> bool:
        """Detach every role."""
        return await self._mutate(subject, team, AuthorizationRecord.cleared_roles, "Cleared roles")

    # Explicit permissions

    async def grant_permission(self, subject: Authorizable, *permissions: str, team: Optional[str] = None) -> bool:
        """Grant permissions explicitly, replacing any explicit denial of them."""
        names = self._names(permissions, "Permission name")
        return await self._mutate(subject, team, lambda r: r.with_granted(names), f"Granted {list(names)}")

    async def deny_permission(self, subject: Authorizable, *permissions: str, team: Optional[str] = None) -> bool:
        """Deny permissions explicitly; denials beat every role and grant."""
        names = self._names(permissions, "Permission name")
        return await self._mutate(subject, team, lambda r: r.with_denied(names), f"Denied {list(names)}")

    async def detach_permission(self, subject: Authorizable, *permissions: str, team: Optional[str] = None) -> bool:
        """Remove explicit grants and denials, reverting to role-derived status."""
        names = self._names(permissions, "Permission name")
        return await self._mutate(
            subject, team, lambda r: r.without_explicit(names), f"Detached explicit {list(names)}"
        )

    async def clear_explicit_permissions(self, subject: Authorizable, team: Optional[str] = None) -> bool:
        """Remove every explicit grant and denial."""
        return await self._mutate(subject, team, AuthorizationRecord.cleared_explicit, "Cleared explicit permissions")

    # Checks

    async def is_granted(self, subject: Authorizable, *permissions: str, team: Optional[str] = None) -> bool:
        """True iff every listed permission is in the effective set."""
        names = self._names(permissions, "Permission name")
        effective = await self.list_permissions(subject, team=team)
        return all(name in effective for name in names)

    async def is_denied(self, subject: Authorizable, *permissions: str, team: Optional[str] = None) -> bool:
        """True iff at least one listed permission is missing."""
        return not await self.is_granted(subject, *permissions, team=team)

    async def is_granted_any(self, subject: Authorizable, *permissions: str, team: Optional[str] = None) -> bool:
        """True iff at least one listed permission is in the effective set."""
        names = self._names(permissions, "Permission name")
        effective = await self.list_permissions(subject, team=team)
        return any(name in effective for name in names)

    # Listing

    async def list_permissions(self, subject: Authorizable, team: Optional[str] = None) -> FrozenSet[str]:
        """Effective permission set, served from the cache."""
        return await self.coordinator.get_for_key(self.record_key(subject, team))

    async def list_roles(self, subject: Authorizable, team: Optional[str] = None) -> FrozenSet[str]:
        """Attached role names, including ones the catalog does not define."""
        record = await self.store.fetch_record(self.record_key(subject, team))
        return record.roles

    async def list_roles_and_permissions(
        self,
        subject: Authorizable,
        team: Optional[str] = None
    ) -> RolesAndPermissions:
        """Roles with their permissions, explicit overrides and the effective set."""
        record = await self.store.fetch_record(self.record_key(subject, team))
        return describe_record(record, self.catalog)

    # Cache management

    async def warm_cache(self, subject: Authorizable, team: Optional[str] = None) -> FrozenSet[str]:
        """Recompute and store the subject's effective set ahead of use."""
        return await self.coordinator.warm(self.record_key(subject, team))

    async def invalidate_cache(self, subject: Authorizable, team: Optional[str] = None) -> bool:
        """Drop the subject's cached set, e.g. after editing the store directly."""
        return await self.coordinator.invalidate_key(self.record_key(subject, team))

    async def invalidate_all_caches(self) -> int:
        """Drop every cached set, e.g. after deploying a changed role catalog."""
        return await self.coordinator.invalidate_all()

    # Internals

    async def _mutate(
        self,
        subject: Authorizable,
        team: Optional[str],
        change: Callable[[AuthorizationRecord], AuthorizationRecord],
        action: str
    ) -> bool:
        """Apply ``change`` under the subject's lock: persist, then invalidate.

        Returns:
            Whether the record changed
        """
        key = self.record_key(subject, team)

        async with self.coordinator.locked(key):
            current = await self.store.fetch_record(key)
            updated = change(current)
            if updated == current:
                logger.debug(f"{action} for {key}: nothing to change")
                return False

            await self.store.save_record(key, updated)
            await self.coordinator.invalidate_key(key)

        logger.info(f"{action} for {key}")
        return True

    @staticmethod
    def _names(values: Tuple, kind: str) -> Tuple[str, ...]:
        names = normalize_names(flatten_names(values), kind)
        if not names:
            raise ValidationError(f"At least one {kind.lower()} is required")
        return names
