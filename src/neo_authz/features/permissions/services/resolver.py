"""Effective permission resolution.

Pure functions over an AuthorizationRecord and a compiled RoleCatalog; no I/O.
"""

from typing import FrozenSet

from ...roles.services.catalog import RoleCatalog
from ..entities.breakdown import RolesAndPermissions
from ..entities.record import AuthorizationRecord


def resolve_permissions(record: AuthorizationRecord, catalog: RoleCatalog) -> FrozenSet[str]:
    """Compute the effective permission set.

    Role-derived permissions are merged with explicit grants, then explicit
    denials are removed. A denial therefore always wins, and a grant adds
    permissions no attached role provides.
    """
    derived = set()
    for role_name in record.roles:
        derived |= catalog.lookup(role_name)
    return frozenset((derived | record.granted) - record.denied)


def describe_record(record: AuthorizationRecord, catalog: RoleCatalog) -> RolesAndPermissions:
    """Break a record down into per-role permissions and explicit overrides."""
    return RolesAndPermissions(
        roles={role_name: catalog.lookup(role_name) for role_name in record.roles},
        granted=record.granted,
        denied=record.denied,
        effective=resolve_permissions(record, catalog),
        unknown_roles=frozenset(name for name in record.roles if name not in catalog),
    )
