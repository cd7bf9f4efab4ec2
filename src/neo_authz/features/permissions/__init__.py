"""Permissions feature for neo-authz.

Feature-First architecture for per-subject assignments:
- entities/: Authorization records, the permission breakdown, subject and store protocols
- services/: Pure effective-permission resolution
"""

from .entities import (
    AuthorizationRecord,
    RolesAndPermissions,
    Subject,
    Authorizable,
    AuthorizationStore,
)
from .services import resolve_permissions, describe_record

__all__ = [
    # Entities
    "AuthorizationRecord",
    "RolesAndPermissions",
    "Subject",

    # Protocols
    "Authorizable",
    "AuthorizationStore",

    # Services
    "resolve_permissions",
    "describe_record",
]
