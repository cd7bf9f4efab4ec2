"""Roles feature for neo-authz.

Feature-First architecture for the static role catalog:
- entities/: Role definitions, the role builder and declarative models
- services/: Catalog compilation and lookup
"""

from .entities import RoleDefinition, RoleBuilder, role, RoleSpec, CatalogSpec
from .services import RoleCatalog

__all__ = [
    # Entities
    "RoleDefinition",
    "RoleBuilder",
    "role",
    "RoleSpec",
    "CatalogSpec",

    # Services
    "RoleCatalog",
]
