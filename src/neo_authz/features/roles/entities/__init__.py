"""Role entities package.

Role declarations, the chained role builder and declarative catalog models.
"""

from .role import RoleDefinition, RoleBuilder, role
from .models import RoleSpec, CatalogSpec

__all__ = [
    "RoleDefinition",
    "RoleBuilder",
    "role",
    "RoleSpec",
    "CatalogSpec",
]
