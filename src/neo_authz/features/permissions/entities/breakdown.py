"""Structured view of how a subject's permissions come together."""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet


@dataclass(frozen=True)
class RolesAndPermissions:
    """Roles with their permissions, explicit overrides and the effective result."""

    roles: Dict[str, FrozenSet[str]] = field(default_factory=dict)
    granted: FrozenSet[str] = frozenset()
    denied: FrozenSet[str] = frozenset()
    effective: FrozenSet[str] = frozenset()
    # Attached roles missing from the catalog
    unknown_roles: FrozenSet[str] = frozenset()

    def to_dict(self) -> Dict[str, Any]:
        """Sorted, display-friendly representation."""
        return {
            "roles": {name: sorted(perms) for name, perms in sorted(self.roles.items())},
            "granted": sorted(self.granted),
            "denied": sorted(self.denied),
            "effective": sorted(self.effective),
            "unknown_roles": sorted(self.unknown_roles),
        }
