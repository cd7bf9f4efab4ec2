"""Authorization record entity.

One record per (subject, team): attached role names plus explicit grants and
denials. Records reference roles only by name; a name the catalog no longer
defines simply contributes nothing.
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Mapping


@dataclass(frozen=True)
class AuthorizationRecord:
    """Immutable persisted assignments of a subject within one team."""

    roles: FrozenSet[str] = frozenset()
    granted: FrozenSet[str] = frozenset()
    denied: FrozenSet[str] = frozenset()

    def __post_init__(self):
        """Freeze collections so records can be shared safely."""
        for field_name in ("roles", "granted", "denied"):
            value = getattr(self, field_name)
            if not isinstance(value, frozenset):
                object.__setattr__(self, field_name, frozenset(value or ()))

    def is_empty(self) -> bool:
        """Check if the record holds no assignments at all."""
        return not (self.roles or self.granted or self.denied)

    # Role assignments

    def with_roles(self, roles: Iterable[str]) -> "AuthorizationRecord":
        return AuthorizationRecord(self.roles | frozenset(roles), self.granted, self.denied)

    def without_roles(self, roles: Iterable[str]) -> "AuthorizationRecord":
        return AuthorizationRecord(self.roles - frozenset(roles), self.granted, self.denied)

    def cleared_roles(self) -> "AuthorizationRecord":
        return AuthorizationRecord(frozenset(), self.granted, self.denied)

    # Explicit overrides; the latest override for a name replaces the opposite one

    def with_granted(self, permissions: Iterable[str]) -> "AuthorizationRecord":
        names = frozenset(permissions)
        return AuthorizationRecord(self.roles, self.granted | names, self.denied - names)

    def with_denied(self, permissions: Iterable[str]) -> "AuthorizationRecord":
        names = frozenset(permissions)
        return AuthorizationRecord(self.roles, self.granted - names, self.denied | names)

    def without_explicit(self, permissions: Iterable[str]) -> "AuthorizationRecord":
        """Drop explicit grants and denials, reverting to role-derived status."""
        names = frozenset(permissions)
        return AuthorizationRecord(self.roles, self.granted - names, self.denied - names)

    def cleared_explicit(self) -> "AuthorizationRecord":
        return AuthorizationRecord(self.roles, frozenset(), frozenset())

    # Serialization

    def to_dict(self) -> Dict[str, Any]:
        """Plain, sorted representation for storage."""
        return {
            "roles": sorted(self.roles),
            "granted": sorted(self.granted),
            "denied": sorted(self.denied),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AuthorizationRecord":
        return cls(
            roles=frozenset(data.get("roles") or ()),
            granted=frozenset(data.get("granted") or ()),
            denied=frozenset(data.get("denied") or ()),
        )
