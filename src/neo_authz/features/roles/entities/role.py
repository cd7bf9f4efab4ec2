"""Role domain entities for neo-authz roles feature.

A RoleDefinition is the declared shape of a role: its own permissions, the
roles it is based on and the permissions it excludes. RoleBuilder offers the
chained declaration style and finalizes into an immutable definition.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Set, Tuple

from ....core.exceptions import ValidationError
from ....core.value_objects import flatten_names, normalize_names


@dataclass(frozen=True)
class RoleDefinition:
    """Immutable declaration of a role before catalog compilation."""

    name: str
    permissions: FrozenSet[str] = frozenset()
    based_on: Tuple[str, ...] = ()
    excluded: FrozenSet[str] = frozenset()

    def __post_init__(self):
        """Validate the role name and freeze collection fields."""
        if not isinstance(self.name, str) or not self.name:
            raise ValidationError("Role name cannot be empty")

        for field_name in ("permissions", "based_on", "excluded"):
            if isinstance(getattr(self, field_name), str):
                raise ValidationError(f"Role '{self.name}' {field_name} must be a collection, not a string")

        object.__setattr__(self, "permissions", frozenset(normalize_names(self.permissions, "Permission name")))
        object.__setattr__(self, "excluded", frozenset(normalize_names(self.excluded, "Permission name")))

        # Keep declaration order, drop repeats
        bases = normalize_names(self.based_on, "Role name")
        object.__setattr__(self, "based_on", tuple(dict.fromkeys(bases)))

    @property
    def is_composite(self) -> bool:
        """Check if role derives permissions from other roles."""
        return bool(self.based_on)

    def __str__(self) -> str:
        return f"Role({self.name})"


@dataclass
class RoleBuilder:
    """Chained builder accumulating a role's unions and exclusions.

    Example:
        RoleBuilder("manager").based_on("cashier", "clerk").except_("complete orders").build()

    Calls accumulate and may come in any order; ``except_`` always applies
    after every union when the catalog is compiled.
    """

    name: str
    _permissions: Set[str] = field(default_factory=set, init=False, repr=False)
    _based_on: List[str] = field(default_factory=list, init=False, repr=False)
    _excluded: Set[str] = field(default_factory=set, init=False, repr=False)

    def can(self, *permissions: str) -> "RoleBuilder":
        """Add permissions owned directly by the role."""
        self._permissions.update(normalize_names(flatten_names(permissions), "Permission name"))
        return self

    def based_on(self, *roles: str) -> "RoleBuilder":
        """Inherit every permission of the given roles."""
        for role_name in normalize_names(flatten_names(roles), "Role name"):
            if role_name not in self._based_on:
                self._based_on.append(role_name)
        return self

    def except_(self, *permissions: str) -> "RoleBuilder":
        """Remove permissions from the merged result."""
        self._excluded.update(normalize_names(flatten_names(permissions), "Permission name"))
        return self

    def build(self) -> RoleDefinition:
        """Finalize into an immutable RoleDefinition."""
        return RoleDefinition(
            name=self.name,
            permissions=frozenset(self._permissions),
            based_on=tuple(self._based_on),
            excluded=frozenset(self._excluded),
        )


def role(name: str) -> RoleBuilder:
    """Start declaring a role."""
    return RoleBuilder(name)
