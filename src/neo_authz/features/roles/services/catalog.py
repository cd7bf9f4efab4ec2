"""Role catalog compilation.

Flattens role definitions into final permission sets once, at startup:

    flattened(role) = (own ∪ flattened(base) for every base) − excluded

Bases may be declared before or after the role that uses them. Cycles and
references to undefined roles fail compilation. The compiled catalog is
read-only and shared by every concurrent reader without locking.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from ....core.exceptions import (
    CyclicRoleReferenceError,
    UndefinedRoleReferenceError,
    ValidationError,
)
from ..entities.models import CatalogSpec
from ..entities.role import RoleBuilder, RoleDefinition


logger = logging.getLogger(__name__)

_EMPTY: FrozenSet[str] = frozenset()


class RoleCatalog:
    """Immutable mapping of role name to its flattened permission set."""

    __slots__ = ("_definitions", "_permissions")

    def __init__(self, definitions: Mapping[str, RoleDefinition], permissions: Mapping[str, FrozenSet[str]]):
        self._definitions = MappingProxyType(dict(definitions))
        self._permissions = MappingProxyType(dict(permissions))

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, "_permissions"):
            raise AttributeError("RoleCatalog is immutable")
        object.__setattr__(self, name, value)

    # Construction

    @classmethod
    def compile(cls, definitions: Iterable[RoleDefinition]) -> "RoleCatalog":
        """Compile definitions into a catalog.

        Args:
            definitions: Role definitions or builders, in declaration order.
                A later declaration of the same name replaces the earlier one.

        Returns:
            The compiled catalog

        Raises:
            CyclicRoleReferenceError: a role transitively bases itself on itself
            UndefinedRoleReferenceError: a base role is never defined
        """
        declared: Dict[str, RoleDefinition] = {}
        for definition in definitions:
            if isinstance(definition, RoleBuilder):
                definition = definition.build()
            if not isinstance(definition, RoleDefinition):
                raise ValidationError(f"Expected RoleDefinition, got: {type(definition).__name__}")
            if definition.name in declared:
                logger.warning(f"Role '{definition.name}' declared more than once; the last declaration wins")
            declared[definition.name] = definition

        for definition in declared.values():
            missing = [base for base in definition.based_on if base not in declared]
            if missing:
                raise UndefinedRoleReferenceError(definition.name, missing)

        resolved: Dict[str, FrozenSet[str]] = {}
        for name in declared:
            _flatten(name, declared, resolved, [])

        logger.info(f"Compiled role catalog with {len(resolved)} roles")
        return cls(declared, resolved)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "RoleCatalog":
        """Compile a declarative role mapping.

        Each value is a list of permission names or a mapping with
        ``permissions``, ``based_on`` (or ``basedOn``) and ``except`` keys.
        """
        try:
            spec = CatalogSpec.from_mapping(mapping)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid role catalog: {e}", details={"errors": e.errors()})
        return cls.compile(spec.to_definitions())

    @classmethod
    def empty(cls) -> "RoleCatalog":
        """Catalog without roles; every lookup yields no permissions."""
        return cls({}, {})

    # Lookup

    def lookup(self, role_name: str) -> FrozenSet[str]:
        """Get the flattened permissions of a role.

        Unknown roles resolve to an empty set so stale role names stored on a
        subject never break resolution.
        """
        return self._permissions.get(role_name, _EMPTY)

    def definition(self, role_name: str) -> Optional[RoleDefinition]:
        """Get the declared definition of a role."""
        return self._definitions.get(role_name)

    def role_names(self) -> List[str]:
        """Role names in declaration order."""
        return list(self._permissions)

    def permissions(self) -> FrozenSet[str]:
        """Every permission reachable through some role."""
        return frozenset().union(*self._permissions.values())

    def roles_granting(self, permission_name: str) -> List[str]:
        """Roles whose flattened set contains the permission."""
        return [name for name, perms in self._permissions.items() if permission_name in perms]

    def as_dict(self) -> Dict[str, List[str]]:
        """Plain mapping of role name to sorted permissions."""
        return {name: sorted(perms) for name, perms in self._permissions.items()}

    def __contains__(self, role_name: object) -> bool:
        return role_name in self._permissions

    def __iter__(self) -> Iterator[str]:
        return iter(self._permissions)

    def __len__(self) -> int:
        return len(self._permissions)

    def __repr__(self) -> str:
        return f"RoleCatalog(roles={len(self._permissions)})"


def _flatten(
    name: str,
    declared: Mapping[str, RoleDefinition],
    resolved: Dict[str, FrozenSet[str]],
    stack: List[str],
) -> FrozenSet[str]:
    """Depth-first flattening with memoization and cycle detection."""
    if name in resolved:
        return resolved[name]

    if name in stack:
        cycle = stack[stack.index(name):] + [name]
        raise CyclicRoleReferenceError(name, cycle)

    definition = declared[name]
    stack.append(name)
    merged = set(definition.permissions)
    for base in definition.based_on:
        merged |= _flatten(base, declared, resolved, stack)
    stack.pop()

    # Exclusions apply after every union
    result = frozenset(merged - definition.excluded)
    resolved[name] = result
    return result
