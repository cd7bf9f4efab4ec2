"""Pydantic models for declarative role catalogs.

A catalog mapping looks like::

    {
        "cashier": ["see orders", "modify orders", "complete orders"],
        "clerk": {"permissions": ["manage inventory"]},
        "manager": {"based_on": ["cashier", "clerk"], "except": ["complete orders"]},
    }
"""

from typing import Any, Dict, List, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .role import RoleDefinition


class RoleSpec(BaseModel):
    """Declarative form of a single role."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    permissions: List[str] = Field(default_factory=list, description="Permissions owned by the role")
    based_on: List[str] = Field(default_factory=list, alias="basedOn", description="Roles to merge in")
    excluded: List[str] = Field(default_factory=list, alias="except", description="Permissions removed last")

    @field_validator("permissions", "based_on", "excluded")
    @classmethod
    def validate_names(cls, v: List[str]) -> List[str]:
        """Reject empty names."""
        for name in v:
            if not name:
                raise ValueError("names must be non-empty strings")
        return v

    def to_definition(self, name: str) -> RoleDefinition:
        """Convert into an immutable RoleDefinition."""
        return RoleDefinition(
            name=name,
            permissions=frozenset(self.permissions),
            based_on=tuple(self.based_on),
            excluded=frozenset(self.excluded),
        )


class CatalogSpec(BaseModel):
    """Declarative form of a whole catalog."""

    roles: Dict[str, RoleSpec]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Union[List[str], Dict[str, Any]]]) -> "CatalogSpec":
        """Build from a role mapping, accepting bare permission lists as shorthand."""
        roles = {}
        for name, value in mapping.items():
            if isinstance(value, (list, tuple, set, frozenset)):
                roles[name] = {"permissions": list(value)}
            else:
                roles[name] = value
        return cls.model_validate({"roles": roles})

    def to_definitions(self) -> List[RoleDefinition]:
        """Convert every role, keeping mapping order."""
        return [spec.to_definition(name) for name, spec in self.roles.items()]
