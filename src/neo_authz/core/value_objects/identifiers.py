"""Value objects for identifiers in neo-authz.

Subjects, teams and permission/role names are opaque, case-sensitive strings.
RecordKey is the unit of persistence, caching and locking.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..exceptions import ValidationError
from ...config.constants import NO_TEAM


def normalize_names(names: Iterable[str], kind: str = "Name") -> Tuple[str, ...]:
    """Validate permission or role names, keeping the caller's order."""
    normalized = []
    for name in names:
        if not isinstance(name, str):
            raise ValidationError(f"{kind} must be a string, got: {type(name).__name__}")
        if not name:
            raise ValidationError(f"{kind} cannot be empty")
        normalized.append(name)
    return tuple(normalized)


@dataclass(frozen=True)
class RecordKey:
    """Immutable identity of one authorization record: subject plus team."""

    subject_id: str
    team_key: str = NO_TEAM
    subject_type: Optional[str] = None

    def __post_init__(self):
        """Coerce identifiers to strings and reject empty ones."""
        if self.subject_id is None or str(self.subject_id) == "":
            raise ValidationError("Subject id cannot be empty")
        object.__setattr__(self, "subject_id", str(self.subject_id))

        team_key = NO_TEAM if self.team_key is None else str(self.team_key)
        if not team_key:
            raise ValidationError("Team key cannot be empty; omit it to use the no-team scope")
        object.__setattr__(self, "team_key", team_key)

        if self.subject_type is not None:
            if str(self.subject_type) == "":
                raise ValidationError("Subject type cannot be empty; omit it for untyped subjects")
            object.__setattr__(self, "subject_type", str(self.subject_type))

    @property
    def has_team(self) -> bool:
        """Whether the record is scoped to a team."""
        return self.team_key != NO_TEAM

    def __str__(self) -> str:
        prefix = f"{self.subject_type}:" if self.subject_type else ""
        return f"{prefix}{self.subject_id}@{self.team_key}"


def flatten_names(values: Iterable) -> List[str]:
    """Accept both ``f("a", "b")`` and ``f(["a", "b"])`` call styles."""
    flat = []
    for value in values:
        if isinstance(value, (list, tuple, set, frozenset)):
            flat.extend(value)
        else:
            flat.append(value)
    return flat
