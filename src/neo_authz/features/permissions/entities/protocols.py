"""Protocol interfaces for permission feature dependency injection.

Defines the subject capability consumed by the authorization service and the
store contract it persists through.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from ....core.value_objects import RecordKey
from .record import AuthorizationRecord


@runtime_checkable
class Authorizable(Protocol):
    """Anything that can hold roles and permissions.

    Subjects expose an identifier, an optional type used to keep different
    subject kinds apart, and an optional default team.
    """

    @property
    def authorization_id(self) -> str:
        """Stable identifier of the subject."""
        ...

    @property
    def authorization_type(self) -> Optional[str]:
        """Subject kind, e.g. "user" or "api_client"."""
        ...

    @property
    def authorization_team(self) -> Optional[str]:
        """Team the subject acts in when no team is given explicitly."""
        ...


@dataclass(frozen=True)
class Subject:
    """Plain Authorizable implementation."""

    id: str
    type: Optional[str] = None
    team: Optional[str] = None

    @property
    def authorization_id(self) -> str:
        return str(self.id)

    @property
    def authorization_type(self) -> Optional[str]:
        return self.type

    @property
    def authorization_team(self) -> Optional[str]:
        return self.team


@runtime_checkable
class AuthorizationStore(Protocol):
    """Protocol for persisting authorization records."""

    @abstractmethod
    async def fetch_record(self, key: RecordKey) -> AuthorizationRecord:
        """Get the record for a subject and team.

        Returns an empty record when none exists; "not found" is never an error.
        """
        ...

    @abstractmethod
    async def save_record(self, key: RecordKey, record: AuthorizationRecord) -> None:
        """Persist the record, raising StorageError on failure."""
        ...
