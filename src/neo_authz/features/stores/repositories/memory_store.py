"""In-memory AuthorizationStore implementation."""

import logging
from typing import Dict, List

from ...permissions.entities import AuthorizationRecord
from ....core.value_objects import RecordKey

logger = logging.getLogger(__name__)


class InMemoryAuthorizationStore:
    """Dictionary-backed store for tests and single-process use."""

    def __init__(self):
        self._records: Dict[RecordKey, AuthorizationRecord] = {}

    async def fetch_record(self, key: RecordKey) -> AuthorizationRecord:
        """Get the record, or an empty one when none exists."""
        return self._records.get(key, AuthorizationRecord())

    async def save_record(self, key: RecordKey, record: AuthorizationRecord) -> None:
        """Persist the record; empty records are removed."""
        if record.is_empty():
            self._records.pop(key, None)
        else:
            self._records[key] = record
        logger.debug(f"Saved authorization record for {key}")

    def keys(self) -> List[RecordKey]:
        """Keys holding a non-empty record."""
        return list(self._records)
