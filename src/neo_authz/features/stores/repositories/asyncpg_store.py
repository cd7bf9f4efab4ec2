"""AsyncPG-based AuthorizationStore implementation.

Keeps one row per (subject_id, subject_type, team_key) in
``{schema}.{table}`` with ``roles``, ``granted_permissions`` and
``denied_permissions`` text[] columns. A unique constraint on the three key
columns is expected; ``subject_type`` stores '' when the subject has none.
"""

import logging
import re
from typing import Optional

import asyncpg

from ...permissions.entities import AuthorizationRecord
from ....core.exceptions import StorageError
from ....core.value_objects import RecordKey


logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")


class AsyncPGAuthorizationStore:
    """AsyncPG implementation of the AuthorizationStore protocol."""

    def __init__(self, pool: asyncpg.Pool, schema: str = "admin", table: str = "authorization_records"):
        """Initialize with a connection pool and the target table."""
        self.pool = pool
        self.schema = self._validate_identifier(schema)
        self.table = self._validate_identifier(table)

    @staticmethod
    def _validate_identifier(name: str) -> str:
        """Validate schema/table names to prevent SQL injection."""
        if not _IDENTIFIER.match(name):
            raise ValueError(f"Invalid SQL identifier: {name}")
        return name

    @property
    def qualified_table(self) -> str:
        return f"{self.schema}.{self.table}"

    @staticmethod
    def _key_params(key: RecordKey):
        return key.subject_id, key.subject_type or "", key.team_key

    def _build_record_from_row(self, row: Optional[asyncpg.Record]) -> AuthorizationRecord:
        """Build AuthorizationRecord from database row."""
        if row is None:
            return AuthorizationRecord()
        return AuthorizationRecord(
            roles=frozenset(row["roles"] or ()),
            granted=frozenset(row["granted_permissions"] or ()),
            denied=frozenset(row["denied_permissions"] or ()),
        )

    async def fetch_record(self, key: RecordKey) -> AuthorizationRecord:
        """Get the record, or an empty one when no row exists."""
        query = f"""
            SELECT roles, granted_permissions, denied_permissions
            FROM {self.qualified_table}
            WHERE subject_id = $1 AND subject_type = $2 AND team_key = $3
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(query, *self._key_params(key))
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to fetch authorization record for {key}: {e}")
            raise StorageError(f"Failed to fetch authorization record: {e}", details={"key": str(key)})

        return self._build_record_from_row(row)

    async def save_record(self, key: RecordKey, record: AuthorizationRecord) -> None:
        """Upsert the record; empty records delete the row."""
        if record.is_empty():
            query = f"""
                DELETE FROM {self.qualified_table}
                WHERE subject_id = $1 AND subject_type = $2 AND team_key = $3
            """
            params = self._key_params(key)
        else:
            query = f"""
                INSERT INTO {self.qualified_table}
                    (subject_id, subject_type, team_key, roles, granted_permissions, denied_permissions, updated_at)
                VALUES ($1, $2, $3, $4, $5, $6, NOW())
                ON CONFLICT (subject_id, subject_type, team_key) DO UPDATE SET
                    roles = EXCLUDED.roles,
                    granted_permissions = EXCLUDED.granted_permissions,
                    denied_permissions = EXCLUDED.denied_permissions,
                    updated_at = NOW()
            """
            params = (
                *self._key_params(key),
                sorted(record.roles),
                sorted(record.granted),
                sorted(record.denied),
            )

        try:
            async with self.pool.acquire() as conn:
                await conn.execute(query, *params)
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Failed to save authorization record for {key}: {e}")
            raise StorageError(f"Failed to save authorization record: {e}", details={"key": str(key)})

        logger.debug(f"Saved authorization record for {key}")
