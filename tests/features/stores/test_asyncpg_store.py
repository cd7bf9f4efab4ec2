"""Tests for the asyncpg record store against a mocked pool."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from neo_authz.core.exceptions import StorageError
from neo_authz.core.value_objects import RecordKey
from neo_authz.features.permissions import AuthorizationRecord
from neo_authz.features.stores import AsyncPGAuthorizationStore


@pytest.fixture
def conn():
    """Mock asyncpg connection."""
    connection = MagicMock()
    connection.fetchrow = AsyncMock(return_value=None)
    connection.execute = AsyncMock()
    return connection


@pytest.fixture
def pool(conn):
    """Mock asyncpg pool whose acquire() yields ``conn``."""
    mock_pool = MagicMock()
    mock_pool.acquire.return_value.__aenter__.return_value = conn
    return mock_pool


@pytest.fixture
def pg_store(pool):
    return AsyncPGAuthorizationStore(pool)


class TestAsyncPGAuthorizationStore:
    """Test SQL mapping of records."""

    def test_rejects_unsafe_identifiers(self, pool):
        with pytest.raises(ValueError):
            AsyncPGAuthorizationStore(pool, schema="admin; DROP TABLE x")
        with pytest.raises(ValueError):
            AsyncPGAuthorizationStore(pool, table="Records")

    def test_qualified_table(self, pool):
        assert AsyncPGAuthorizationStore(pool, schema="tenant_a").qualified_table == "tenant_a.authorization_records"

    @pytest.mark.asyncio
    async def test_fetch_missing_row(self, pg_store, conn):
        record = await pg_store.fetch_record(RecordKey("42", subject_type="user"))

        assert record == AuthorizationRecord()
        args = conn.fetchrow.await_args.args
        assert "FROM admin.authorization_records" in args[0]
        assert args[1:] == ("42", "user", "__no_team__")

    @pytest.mark.asyncio
    async def test_fetch_row(self, pg_store, conn):
        conn.fetchrow.return_value = {
            "roles": ["cashier"],
            "granted_permissions": ["x"],
            "denied_permissions": None,
        }

        record = await pg_store.fetch_record(RecordKey("42", "store-7"))

        assert record == AuthorizationRecord(roles={"cashier"}, granted={"x"})
        assert conn.fetchrow.await_args.args[1:] == ("42", "", "store-7")

    @pytest.mark.asyncio
    async def test_save_upserts_sorted_lists(self, pg_store, conn):
        record = AuthorizationRecord(roles={"b", "a"}, granted={"y"}, denied={"z", "x"})

        await pg_store.save_record(RecordKey("42", "store-7", "user"), record)

        args = conn.execute.await_args.args
        assert "ON CONFLICT (subject_id, subject_type, team_key) DO UPDATE" in args[0]
        assert args[1:] == ("42", "user", "store-7", ["a", "b"], ["y"], ["x", "z"])

    @pytest.mark.asyncio
    async def test_save_empty_record_deletes_row(self, pg_store, conn):
        await pg_store.save_record(RecordKey("42"), AuthorizationRecord())

        args = conn.execute.await_args.args
        assert args[0].strip().startswith("DELETE FROM admin.authorization_records")
        assert args[1:] == ("42", "", "__no_team__")

    @pytest.mark.asyncio
    async def test_fetch_failure_raises_storage_error(self, pg_store, conn):
        conn.fetchrow.side_effect = OSError("connection reset")

        with pytest.raises(StorageError) as exc_info:
            await pg_store.fetch_record(RecordKey("42"))

        assert exc_info.value.details == {"key": "42@__no_team__"}

    @pytest.mark.asyncio
    async def test_save_failure_raises_storage_error(self, pg_store, conn):
        conn.execute.side_effect = OSError("connection reset")

        with pytest.raises(StorageError):
            await pg_store.save_record(RecordKey("42"), AuthorizationRecord(roles={"r"}))
