"""
Unit tests for KeyValueStore.

Tests cover:
- Missing keys
- Write, overwrite and removal
- Table initialization on a fresh database
- Read and write failures
"""

import sqlite3
from unittest.mock import patch

import pytest

from bookreader.exceptions import StorageReadError, StorageWriteError
from bookreader.services.key_value_store import KeyValueStore


class TestKeyValueStore:
    def test_table_created(self, temp_db):
        KeyValueStore(db_path=temp_db)
        conn = sqlite3.connect(temp_db)
        tables = [
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        ]
        conn.close()
        assert "key_value_store" in tables

    def test_creates_missing_data_dir(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "store.db"
        store = KeyValueStore(db_path=str(db_path))
        assert db_path.parent.exists()
        assert store.get_sync("anything") is None

    @pytest.mark.asyncio
    async def test_missing_key(self, store):
        assert await store.get("@missing") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, store):
        await store.set("@key", '{"a": 1}')
        assert await store.get("@key") == '{"a": 1}'

    @pytest.mark.asyncio
    async def test_overwrite_replaces_value(self, store):
        await store.set("@key", "first")
        await store.set("@key", "second")
        assert await store.get("@key") == "second"

    @pytest.mark.asyncio
    async def test_values_survive_new_instance(self, store, temp_db):
        await store.set("@key", "persisted")
        assert await KeyValueStore(db_path=temp_db).get("@key") == "persisted"

    @pytest.mark.asyncio
    async def test_remove(self, store):
        await store.set("@key", "value")
        assert await store.remove("@key") is True
        assert await store.remove("@key") is False
        assert await store.get("@key") is None


class TestFailures:
    @pytest.mark.asyncio
    async def test_write_error(self, store):
        with patch.object(
            store, "get_connection", side_effect=sqlite3.OperationalError("disk I/O error")
        ):
            with pytest.raises(StorageWriteError) as exc_info:
                await store.set("@key", "value")
        assert exc_info.value.key == "@key"

    @pytest.mark.asyncio
    async def test_read_error(self, store):
        with patch.object(
            store, "get_connection", side_effect=sqlite3.OperationalError("locked")
        ):
            with pytest.raises(StorageReadError):
                await store.get("@key")
