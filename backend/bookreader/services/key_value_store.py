"""
Key-Value Store Module

Asynchronous string key-value persistence on top of SQLite. The book
collection and every per-book highlight collection are stored here as
serialized JSON strings.
"""

import asyncio
import logging
import sqlite3
from contextlib import closing

from ..config import DEFAULT_DB_PATH
from ..exceptions import StorageReadError, StorageWriteError
from .base_database_service import BaseDatabaseService

# Configure logger for this module
logger = logging.getLogger(__name__)


class KeyValueStore(BaseDatabaseService):
    """
    Service class for storing opaque string values under string keys.

    Blocking SQLite calls run in a worker thread so awaiting callers do not
    stall the event loop. Writes replace the whole value for a key.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        super().__init__(db_path)
        self._init_table()

    def _init_table(self):
        """
        Initialize the key_value_store table.
        """
        with closing(self.get_connection()) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS key_value_store (
                    key TEXT PRIMARY KEY,                 -- Storage key, e.g. @book_reader_books
                    value TEXT NOT NULL,                  -- Serialized payload
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.commit()

    def get_sync(self, key: str) -> str | None:
        """
        Read the value stored under a key.

        Args:
            key (str): Storage key

        Returns:
            str | None: The stored value, or None if the key was never written

        Raises:
            StorageReadError: If the database cannot be read
        """
        try:
            with closing(self.get_connection()) as conn:
                row = conn.execute(
                    "SELECT value FROM key_value_store WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Database read error for {key}: {e}")
            raise StorageReadError(key, str(e)) from e
        return row["value"] if row else None

    def set_sync(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageWriteError: If the write fails
        """
        try:
            with closing(self.get_connection()) as conn:
                conn.execute(
                    """
                    INSERT INTO key_value_store (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value, self.get_current_timestamp()),
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Database write error for {key}: {e}")
            raise StorageWriteError(key, str(e)) from e

    def remove_sync(self, key: str) -> bool:
        try:
            with closing(self.get_connection()) as conn:
                cursor = conn.execute(
                    "DELETE FROM key_value_store WHERE key = ?", (key,)
                )
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Database delete error for {key}: {e}")
            raise StorageWriteError(key, str(e)) from e

    async def get(self, key: str) -> str | None:
        return await asyncio.to_thread(self.get_sync, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self.set_sync, key, value)

    async def remove(self, key: str) -> bool:
        return await asyncio.to_thread(self.remove_sync, key)
