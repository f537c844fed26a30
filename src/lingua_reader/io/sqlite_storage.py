"""SQLite-backed key/value storage."""

import sqlite3
from pathlib import Path
from typing import List, Optional, Union

from lingua_reader.io.storage import StoragePort, check_quota, encoded_size


class SqliteStorage(StoragePort):
    """Owns the SQLite connection and a single key/value table.

    An optional byte quota emulates the capacity limit of browser storage.
    """

    def __init__(self, db_path: Union[Path, str], max_bytes: Optional[int] = None) -> None:
        self.db_path = db_path if db_path == ":memory:" else Path(db_path)
        self.max_bytes = max_bytes
        self.connection = sqlite3.connect(str(self.db_path))
        self.connection.row_factory = sqlite3.Row

    def ensure_schema(self) -> None:
        """Create the key/value table if it does not exist."""
        cur = self.connection.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
        self.connection.commit()

    def get(self, key: str) -> Optional[str]:
        cur = self.connection.cursor()
        cur.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = cur.fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        if self.max_bytes is not None:
            check_quota(self.max_bytes, self._used_bytes(excluding=key) + encoded_size(key, value), key)

        try:
            cur = self.connection.cursor()
            cur.execute(
                """
                INSERT INTO kv_store (key, value)
                VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )
            self.connection.commit()
        except sqlite3.Error as e:
            raise RuntimeError(f"Failed to write '{key}': {e}") from e

    def remove(self, key: str) -> None:
        cur = self.connection.cursor()
        cur.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        self.connection.commit()

    def keys(self) -> List[str]:
        cur = self.connection.cursor()
        cur.execute("SELECT key FROM kv_store ORDER BY key")
        return [row["key"] for row in cur.fetchall()]

    def close(self) -> None:
        self.connection.close()

    def _used_bytes(self, excluding: str) -> int:
        cur = self.connection.cursor()
        cur.execute("SELECT key, value FROM kv_store WHERE key != ?", (excluding,))
        return sum(encoded_size(row["key"], row["value"]) for row in cur.fetchall())
