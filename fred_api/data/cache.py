"""SQLite cache for raw FRED responses."""

import sqlite3
from datetime import datetime
from pathlib import Path

from fred_api.config import CACHE_DB_NAME
from fred_api.exceptions import StorageError


class ResponseCache:
    """
    SQLite-based write-once cache of FRED response bodies.

    Keys are request fragments as bytes; values are response bodies exactly as
    received. An existing entry is never overwritten.
    """

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = Path(cache_dir)
        self.db_path = self.cache_dir / CACHE_DB_NAME
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(e) from e
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _execute(self, query: str, params: tuple = ()) -> list[sqlite3.Row]:
        try:
            conn = self._get_connection()
            try:
                with conn:
                    return conn.execute(query, params).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(e) from e

    def _init_db(self) -> None:
        """Initialize database schema."""
        self._execute("""
            CREATE TABLE IF NOT EXISTS responses (
                key BLOB PRIMARY KEY,
                value BLOB NOT NULL,
                fetched_at TEXT NOT NULL
            )
        """)

    def get(self, key: bytes) -> bytes | None:
        """Get the cached response for a key, or None on a miss."""
        rows = self._execute("SELECT value FROM responses WHERE key = ?", (key,))
        if rows:
            return bytes(rows[0]["value"])
        return None

    def contains_key(self, key: bytes) -> bool:
        rows = self._execute("SELECT 1 FROM responses WHERE key = ?", (key,))
        return bool(rows)

    def insert_if_absent(self, key: bytes, value: bytes) -> None:
        """Store a response unless the key is already cached."""
        self._execute(
            "INSERT OR IGNORE INTO responses (key, value, fetched_at) VALUES (?, ?, ?)",
            (key, value, datetime.now().isoformat()),
        )

    def keys(self) -> list[bytes]:
        """All cached keys, oldest first."""
        rows = self._execute("SELECT key FROM responses ORDER BY fetched_at, key")
        return [bytes(row["key"]) for row in rows]

    def get_cache_status(self) -> dict:
        """Get entry count, stored size and last write time of the cache."""
        rows = self._execute("""
            SELECT
                COUNT(*) as entry_count,
                COALESCE(SUM(LENGTH(value)), 0) as total_bytes,
                MAX(fetched_at) as last_fetched
            FROM responses
        """)
        row = rows[0]
        return {
            "db_path": str(self.db_path),
            "entry_count": row["entry_count"],
            "total_bytes": row["total_bytes"],
            "last_fetched": row["last_fetched"],
        }
