"""Key-value persistence for session state that outlives the process."""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

import orjson
import structlog

from ..config.defaults import StorageParams
from ..errors import PersistenceError


class KeyValueStore:
    """SQLite-backed store of JSON values under string keys."""

    def __init__(self, db_path: Union[str, Path] = "coinscope.db"):
        self.db_path = Path(db_path)
        self.logger = structlog.get_logger("coinscope.store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection("init") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def _get_connection(self, operation: str):
        """Get database connection, translating sqlite errors."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", operation=operation, db_path=str(self.db_path), error=str(e))
            raise PersistenceError(f"Database error: {e}", operation=operation, target=str(self.db_path))
        finally:
            if conn:
                conn.close()

    def get_list(self, key: str) -> list[str]:
        """
        Read an ordered list of strings.

        Missing keys read as an empty list; so do values that are not a list
        of strings, with a warning.
        """
        with self._get_connection("read") as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()

        if row is None:
            return []

        try:
            value = orjson.loads(row[0])
        except orjson.JSONDecodeError:
            self.logger.warning("Ignoring undecodable stored value", key=key)
            return []

        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            self.logger.warning("Ignoring stored value that is not a list of strings", key=key)
            return []

        return value

    def set_list(self, key: str, values: list[str]) -> None:
        """Replace the list stored under key."""
        with self._lock:
            with self._get_connection("write") as conn:
                conn.execute("""
                    INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, ?)
                """, (
                    key,
                    orjson.dumps(list(values)).decode("utf-8"),
                    datetime.now(timezone.utc).isoformat(),
                ))
                conn.commit()

        self.logger.debug("Stored list", key=key, count=len(values))


class WatchlistStore:
    """Watchlist ids persisted under one key, read at startup and written on every change."""

    def __init__(self, store: KeyValueStore, key: str = "watchlistIds"):
        self.store = store
        self.key = key

    @classmethod
    def from_config(cls, params: Optional[StorageParams] = None) -> "WatchlistStore":
        """Open the configured database and key."""
        params = params or StorageParams()
        return cls(KeyValueStore(params.db_path), key=params.watchlist_key)

    def load(self) -> list[str]:
        # Duplicates can only come from hand-edited storage; keep first occurrences
        return list(dict.fromkeys(self.store.get_list(self.key)))

    def save(self, ids: list[str]) -> None:
        self.store.set_list(self.key, list(ids))
