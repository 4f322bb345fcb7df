"""
SqliteStore - KeyValueStore persisted in ~/.lessonflow/progress.db.

Progress is stored separately from course content so that:
- Content can be re-authored without losing progress
- Progress is learner-specific, content is shared

Each call opens its own connection and runs in a worker thread, so the
event loop is never blocked on disk I/O.
"""

import asyncio
import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from lessonflow.errors import StorageError

from .base import KeyValueStore


DEFAULT_PROGRESS_DIR = Path.home() / ".lessonflow"
DEFAULT_PROGRESS_DB = DEFAULT_PROGRESS_DIR / "progress.db"


class SqliteStore(KeyValueStore):
    """
    Key-value store backed by a single SQLite table.

    Values are stored as JSON text; `updated_at` records the last write.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize store.

        Args:
            db_path: Path to progress.db (default: ~/.lessonflow/progress.db)
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_PROGRESS_DB
        self._ensure_database()

    def _ensure_database(self):
        """Create database and table if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );
            """)
            conn.commit()
        finally:
            conn.close()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a new database connection."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    # -------------------------------------------------------------------------
    # Blocking operations (run in a worker thread)
    # -------------------------------------------------------------------------

    def _get(self, key: str) -> Optional[Any]:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            )
            row = cursor.fetchone()
            return json.loads(row["value"]) if row else None
        finally:
            conn.close()

    def _set(self, key: str, value: Any):
        payload = json.dumps(value)
        conn = self._get_connection()
        try:
            now = datetime.now().isoformat()
            conn.execute(
                """INSERT INTO kv_store (key, value, updated_at)
                   VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                     value = excluded.value,
                     updated_at = excluded.updated_at""",
                (key, payload, now)
            )
            conn.commit()
        finally:
            conn.close()

    def _remove(self, key: str):
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    def _has(self, key: str) -> bool:
        conn = self._get_connection()
        try:
            cursor = conn.execute(
                "SELECT 1 FROM kv_store WHERE key = ?", (key,)
            )
            return cursor.fetchone() is not None
        finally:
            conn.close()

    def _clear(self):
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM kv_store")
            conn.commit()
        finally:
            conn.close()

    async def _run(self, func, *args):
        try:
            return await asyncio.to_thread(func, *args)
        except (sqlite3.Error, TypeError, ValueError) as e:
            raise StorageError(f"SQLite store {self.db_path} failed: {e}") from e

    # -------------------------------------------------------------------------
    # KeyValueStore
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> Optional[Any]:
        return await self._run(self._get, key)

    async def set(self, key: str, value: Any) -> None:
        await self._run(self._set, key, value)

    async def remove(self, key: str) -> None:
        await self._run(self._remove, key)

    async def has(self, key: str) -> bool:
        return await self._run(self._has, key)

    async def clear(self) -> None:
        await self._run(self._clear)
