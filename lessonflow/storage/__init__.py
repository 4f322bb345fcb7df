"""
lessonflow Storage - Asynchronous key-value adapters for durable progress.

This module provides:
- KeyValueStore: the abstract contract
- MemoryStore: process-local store
- SqliteStore: SQLite-backed store
- create_store: pick an adapter from Settings
"""

from .base import (
    KeyValueStore,
    COURSE_PROGRESS_KEY_PREFIX,
    course_progress_key,
)

from .memory import MemoryStore

from .sqlite import (
    SqliteStore,
    DEFAULT_PROGRESS_DIR,
    DEFAULT_PROGRESS_DB,
)


def create_store(settings) -> KeyValueStore:
    """Return the store adapter selected by `settings.storage`."""
    if settings.storage == "memory":
        return MemoryStore()
    return SqliteStore(settings.db_path)


__all__ = [
    "KeyValueStore",
    "COURSE_PROGRESS_KEY_PREFIX",
    "course_progress_key",
    "MemoryStore",
    "SqliteStore",
    "DEFAULT_PROGRESS_DIR",
    "DEFAULT_PROGRESS_DB",
    "create_store",
]
