"""
MemoryStore - Process-local KeyValueStore.

Used for tests and for sessions that do not need progress to survive a
restart. Values are kept as JSON text so reads never alias writes.
"""

import json
import logging
from typing import Any, Optional

from lessonflow.errors import StorageError

from .base import KeyValueStore


logger = logging.getLogger(__name__)


class MemoryStore(KeyValueStore):
    """Dictionary-backed store."""

    def __init__(self):
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for key {key!r} is not JSON serialisable: {e}") from e

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def has(self, key: str) -> bool:
        return key in self._data

    async def clear(self) -> None:
        logger.debug("Clearing %d keys from memory store", len(self._data))
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)
