"""
KeyValueStore - Asynchronous key-value contract used for durable progress.

Values are JSON-compatible Python objects (dicts, lists, str, numbers, bool,
None). Adapters serialise them on write and return fresh copies on read, so
callers never share mutable state with the backend.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


# Storage keys used across the engine
COURSE_PROGRESS_KEY_PREFIX = "course-progress"


def course_progress_key(user_id: str) -> str:
    """Key holding every course progress record of one learner."""
    return f"{COURSE_PROGRESS_KEY_PREFIX}:{user_id}"


class KeyValueStore(ABC):
    """Generic asynchronous key-value store."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""

    @abstractmethod
    async def has(self, key: str) -> bool:
        """Check whether a key exists."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every key."""
