"""Exception types raised by lessonflow."""


class LessonflowError(Exception):
    """Base class for all lessonflow errors."""


class CatalogError(LessonflowError):
    """Catalog file missing, unreadable, or not matching the lesson schema."""


class StorageError(LessonflowError):
    """A key-value store backend failed to read or write."""


class ConfigError(LessonflowError):
    """Invalid settings file or environment override."""
