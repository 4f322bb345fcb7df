"""
LessonCatalog - Read-only access to authored course content.

Provides:
- The LessonCatalog protocol consumed by the engine
- InMemoryLessonCatalog for content already loaded in memory
- load_catalog() to read a catalog file (YAML or JSON)
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

import yaml
from pydantic import ValidationError

from lessonflow.errors import CatalogError
from lessonflow.schemas import DEFAULT_QUIZ_PASS_THRESHOLD, Lesson, Module


logger = logging.getLogger(__name__)


class LessonCatalog(Protocol):
    """Supplies lessons and modules per course. Order of results is not guaranteed."""

    def get_lessons_by_course(self, course_id: str) -> list[Lesson]:
        ...

    def get_modules_by_course(self, course_id: str) -> list[Module]:
        ...


class InMemoryLessonCatalog:
    """
    Catalog over lists of lessons and modules.

    Returns lessons in the order they were given; the engine re-sorts them.
    """

    def __init__(self, lessons: Optional[list[Lesson]] = None, modules: Optional[list[Module]] = None):
        self._lessons: list[Lesson] = list(lessons or [])
        self._modules: list[Module] = list(modules or [])

    def get_lessons_by_course(self, course_id: str) -> list[Lesson]:
        return [lesson for lesson in self._lessons if lesson.course_id == course_id]

    def get_modules_by_course(self, course_id: str) -> list[Module]:
        return [module for module in self._modules if module.course_id == course_id]

    def get_course_ids(self) -> list[str]:
        """Course IDs in first-seen order."""
        seen: dict[str, None] = {}
        for lesson in self._lessons:
            seen.setdefault(lesson.course_id, None)
        for module in self._modules:
            seen.setdefault(module.course_id, None)
        return list(seen)


def _apply_quiz_default(item: Any, default_threshold: float) -> Any:
    """Fill in the course-wide pass threshold for a quiz that sets none."""
    if not isinstance(item, dict) or not isinstance(item.get("quiz"), dict):
        return item
    if item["quiz"].get("pass_threshold") is not None:
        return item
    return {**item, "quiz": {**item["quiz"], "pass_threshold": default_threshold}}


def load_catalog(
    path: str | Path,
    default_quiz_pass_threshold: float = DEFAULT_QUIZ_PASS_THRESHOLD,
) -> InMemoryLessonCatalog:
    """
    Load a catalog file.

    The file holds a mapping with optional `modules` and `lessons` lists,
    each item matching the Module / Lesson schema.

    Args:
        path: Path to a .yaml, .yml or .json file
        default_quiz_pass_threshold: Pass threshold for quizzes that omit one

    Returns:
        InMemoryLessonCatalog with the file's content

    Raises:
        CatalogError: If the file is missing, unparsable, or invalid
    """
    file_path = Path(path)
    if not file_path.exists():
        raise CatalogError(f"Catalog file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        try:
            if file_path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise CatalogError(f"Could not parse catalog {file_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise CatalogError(f"Catalog must contain a mapping: {file_path}")

    try:
        modules = [Module.model_validate(item) for item in data.get("modules") or []]
        lessons = [
            Lesson.model_validate(_apply_quiz_default(item, default_quiz_pass_threshold))
            for item in data.get("lessons") or []
        ]
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog entry in {file_path}: {e}") from e

    logger.info(f"Loaded catalog {file_path}: {len(lessons)} lessons, {len(modules)} modules")
    return InMemoryLessonCatalog(lessons, modules)
