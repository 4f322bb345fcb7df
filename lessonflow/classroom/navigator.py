"""
Navigator - Course outline and lesson position helpers.

Provides:
- Previous/next lesson lookup by order
- Lesson position ("Lesson 2 of 5")
- Sidebar outline grouped by module (or chapter title) with status
"""

from dataclasses import dataclass
from typing import Optional

from lessonflow.schemas import Lesson, LessonStatus, Module

from .access import AccessibilityEvaluator, find_lesson_index
from .progress import ProgressRepository


DEFAULT_CHAPTER_TITLE = "Lessons"

STATUS_INDICATORS = {
    LessonStatus.COMPLETED: "✓",
    LessonStatus.CURRENT: "→",
    LessonStatus.AVAILABLE: "○",
    LessonStatus.LOCKED: "◌",
}


@dataclass
class OutlineLesson:
    """Lesson with sidebar metadata."""
    lesson: Lesson
    status: LessonStatus

    @property
    def indicator(self) -> str:
        return STATUS_INDICATORS[self.status]


@dataclass
class OutlineSection:
    """Module or chapter with its lessons."""
    title: str
    module: Optional[Module]
    lessons: list[OutlineLesson]
    completed_count: int
    total_count: int


def group_lessons_by_chapter(lessons: list[Lesson]) -> dict[str, list[Lesson]]:
    """Group lessons by chapter title, in lesson order; untitled lessons go under "Lessons"."""
    groups: dict[str, list[Lesson]] = {}
    for lesson in sorted(lessons, key=lambda l: l.order):
        groups.setdefault(lesson.chapter_title or DEFAULT_CHAPTER_TITLE, []).append(lesson)
    return groups


def previous_lesson_id(lessons: list[Lesson], lesson_id: str) -> Optional[str]:
    idx = find_lesson_index(lessons, lesson_id)
    if idx <= 0:
        return None
    return lessons[idx - 1].id


def next_lesson_id(lessons: list[Lesson], lesson_id: str) -> Optional[str]:
    idx = find_lesson_index(lessons, lesson_id)
    if idx < 0 or idx + 1 >= len(lessons):
        return None
    return lessons[idx + 1].id


def lesson_position(lessons: list[Lesson], lesson_id: str) -> tuple[int, int]:
    """
    Get lesson position as (current, total).

    Returns (0, total) if lesson not found.
    """
    idx = find_lesson_index(lessons, lesson_id)
    return (idx + 1 if idx >= 0 else 0, len(lessons))


def build_course_outline(
    repository: ProgressRepository,
    evaluator: AccessibilityEvaluator,
    course_id: str,
    current_lesson_id: Optional[str] = None,
) -> list[OutlineSection]:
    """
    Build the sidebar outline for a course.

    Sections follow module order; lessons without a (known) module are
    grouped by chapter title after the modules. Each lesson carries its
    status for the current learner.
    """
    lessons = repository.lessons_for(course_id)
    modules = repository.modules_for(course_id)
    module_ids = {module.id for module in modules}

    def outline_section(title: str, module: Optional[Module], members: list[Lesson]) -> OutlineSection:
        items = [
            OutlineLesson(
                lesson=lesson,
                status=evaluator.lesson_status(course_id, lesson.id, current_lesson_id),
            )
            for lesson in members
        ]
        return OutlineSection(
            title=title,
            module=module,
            lessons=items,
            completed_count=sum(1 for item in items if item.status == LessonStatus.COMPLETED),
            total_count=len(items),
        )

    sections = []
    for module in modules:
        members = [lesson for lesson in lessons if lesson.module_id == module.id]
        sections.append(outline_section(module.title, module, members))

    loose = [lesson for lesson in lessons if lesson.module_id not in module_ids]
    for chapter, members in group_lessons_by_chapter(loose).items():
        sections.append(outline_section(chapter, None, members))

    return sections
