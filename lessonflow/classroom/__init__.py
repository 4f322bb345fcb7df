"""
lessonflow Classroom - Runtime components for gating and sequencing lessons.

This module provides:
- LessonCatalog: read-only lessons and modules per course
- ProgressRepository: learner progress persisted in a KeyValueStore
- AccessibilityEvaluator: which lessons are open and completable
- build_pages: flatten a lesson into navigable pages
- ProgressionController: one lesson-viewing session
- build_course_outline: sidebar outline with lesson status
"""

from .catalog import (
    LessonCatalog,
    InMemoryLessonCatalog,
    load_catalog,
)

from .access import (
    AccessibilityEvaluator,
    LockReason,
    find_lesson_index,
    is_accessible,
    can_complete,
)

from .progress import ProgressRepository

from .sequencer import (
    build_pages,
    has_video_block,
    page_label,
    quiz_page_index,
)

from .controller import (
    ProgressionController,
    AdvanceOutcome,
    AdvanceResult,
)

from .navigator import (
    OutlineLesson,
    OutlineSection,
    STATUS_INDICATORS,
    group_lessons_by_chapter,
    previous_lesson_id,
    next_lesson_id,
    lesson_position,
    build_course_outline,
)

__all__ = [
    # Catalog
    "LessonCatalog",
    "InMemoryLessonCatalog",
    "load_catalog",
    # Access
    "AccessibilityEvaluator",
    "LockReason",
    "find_lesson_index",
    "is_accessible",
    "can_complete",
    # Progress
    "ProgressRepository",
    # Sequencer
    "build_pages",
    "has_video_block",
    "page_label",
    "quiz_page_index",
    # Controller
    "ProgressionController",
    "AdvanceOutcome",
    "AdvanceResult",
    # Navigator
    "OutlineLesson",
    "OutlineSection",
    "STATUS_INDICATORS",
    "group_lessons_by_chapter",
    "previous_lesson_id",
    "next_lesson_id",
    "lesson_position",
    "build_course_outline",
]
