"""
lessonflow Schemas - Pydantic models for the course progression engine.

This module exports all schema classes for:
- Catalog: modules, lessons, content blocks, quizzes
- Progress: quiz attempts, course progress, lesson status
- Pages: the tagged union produced by the page sequencer
"""

# Catalog schemas
from .catalog import (
    DEFAULT_QUIZ_PASS_THRESHOLD,
    ContentBlockType,
    Module,
    ContentBlock,
    QuizQuestion,
    Quiz,
    Lesson,
)

# Progress schemas
from .progress import (
    LessonStatus,
    QuizAttempt,
    CourseProgress,
)

# Page schemas
from .pages import (
    StreamPage,
    BlockPage,
    QuizPage,
    NavPage,
    Page,
    PAGE_LIST_ADAPTER,
)

__all__ = [
    # Catalog
    'DEFAULT_QUIZ_PASS_THRESHOLD',
    'ContentBlockType',
    'Module',
    'ContentBlock',
    'QuizQuestion',
    'Quiz',
    'Lesson',
    # Progress
    'LessonStatus',
    'QuizAttempt',
    'CourseProgress',
    # Pages
    'StreamPage',
    'BlockPage',
    'QuizPage',
    'NavPage',
    'Page',
    'PAGE_LIST_ADAPTER',
]
