"""
Pytest configuration and shared fixtures.

Provides a small course catalog, an in-memory store and a repository wired
to both.
"""

import pytest

from lessonflow.classroom import (
    AccessibilityEvaluator,
    InMemoryLessonCatalog,
    ProgressRepository,
    ProgressionController,
)
from lessonflow.schemas import ContentBlock, Lesson, Module, Quiz, QuizQuestion
from lessonflow.storage import MemoryStore


COURSE_ID = "course-1"


def make_quiz(lesson_id: str, threshold: float = 70, order=None, num_questions: int = 5) -> Quiz:
    """Quiz whose correct answer is always option 0."""
    return Quiz(
        id=f"quiz-{lesson_id}",
        lesson_id=lesson_id,
        pass_threshold=threshold,
        order=order,
        questions=[
            QuizQuestion(
                id=f"{lesson_id}-q{i}",
                text=f"Question {i}",
                options=["right", "wrong"],
                correct_option_index=0,
            )
            for i in range(num_questions)
        ],
    )


def make_lesson(lesson_id: str, order: int, course_id: str = COURSE_ID, **kwargs) -> Lesson:
    return Lesson(id=lesson_id, course_id=course_id, title=lesson_id.title(), order=order, **kwargs)


def text_block(block_id: str, order: int, content: str = "Some text") -> ContentBlock:
    return ContentBlock(id=block_id, type="text", content=content, order=order)


@pytest.fixture
def lessons():
    """Three-lesson course; lesson 2 has a quiz passed at 70%. Given out of order."""
    return [
        make_lesson("lesson-3", 3, content_blocks=[text_block("b3", 1)]),
        make_lesson("lesson-1", 1, content_blocks=[text_block("b1", 1)]),
        make_lesson(
            "lesson-2",
            2,
            content_blocks=[text_block("b2a", 1), text_block("b2b", 2)],
            quiz=make_quiz("lesson-2", threshold=70),
        ),
    ]


@pytest.fixture
def modules():
    return [
        Module(id="mod-b", course_id=COURSE_ID, title="Advanced", order=2),
        Module(id="mod-a", course_id=COURSE_ID, title="Basics", order=1),
    ]


@pytest.fixture
def catalog(lessons, modules):
    return InMemoryLessonCatalog(lessons, modules)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def repository(store, catalog):
    return ProgressRepository(store, catalog, user_id="learner-1")


@pytest.fixture
def evaluator(repository):
    return AccessibilityEvaluator(repository)


@pytest.fixture
def controller(repository, evaluator):
    return ProgressionController(repository, COURSE_ID, evaluator)
