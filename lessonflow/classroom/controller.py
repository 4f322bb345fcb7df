"""
ProgressionController - Drive one lesson-viewing session.

Holds the session-local state:
- page_cursor: index into the current lesson's pages
- quiz_page_unlocked: forward gate on quiz pages

Combines ProgressRepository (learner state), AccessibilityEvaluator (rules)
and the page sequencer. Quiz results and completions are persisted through
the repository; page moves never wait on storage.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from lessonflow.schemas import (
    BlockPage,
    Lesson,
    NavPage,
    Page,
    QuizPage,
    StreamPage,
)
from lessonflow.viewer.quiz import QuizResult, score_quiz

from .access import AccessibilityEvaluator
from .navigator import next_lesson_id
from .progress import ProgressRepository
from .sequencer import build_pages


logger = logging.getLogger(__name__)


class AdvanceOutcome(str, Enum):
    BLOCKED = "blocked"                  # quiz not passed yet
    NEXT_LESSON = "next_lesson"          # moved on to the next lesson
    COURSE_COMPLETE = "course_complete"  # completed the last lesson


@dataclass
class AdvanceResult:
    outcome: AdvanceOutcome
    next_lesson_id: Optional[str] = None


class ProgressionController:
    """
    Session-scoped navigation through one course.

    Typical use:
        controller = ProgressionController(repository, "course-1")
        await controller.enter_lesson(lesson_id)
        controller.go_next()
        await controller.submit_quiz([0, 2, 1])
        await controller.complete_and_advance()
    """

    def __init__(
        self,
        repository: ProgressRepository,
        course_id: str,
        evaluator: Optional[AccessibilityEvaluator] = None,
    ):
        self.repository = repository
        self.course_id = course_id
        self.evaluator = evaluator or AccessibilityEvaluator(repository)
        self.lesson: Optional[Lesson] = None
        self.pages: list[Page] = []
        self.page_cursor = 0
        self.quiz_page_unlocked = False
        self.last_result: Optional[QuizResult] = None

    # -------------------------------------------------------------------------
    # Session state
    # -------------------------------------------------------------------------

    @property
    def current_page(self) -> Optional[Page]:
        if not self.pages:
            return None
        return self.pages[self.page_cursor]

    @property
    def is_last_page(self) -> bool:
        return self.page_cursor >= len(self.pages) - 1

    @property
    def can_go_next(self) -> bool:
        if not self.pages or self.is_last_page:
            return False
        if isinstance(self.current_page, QuizPage) and not self.quiz_page_unlocked:
            return False
        return True

    @property
    def can_go_back(self) -> bool:
        return self.page_cursor > 0

    def _quiz_already_passed(self) -> bool:
        if self.lesson is None or not self.lesson.has_quiz:
            return False
        progress = self.repository.get(self.course_id)
        return progress is not None and progress.quiz_passed(self.lesson.id)

    def _gate_for_current_page(self) -> bool:
        """Gate state on arriving at a page: open only on an already-passed quiz."""
        page = self.current_page
        if isinstance(page, QuizPage):
            return self._quiz_already_passed()
        if isinstance(page, (StreamPage, BlockPage, NavPage)) or page is None:
            return False
        raise TypeError(f"Unknown page type: {type(page).__name__}")

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    async def enter_lesson(self, lesson_id: str) -> bool:
        """
        Start viewing a lesson.

        Returns:
            False if the lesson is unknown or still locked (caller redirects)
        """
        await self.repository.get_or_create(self.course_id)

        lesson = self.repository.get_lesson(self.course_id, lesson_id)
        if lesson is None:
            logger.info(f"Lesson {lesson_id} not found in {self.course_id}")
            return False
        if not self.evaluator.is_lesson_accessible(self.course_id, lesson_id):
            logger.info(f"Lesson {lesson_id} is locked for {self.repository.user_id}")
            return False

        self.lesson = lesson
        self.pages = build_pages(lesson)
        self.page_cursor = 0
        self.last_result = None
        # A learner revisiting a passed lesson is never re-blocked
        self.quiz_page_unlocked = self._quiz_already_passed()
        return True

    def go_next(self) -> bool:
        """Move forward one page. Returns False when the move is not allowed."""
        if not self.can_go_next:
            return False
        self.page_cursor += 1
        self.quiz_page_unlocked = self._gate_for_current_page()
        return True

    def go_back(self) -> bool:
        """Move back one page; never gated."""
        if not self.can_go_back:
            return False
        self.page_cursor -= 1
        self.quiz_page_unlocked = self._gate_for_current_page()
        return True

    # -------------------------------------------------------------------------
    # Quiz and completion
    # -------------------------------------------------------------------------

    async def submit_quiz(self, answers: list[Optional[int]]) -> Optional[QuizResult]:
        """
        Score and record a quiz attempt for the current lesson.

        Retakes are always accepted; each one replaces the previous attempt.

        Returns:
            QuizResult, or None if no lesson with a quiz is being viewed
        """
        if self.lesson is None or not self.lesson.has_quiz:
            return None

        result = score_quiz(self.lesson.quiz, answers)
        self.last_result = result
        self.quiz_page_unlocked = result.passed

        await self.repository.record_quiz_attempt(
            self.course_id,
            self.lesson.id,
            result.score,
            result.passed,
            result.answers,
        )
        return result

    def can_complete(self) -> bool:
        if self.lesson is None:
            return False
        return self.evaluator.can_complete_lesson(self.lesson, self.course_id)

    async def complete_and_advance(self) -> AdvanceResult:
        """
        Complete the current lesson and open the next one.

        Returns:
            BLOCKED if the lesson's quiz is not passed, NEXT_LESSON with the
            new lesson ID, or COURSE_COMPLETE after the last lesson
        """
        if self.lesson is None or not self.can_complete():
            return AdvanceResult(AdvanceOutcome.BLOCKED)

        lesson_id = self.lesson.id
        await self.repository.complete_lesson(self.course_id, lesson_id)

        next_id = next_lesson_id(self.repository.lessons_for(self.course_id), lesson_id)
        if next_id is None:
            logger.info(f"Course {self.course_id} complete for {self.repository.user_id}")
            return AdvanceResult(AdvanceOutcome.COURSE_COMPLETE)

        await self.enter_lesson(next_id)
        return AdvanceResult(AdvanceOutcome.NEXT_LESSON, next_id)
