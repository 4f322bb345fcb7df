"""
Lesson access rules.

A course's lessons form a single chain ordered by `order`:
- The first lesson is always open
- Every other lesson opens once the lesson before it is completed and,
  if that lesson has a quiz, the quiz is passed

Completing a lesson only requires passing its quiz (if any); it does not
require viewing every content block.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

from lessonflow.schemas import CourseProgress, Lesson, LessonStatus

if TYPE_CHECKING:
    from .progress import ProgressRepository


class LockReason(str, Enum):
    """Why a lesson is locked, for the locked-lesson gate."""
    PREVIOUS_NOT_COMPLETED = "previous_not_completed"
    PREVIOUS_QUIZ_NOT_PASSED = "previous_quiz_not_passed"


def find_lesson_index(lessons: list[Lesson], lesson_id: str) -> int:
    """Position of a lesson in an ordered list, -1 if absent."""
    for idx, lesson in enumerate(lessons):
        if lesson.id == lesson_id:
            return idx
    return -1


def is_accessible(lessons: list[Lesson], progress: Optional[CourseProgress], lesson_id: str) -> bool:
    """
    Check whether a lesson may be opened.

    Args:
        lessons: Course lessons sorted by order
        progress: Learner's record for the course, if any
        lesson_id: Lesson to check

    Returns:
        False for unknown lessons; never raises
    """
    idx = find_lesson_index(lessons, lesson_id)
    if idx < 0:
        return False
    if idx == 0:
        return True
    if progress is None:
        return False

    previous = lessons[idx - 1]
    if not progress.is_completed(previous.id):
        return False
    if previous.quiz is not None and not progress.quiz_passed(previous.id):
        return False
    return True


def can_complete(lesson: Lesson, progress: Optional[CourseProgress]) -> bool:
    """A quizzed lesson needs a passing attempt; any other lesson can always be completed."""
    if lesson.quiz is None:
        return True
    return progress is not None and progress.quiz_passed(lesson.id)


class AccessibilityEvaluator:
    """
    Answer access questions for the UI using a ProgressRepository.

    Unknown courses and lessons answer False (or None) instead of raising,
    so callers can redirect.
    """

    def __init__(self, repository: "ProgressRepository"):
        self.repository = repository

    def is_lesson_accessible(self, course_id: str, lesson_id: str) -> bool:
        lessons = self.repository.lessons_for(course_id)
        return is_accessible(lessons, self.repository.get(course_id), lesson_id)

    def can_complete_lesson(self, lesson: Lesson, course_id: str) -> bool:
        return can_complete(lesson, self.repository.get(course_id))

    def lesson_status(
        self,
        course_id: str,
        lesson_id: str,
        current_lesson_id: Optional[str] = None,
    ) -> Optional[LessonStatus]:
        """
        Get sidebar status for a lesson.

        Returns:
            COMPLETED, CURRENT (the lesson being viewed), AVAILABLE or LOCKED;
            None if the lesson is not in the course
        """
        lessons = self.repository.lessons_for(course_id)
        if find_lesson_index(lessons, lesson_id) < 0:
            return None

        progress = self.repository.get(course_id)
        if progress is not None and progress.is_completed(lesson_id):
            return LessonStatus.COMPLETED
        if not is_accessible(lessons, progress, lesson_id):
            return LessonStatus.LOCKED
        if lesson_id == current_lesson_id:
            return LessonStatus.CURRENT
        return LessonStatus.AVAILABLE

    def locked_reason(self, course_id: str, lesson_id: str) -> Optional[tuple[Lesson, LockReason]]:
        """
        Explain a locked lesson.

        Returns:
            (previous lesson, reason) if the lesson is locked, else None
        """
        lessons = self.repository.lessons_for(course_id)
        idx = find_lesson_index(lessons, lesson_id)
        if idx <= 0:
            return None

        progress = self.repository.get(course_id)
        if is_accessible(lessons, progress, lesson_id):
            return None

        previous = lessons[idx - 1]
        if previous.quiz is not None and (progress is None or not progress.quiz_passed(previous.id)):
            return previous, LockReason.PREVIOUS_QUIZ_NOT_PASSED
        return previous, LockReason.PREVIOUS_NOT_COMPLETED
