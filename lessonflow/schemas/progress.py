"""
Progress tracking schemas for lessonflow.

Defines Pydantic models for learner progress including:
- Quiz attempts (latest only, per lesson)
- Per-course progress record
- Lesson status for sidebar display
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class LessonStatus(str, Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    AVAILABLE = "available"
    LOCKED = "locked"


class QuizAttempt(BaseModel):
    lesson_id: str
    score: float = Field(..., ge=0, le=100)
    passed: bool
    attempted_at: datetime
    answers: list[int] = []  # selected option index per question, -1 = unanswered


class CourseProgress(BaseModel):
    """
    Progress of one learner through one course.

    Exactly one record exists per (user_id, course_id). completed_lesson_ids
    is a set; it is serialised as a list.
    """
    user_id: str
    course_id: str
    completed_lesson_ids: set[str] = set()
    quiz_scores: dict[str, QuizAttempt] = {}  # lesson_id -> latest attempt
    current_lesson_id: Optional[str] = None
    started_at: datetime
    last_accessed_at: datetime

    def is_completed(self, lesson_id: str) -> bool:
        return lesson_id in self.completed_lesson_ids

    def quiz_passed(self, lesson_id: str) -> bool:
        attempt = self.quiz_scores.get(lesson_id)
        return attempt is not None and attempt.passed is True
