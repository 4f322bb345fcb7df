"""
Course catalog schemas for lessonflow.

Defines Pydantic models for authored course content:
- Modules (sidebar grouping)
- Lessons with ordered content blocks
- Quizzes and multiple-choice questions
"""

from pydantic import BaseModel, Field
from typing import Optional, Literal


# Default quiz pass threshold (percentage) when a course sets none
DEFAULT_QUIZ_PASS_THRESHOLD = 70


class Module(BaseModel):
    """Named group of lessons within a course. Display only, never gates."""
    id: str
    course_id: str
    title: str
    order: int


# -----------------------------------------------------------------------------
# Content blocks
# -----------------------------------------------------------------------------

ContentBlockType = Literal["video", "text", "image", "document"]


class ContentBlock(BaseModel):
    id: str
    type: ContentBlockType
    content: str = ""  # URL for media, markdown for text
    order: int
    title: Optional[str] = None
    alt_text: Optional[str] = None

    @property
    def is_placeholder(self) -> bool:
        """Video block that was added but never given a source."""
        return self.type == "video" and not self.content.strip()


# -----------------------------------------------------------------------------
# Quiz
# -----------------------------------------------------------------------------

class QuizQuestion(BaseModel):
    id: str
    text: str
    options: list[str]
    correct_option_index: int


class Quiz(BaseModel):
    id: str
    lesson_id: str
    title: Optional[str] = None
    questions: list[QuizQuestion] = []
    pass_threshold: float = Field(DEFAULT_QUIZ_PASS_THRESHOLD, ge=0, le=100)
    order: Optional[int] = None  # position among content blocks; None = after all


# -----------------------------------------------------------------------------
# Lesson
# -----------------------------------------------------------------------------

class Lesson(BaseModel):
    id: str
    course_id: str
    module_id: Optional[str] = None
    title: str
    order: int
    chapter_title: Optional[str] = None
    content_blocks: list[ContentBlock] = []
    quiz: Optional[Quiz] = None
    legacy_video_ref: Optional[str] = None  # single video stored outside content_blocks

    @property
    def has_quiz(self) -> bool:
        return self.quiz is not None

    def sorted_blocks(self) -> list[ContentBlock]:
        """Content blocks in ascending order (stable for equal orders)."""
        return sorted(self.content_blocks, key=lambda b: b.order)
