"""
lessonflow Viewer - Rendering components for lesson pages.

This module provides:
- Content block and page rendering
- Quiz scoring and result review
"""

from .blocks import (
    resolve_video_embed,
    render_text_block,
    render_video,
    render_image,
    render_document,
    render_block,
    render_page,
)

from .quiz import (
    UNANSWERED,
    QuizResult,
    normalize_answers,
    score_quiz,
    get_quiz_css,
    render_quiz_header,
    render_question_review,
    render_quiz_result,
)

__all__ = [
    # Blocks
    "resolve_video_embed",
    "render_text_block",
    "render_video",
    "render_image",
    "render_document",
    "render_block",
    "render_page",
    # Quiz
    "UNANSWERED",
    "QuizResult",
    "normalize_answers",
    "score_quiz",
    "get_quiz_css",
    "render_quiz_header",
    "render_question_review",
    "render_quiz_result",
]
