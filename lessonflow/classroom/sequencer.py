"""
PageSequencer - Flatten one lesson into navigable pages.

Page order:
1. A stream page for the legacy video reference, only when no content
   block already carries a real video
2. One block page per content block, by block order, skipping empty video
   placeholders; a quiz with an explicit order is placed before the first
   block whose order is >= the quiz order
3. The quiz page, if the quiz was not placed among the blocks
4. One terminal nav page

Output depends only on the lesson passed in.
"""

from lessonflow.schemas import (
    BlockPage,
    Lesson,
    NavPage,
    Page,
    QuizPage,
    StreamPage,
)


def has_video_block(lesson: Lesson) -> bool:
    """Check if any content block is a video with a real source."""
    return any(
        block.type == "video" and not block.is_placeholder
        for block in lesson.content_blocks
    )


def build_pages(lesson: Lesson) -> list[Page]:
    """
    Build the page list for a lesson.

    Args:
        lesson: Lesson with content blocks and optional quiz

    Returns:
        Ordered pages, always ending with exactly one NavPage
    """
    pages: list[Page] = []
    blocks = lesson.sorted_blocks()
    quiz = lesson.quiz

    if lesson.legacy_video_ref and not has_video_block(lesson):
        pages.append(StreamPage(video_ref=lesson.legacy_video_ref))

    quiz_inserted = False
    for block in blocks:
        if block.is_placeholder:
            continue
        if (
            quiz is not None
            and quiz.order is not None
            and not quiz_inserted
            and block.order >= quiz.order
        ):
            pages.append(QuizPage(quiz=quiz))
            quiz_inserted = True
        pages.append(BlockPage(block=block))

    if quiz is not None and not quiz_inserted:
        pages.append(QuizPage(quiz=quiz))

    pages.append(NavPage())
    return pages


def page_label(page: Page) -> str:
    """Short label for progress dots and page headers."""
    if isinstance(page, StreamPage):
        return "Video"
    if isinstance(page, BlockPage):
        return page.block.title or page.block.type.capitalize()
    if isinstance(page, QuizPage):
        return page.quiz.title or "Knowledge Check"
    if isinstance(page, NavPage):
        return "Lesson Complete"
    raise TypeError(f"Unknown page type: {type(page).__name__}")


def quiz_page_index(pages: list[Page]) -> int:
    """Index of the quiz page, -1 if the lesson has none."""
    for idx, page in enumerate(pages):
        if isinstance(page, QuizPage):
            return idx
    return -1
