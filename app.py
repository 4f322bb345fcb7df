"""
lessonflow - Lesson Player

Streamlit application that drives a learner through a course: page by page,
with quiz gating and lesson completion.

Usage:
    LESSONFLOW_CATALOG=data/catalog.yaml streamlit run app.py
"""

import asyncio

import streamlit as st

from lessonflow.classroom import (
    AccessibilityEvaluator,
    AdvanceOutcome,
    LockReason,
    ProgressRepository,
    ProgressionController,
    build_course_outline,
    lesson_position,
    load_catalog,
    next_lesson_id,
    page_label,
    previous_lesson_id,
)
from lessonflow.config import load_settings, setup_logging
from lessonflow.errors import CatalogError, ConfigError
from lessonflow.schemas import LessonStatus, NavPage, QuizPage
from lessonflow.storage import create_store
from lessonflow.viewer import (
    get_quiz_css,
    render_page,
    render_quiz_result,
)

st.set_page_config(
    page_title="lessonflow",
    page_icon="📘",
    layout="wide",
    initial_sidebar_state="expanded",
)


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "settings" not in st.session_state:
        try:
            st.session_state.settings = load_settings()
        except ConfigError as e:
            st.session_state.settings = None
            st.session_state.startup_error = str(e)
            return
        setup_logging(st.session_state.settings.log_level)

    settings = st.session_state.settings
    if settings is None:
        return

    if "catalog" not in st.session_state:
        st.session_state.catalog = None
        if settings.catalog_path:
            try:
                st.session_state.catalog = load_catalog(
                    settings.catalog_path,
                    settings.course_controls.default_quiz_pass_threshold,
                )
            except CatalogError as e:
                st.session_state.startup_error = str(e)

    if "repository" not in st.session_state and st.session_state.catalog:
        repository = ProgressRepository(
            create_store(settings),
            st.session_state.catalog,
            user_id=settings.user_id,
        )
        asyncio.run(repository.load())
        st.session_state.repository = repository
        st.session_state.evaluator = AccessibilityEvaluator(repository)

    if "course_id" not in st.session_state and st.session_state.catalog:
        course_ids = st.session_state.catalog.get_course_ids()
        st.session_state.course_id = course_ids[0] if course_ids else None

    if "controller" not in st.session_state:
        st.session_state.controller = None


def open_course(course_id: str):
    """Create a controller for the course and land on the next available lesson."""
    repository = st.session_state.repository
    controller = ProgressionController(repository, course_id, st.session_state.evaluator)
    asyncio.run(repository.get_or_create(course_id))

    lesson = repository.get_next_available_lesson(course_id)
    if lesson:
        asyncio.run(controller.enter_lesson(lesson.id))
    st.session_state.course_id = course_id
    st.session_state.controller = controller
    st.session_state.locked_lesson_id = None


def select_lesson(lesson_id: str):
    """Open a lesson from the sidebar; remember it if it is still locked."""
    opened = asyncio.run(st.session_state.controller.enter_lesson(lesson_id))
    st.session_state.locked_lesson_id = None if opened else lesson_id
    st.rerun()


# -----------------------------------------------------------------------------
# Sidebar: Course Outline
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with course outline and progress."""
    st.sidebar.title("📘 lessonflow")

    repository = st.session_state.repository
    controller = st.session_state.controller
    course_id = st.session_state.course_id

    course_ids = st.session_state.catalog.get_course_ids()
    selected = st.sidebar.selectbox("Course", course_ids, index=course_ids.index(course_id))
    if selected != course_id or controller is None:
        open_course(selected)
        st.rerun()

    percent = repository.get_course_completion_percent(course_id)
    st.sidebar.markdown(f"**Progress:** {percent}% complete")
    st.sidebar.progress(percent / 100)
    st.sidebar.divider()

    current_id = controller.lesson.id if controller.lesson else None
    outline = build_course_outline(repository, st.session_state.evaluator, course_id, current_id)

    for section in outline:
        header = f"**{section.title}** ({section.completed_count}/{section.total_count})"
        with st.sidebar.expander(header, expanded=True):
            for item in section.lessons:
                col1, col2 = st.columns([1, 9])
                with col1:
                    st.markdown(item.indicator)
                with col2:
                    if st.button(
                        item.lesson.title,
                        key=f"lesson_{item.lesson.id}",
                        disabled=item.status == LessonStatus.LOCKED,
                        use_container_width=True,
                    ):
                        select_lesson(item.lesson.id)

    if st.sidebar.button("Reset course progress"):
        asyncio.run(repository.reset_course_progress(course_id))
        open_course(course_id)
        st.rerun()


# -----------------------------------------------------------------------------
# Main Content: Lesson View
# -----------------------------------------------------------------------------

def render_locked_gate(lesson_id: str):
    """Explain why a lesson cannot be opened yet."""
    reason = st.session_state.evaluator.locked_reason(st.session_state.course_id, lesson_id)
    if not reason:
        st.info("Select a lesson from the sidebar to begin.")
        return

    previous, why = reason
    if why == LockReason.PREVIOUS_QUIZ_NOT_PASSED:
        st.warning(f"Pass the quiz in **{previous.title}** to unlock this lesson.")
    else:
        st.warning(f"Complete **{previous.title}** to unlock this lesson.")


def render_lesson_bar(lesson_id: str):
    """Render previous/next lesson buttons around the lesson position."""
    evaluator = st.session_state.evaluator
    course_id = st.session_state.course_id
    lessons = st.session_state.repository.lessons_for(course_id)
    pos, total = lesson_position(lessons, lesson_id)

    prev_id = previous_lesson_id(lessons, lesson_id)
    next_id = next_lesson_id(lessons, lesson_id)

    col1, col2, col3 = st.columns([1, 2, 1])

    with col1:
        if prev_id and evaluator.is_lesson_accessible(course_id, prev_id):
            if st.button("← Previous lesson", use_container_width=True):
                select_lesson(prev_id)

    with col2:
        st.markdown(f"<center>Lesson {pos} of {total}</center>", unsafe_allow_html=True)

    with col3:
        if next_id and evaluator.is_lesson_accessible(course_id, next_id):
            if st.button("Next lesson →", use_container_width=True):
                select_lesson(next_id)

    st.divider()


def render_lesson_view():
    """Render the current page of the current lesson."""
    controller = st.session_state.controller
    locked_id = st.session_state.get("locked_lesson_id")
    if locked_id:
        render_locked_gate(locked_id)
        return

    lesson = controller.lesson
    if lesson is None:
        st.info("Select a lesson from the sidebar to begin.")
        return

    render_lesson_bar(lesson.id)
    st.title(lesson.title)

    page = controller.current_page
    st.caption(
        f"Page {controller.page_cursor + 1} of {len(controller.pages)} · {page_label(page)}"
    )
    st.markdown(render_page(page), unsafe_allow_html=True)

    if isinstance(page, QuizPage):
        render_quiz_section(page)
    elif isinstance(page, NavPage):
        render_completion_section()

    render_page_navigation()


def render_quiz_section(page: QuizPage):
    """Render the quiz form, or the latest result with optional retake."""
    controller = st.session_state.controller
    controls = st.session_state.settings.course_controls
    quiz = page.quiz
    progress = st.session_state.repository.get(st.session_state.course_id)
    attempt = progress.quiz_scores.get(controller.lesson.id) if progress else None
    retaking = st.session_state.get("retaking_quiz") == quiz.id

    st.markdown(get_quiz_css(), unsafe_allow_html=True)

    if attempt and not retaking:
        st.markdown(
            render_quiz_result(quiz, attempt, controls.show_correct_answers_after_quiz),
            unsafe_allow_html=True,
        )
        if not attempt.passed and controls.allow_retakes:
            if st.button("Try Again"):
                st.session_state.retaking_quiz = quiz.id
                st.rerun()
        return

    with st.form(key=f"quiz_{quiz.id}"):
        answers = []
        for idx, question in enumerate(quiz.questions):
            choice = st.radio(
                f"{idx + 1}. {question.text}",
                list(range(len(question.options))),
                format_func=lambda i, q=question: q.options[i],
                index=None,
                key=f"q_{quiz.id}_{question.id}",
            )
            answers.append(choice)
        if st.form_submit_button("Submit"):
            asyncio.run(controller.submit_quiz(answers))
            st.session_state.retaking_quiz = None
            st.rerun()


def render_completion_section():
    """Render the lesson-complete / next-lesson chooser."""
    controller = st.session_state.controller
    progress = st.session_state.repository.get(st.session_state.course_id)

    if progress and progress.is_completed(controller.lesson.id):
        st.success("Lesson completed!")

    if not controller.can_complete():
        st.warning("Pass the quiz to complete this lesson.")
        return

    if st.button("Complete & Continue", type="primary", use_container_width=True):
        result = asyncio.run(controller.complete_and_advance())
        if result.outcome == AdvanceOutcome.COURSE_COMPLETE:
            st.balloons()
            st.success("Course complete!")
        else:
            st.rerun()


def render_page_navigation():
    """Render back / next buttons for in-lesson pages."""
    controller = st.session_state.controller

    col1, col2, col3 = st.columns([1, 2, 1])
    with col1:
        if st.button("← Back", disabled=not controller.can_go_back, use_container_width=True):
            controller.go_back()
            st.rerun()
    with col3:
        if st.button("Next →", disabled=not controller.can_go_next, use_container_width=True):
            controller.go_next()
            st.rerun()


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()

    error = st.session_state.get("startup_error")
    if error:
        st.error(error)
        return
    if not st.session_state.catalog or not st.session_state.course_id:
        st.error("No course catalog configured. Set LESSONFLOW_CATALOG to a catalog file.")
        return

    render_sidebar()
    render_lesson_view()


if __name__ == "__main__":
    main()
