"""
ProgressRepository - Track learner progress through courses.

Stores one CourseProgress record per (user, course):
- Completed lesson IDs
- Latest quiz attempt per lesson
- Current lesson
- Start and last-access timestamps

All records of a learner live under a single key of the KeyValueStore.
Mutations update the in-memory record first and then persist; a failed
write is logged and the in-memory state stays authoritative for the rest
of the session. If the initial read failed nothing is written back, since
the stored key may hold courses this session never loaded.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from pydantic import ValidationError

from lessonflow.schemas import CourseProgress, Lesson, Module, QuizAttempt
from lessonflow.storage import KeyValueStore, course_progress_key
from lessonflow.utils import percent

from .access import find_lesson_index, is_accessible
from .catalog import LessonCatalog


logger = logging.getLogger(__name__)


class ProgressRepository:
    """
    Progress of one learner, backed by a KeyValueStore.

    Construct one per learner session and pass it to the evaluator and
    controller. Call `load()` once before the synchronous reads.
    """

    def __init__(self, store: KeyValueStore, catalog: LessonCatalog, user_id: str = "guest"):
        """
        Initialize repository.

        Args:
            store: Durable key-value store
            catalog: Source of lessons and modules
            user_id: Learner identifier
        """
        self.store = store
        self.catalog = catalog
        self.user_id = user_id
        self._records: dict[str, CourseProgress] = {}
        self._lessons: dict[str, list[Lesson]] = {}
        self._modules: dict[str, list[Module]] = {}
        self._initialized = False
        self._load_failed = False

    @property
    def storage_key(self) -> str:
        return course_progress_key(self.user_id)

    # -------------------------------------------------------------------------
    # Loading and persistence
    # -------------------------------------------------------------------------

    async def load(self):
        """Read this learner's records from the store. Runs once."""
        if self._initialized:
            return

        try:
            stored = await self.store.get(self.storage_key)
        except Exception as e:
            logger.warning(f"Could not read progress for {self.user_id}: {e}")
            self._load_failed = True
            stored = None

        self._records = self._parse_records(stored)
        self._initialized = True
        logger.debug(f"Loaded {len(self._records)} course records for {self.user_id}")

    def _parse_records(self, stored: Any) -> dict[str, CourseProgress]:
        if not isinstance(stored, dict):
            if stored is not None:
                logger.warning(f"Ignoring malformed progress payload for {self.user_id}")
            return {}

        records = {}
        for course_id, raw in stored.items():
            try:
                records[course_id] = CourseProgress.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Skipping invalid progress record {self.user_id}/{course_id}: {e}")
        return records

    async def _persist(self) -> bool:
        """Write every record of this learner. Returns False if nothing was written."""
        if self._load_failed:
            logger.warning(f"Not persisting progress for {self.user_id}: stored progress was never loaded")
            return False

        payload = {
            course_id: record.model_dump(mode="json")
            for course_id, record in self._records.items()
        }
        try:
            await self.store.set(self.storage_key, payload)
        except Exception as e:
            logger.warning(f"Could not persist progress for {self.user_id}: {e}")
            return False
        return True

    def _touch(self, record: CourseProgress):
        record.last_accessed_at = datetime.now()

    # -------------------------------------------------------------------------
    # Catalog views
    # -------------------------------------------------------------------------

    def lessons_for(self, course_id: str) -> list[Lesson]:
        """Course lessons sorted by order, cached after the first call."""
        if course_id not in self._lessons:
            lessons = self.catalog.get_lessons_by_course(course_id)
            self._lessons[course_id] = sorted(lessons, key=lambda lesson: lesson.order)
        return self._lessons[course_id]

    def modules_for(self, course_id: str) -> list[Module]:
        """Course modules sorted by order, cached after the first call."""
        if course_id not in self._modules:
            modules = self.catalog.get_modules_by_course(course_id)
            self._modules[course_id] = sorted(modules, key=lambda module: module.order)
        return self._modules[course_id]

    def get_lesson(self, course_id: str, lesson_id: str) -> Optional[Lesson]:
        lessons = self.lessons_for(course_id)
        idx = find_lesson_index(lessons, lesson_id)
        return lessons[idx] if idx >= 0 else None

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    def get(self, course_id: str) -> Optional[CourseProgress]:
        """Progress record for a course, None if the learner never opened it."""
        return self._records.get(course_id)

    def get_all_user_progress(self) -> list[CourseProgress]:
        """Every course record of this learner."""
        return list(self._records.values())

    async def get_or_create(self, course_id: str) -> CourseProgress:
        """Return the course record, creating it on first access."""
        await self.load()

        existing = self._records.get(course_id)
        if existing is not None:
            return existing

        lessons = self.lessons_for(course_id)
        now = datetime.now()
        record = CourseProgress(
            user_id=self.user_id,
            course_id=course_id,
            current_lesson_id=lessons[0].id if lessons else None,
            started_at=now,
            last_accessed_at=now,
        )
        self._records[course_id] = record
        logger.info(f"Started course {course_id} for {self.user_id}")

        await self._persist()
        return record

    async def complete_lesson(self, course_id: str, lesson_id: str) -> CourseProgress:
        """
        Mark a lesson as completed.

        Idempotent: completing an already-completed (or unknown) lesson returns
        the record unchanged. Otherwise the current lesson advances to the next
        lesson by order, or stays on this lesson if it is the last one.
        """
        record = await self.get_or_create(course_id)

        if record.is_completed(lesson_id):
            return record

        lessons = self.lessons_for(course_id)
        idx = find_lesson_index(lessons, lesson_id)
        if idx < 0:
            logger.warning(f"Ignoring completion of unknown lesson {lesson_id} in {course_id}")
            return record

        next_lesson = lessons[idx + 1] if idx + 1 < len(lessons) else None
        record.completed_lesson_ids.add(lesson_id)
        record.current_lesson_id = next_lesson.id if next_lesson else lesson_id
        self._touch(record)
        logger.info(f"Completed lesson {lesson_id} in {course_id} for {self.user_id}")

        await self._persist()
        return record

    async def record_quiz_attempt(
        self,
        course_id: str,
        lesson_id: str,
        score: float,
        passed: bool,
        answers: list[int],
    ) -> CourseProgress:
        """Store a quiz attempt, replacing any earlier attempt for the lesson."""
        record = await self.get_or_create(course_id)

        record.quiz_scores[lesson_id] = QuizAttempt(
            lesson_id=lesson_id,
            score=score,
            passed=passed,
            attempted_at=datetime.now(),
            answers=list(answers),
        )
        self._touch(record)
        logger.info(
            f"Quiz attempt for {lesson_id} in {course_id}: {score}% "
            f"({'passed' if passed else 'failed'})"
        )

        await self._persist()
        return record

    async def reset_course_progress(self, course_id: str) -> CourseProgress:
        """
        Clear completions and quiz attempts for one course.

        The record itself and its start time are kept; other courses are untouched.
        """
        record = await self.get_or_create(course_id)

        lessons = self.lessons_for(course_id)
        record.completed_lesson_ids.clear()
        record.quiz_scores.clear()
        record.current_lesson_id = lessons[0].id if lessons else None
        self._touch(record)
        logger.info(f"Reset progress in {course_id} for {self.user_id}")

        await self._persist()
        return record

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def get_course_completion_percent(self, course_id: str) -> int:
        """Whole-number share of the course's lessons completed; 0 for an empty course."""
        record = self.get(course_id)
        if record is None:
            return 0

        lessons = self.lessons_for(course_id)
        completed = sum(1 for lesson in lessons if record.is_completed(lesson.id))
        return percent(completed, len(lessons))

    def get_next_available_lesson(self, course_id: str) -> Optional[Lesson]:
        """
        First lesson in order that is not completed and is accessible.

        Returns the last lesson once everything is completed, and None for a
        course without lessons.
        """
        lessons = self.lessons_for(course_id)
        if not lessons:
            return None

        record = self.get(course_id)
        for lesson in lessons:
            if record is not None and record.is_completed(lesson.id):
                continue
            if is_accessible(lessons, record, lesson.id):
                return lesson

        return lessons[-1]
