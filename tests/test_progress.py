"""Tests for ProgressRepository."""

import pytest

from lessonflow.classroom import InMemoryLessonCatalog, ProgressRepository
from lessonflow.errors import StorageError
from lessonflow.storage import MemoryStore, course_progress_key

from conftest import COURSE_ID, make_lesson


class FailingStore(MemoryStore):
    """Store whose reads and/or writes fail on demand."""

    def __init__(self, fail_reads: bool = False, fail_writes: bool = True):
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.write_attempts = 0

    async def get(self, key):
        if self.fail_reads:
            raise StorageError("read failed")
        return await super().get(key)

    async def set(self, key, value):
        self.write_attempts += 1
        if self.fail_writes:
            raise StorageError("disk full")
        await super().set(key, value)


class TestGetOrCreate:

    @pytest.mark.asyncio
    async def test_creates_record(self, repository):
        record = await repository.get_or_create(COURSE_ID)

        assert record.user_id == "learner-1"
        assert record.course_id == COURSE_ID
        assert record.completed_lesson_ids == set()
        assert record.quiz_scores == {}
        assert record.current_lesson_id == "lesson-1"
        assert record.started_at == record.last_accessed_at

    @pytest.mark.asyncio
    async def test_returns_existing(self, repository):
        first = await repository.get_or_create(COURSE_ID)
        second = await repository.get_or_create(COURSE_ID)
        assert first is second

    @pytest.mark.asyncio
    async def test_empty_course(self, repository):
        record = await repository.get_or_create("empty-course")
        assert record.current_lesson_id is None

    def test_get_before_create(self, repository):
        assert repository.get(COURSE_ID) is None

    @pytest.mark.asyncio
    async def test_persists_to_store(self, repository, store):
        await repository.get_or_create(COURSE_ID)
        stored = await store.get(course_progress_key("learner-1"))
        assert COURSE_ID in stored
        assert stored[COURSE_ID]["current_lesson_id"] == "lesson-1"


class TestCompleteLesson:

    @pytest.mark.asyncio
    async def test_complete_advances_current(self, repository):
        record = await repository.complete_lesson(COURSE_ID, "lesson-1")
        assert record.completed_lesson_ids == {"lesson-1"}
        assert record.current_lesson_id == "lesson-2"

    @pytest.mark.asyncio
    async def test_last_lesson_keeps_current(self, repository):
        record = await repository.complete_lesson(COURSE_ID, "lesson-3")
        assert record.current_lesson_id == "lesson-3"

    @pytest.mark.asyncio
    async def test_idempotent(self, repository):
        await repository.complete_lesson(COURSE_ID, "lesson-1")
        before = repository.get(COURSE_ID).last_accessed_at

        record = await repository.complete_lesson(COURSE_ID, "lesson-1")
        assert record.completed_lesson_ids == {"lesson-1"}
        assert record.last_accessed_at == before

    @pytest.mark.asyncio
    async def test_unknown_lesson_ignored(self, repository):
        record = await repository.complete_lesson(COURSE_ID, "no-such-lesson")
        assert record.completed_lesson_ids == set()

    @pytest.mark.asyncio
    async def test_started_at_immutable(self, repository):
        record = await repository.get_or_create(COURSE_ID)
        started = record.started_at

        await repository.complete_lesson(COURSE_ID, "lesson-1")
        await repository.record_quiz_attempt(COURSE_ID, "lesson-2", 50, False, [])
        await repository.reset_course_progress(COURSE_ID)

        assert repository.get(COURSE_ID).started_at == started
        assert repository.get(COURSE_ID).last_accessed_at >= started


class TestQuizAttempts:

    @pytest.mark.asyncio
    async def test_second_attempt_replaces_first(self, repository):
        await repository.record_quiz_attempt(COURSE_ID, "lesson-2", 40, False, [1, 1, 0, 0, 1])
        record = await repository.record_quiz_attempt(COURSE_ID, "lesson-2", 80, True, [0, 0, 0, 0, 1])

        assert list(record.quiz_scores) == ["lesson-2"]
        attempt = record.quiz_scores["lesson-2"]
        assert attempt.score == 80
        assert attempt.passed is True
        assert attempt.answers == [0, 0, 0, 0, 1]

    @pytest.mark.asyncio
    async def test_attempts_for_different_lessons(self, repository):
        await repository.record_quiz_attempt(COURSE_ID, "lesson-1", 100, True, [])
        record = await repository.record_quiz_attempt(COURSE_ID, "lesson-2", 20, False, [])
        assert set(record.quiz_scores) == {"lesson-1", "lesson-2"}


class TestReset:

    @pytest.mark.asyncio
    async def test_reset_clears_course(self, repository):
        await repository.complete_lesson(COURSE_ID, "lesson-1")
        await repository.record_quiz_attempt(COURSE_ID, "lesson-2", 90, True, [])

        record = await repository.reset_course_progress(COURSE_ID)
        assert record.completed_lesson_ids == set()
        assert record.quiz_scores == {}
        assert record.current_lesson_id == "lesson-1"
        assert repository.get(COURSE_ID) is record

    @pytest.mark.asyncio
    async def test_reset_leaves_other_courses(self, store):
        catalog = InMemoryLessonCatalog([
            make_lesson("a1", 1, course_id="course-a"),
            make_lesson("b1", 1, course_id="course-b"),
        ])
        repository = ProgressRepository(store, catalog, user_id="learner-1")
        await repository.complete_lesson("course-a", "a1")
        await repository.complete_lesson("course-b", "b1")

        await repository.reset_course_progress("course-a")

        assert repository.get("course-a").completed_lesson_ids == set()
        assert repository.get("course-b").completed_lesson_ids == {"b1"}

    @pytest.mark.asyncio
    async def test_reset_leaves_other_learners(self, store, catalog):
        alice = ProgressRepository(store, catalog, user_id="alice")
        bob = ProgressRepository(store, catalog, user_id="bob")
        await alice.complete_lesson(COURSE_ID, "lesson-1")
        await bob.complete_lesson(COURSE_ID, "lesson-1")

        await alice.reset_course_progress(COURSE_ID)

        reloaded = ProgressRepository(store, catalog, user_id="bob")
        await reloaded.load()
        assert reloaded.get(COURSE_ID).completed_lesson_ids == {"lesson-1"}


class TestStatistics:

    @pytest.mark.asyncio
    async def test_completion_percent_quarter(self, store):
        catalog = InMemoryLessonCatalog([make_lesson(f"l{i}", i) for i in range(1, 5)])
        repository = ProgressRepository(store, catalog)
        await repository.complete_lesson(COURSE_ID, "l1")
        assert repository.get_course_completion_percent(COURSE_ID) == 25

    @pytest.mark.asyncio
    async def test_completion_percent_rounds_half_up(self, store):
        catalog = InMemoryLessonCatalog([make_lesson(f"l{i}", i) for i in range(1, 9)])
        repository = ProgressRepository(store, catalog)
        await repository.complete_lesson(COURSE_ID, "l1")
        assert repository.get_course_completion_percent(COURSE_ID) == 13

    @pytest.mark.asyncio
    async def test_completion_percent_empty_course(self, repository):
        await repository.get_or_create("empty-course")
        assert repository.get_course_completion_percent("empty-course") == 0

    def test_completion_percent_without_record(self, repository):
        assert repository.get_course_completion_percent(COURSE_ID) == 0

    @pytest.mark.asyncio
    async def test_next_available_lesson(self, repository):
        await repository.get_or_create(COURSE_ID)
        assert repository.get_next_available_lesson(COURSE_ID).id == "lesson-1"

        await repository.complete_lesson(COURSE_ID, "lesson-1")
        assert repository.get_next_available_lesson(COURSE_ID).id == "lesson-2"

    @pytest.mark.asyncio
    async def test_next_available_when_all_completed(self, repository):
        for lesson_id in ("lesson-1", "lesson-2", "lesson-3"):
            await repository.complete_lesson(COURSE_ID, lesson_id)
        assert repository.get_next_available_lesson(COURSE_ID).id == "lesson-3"

    def test_next_available_empty_course(self, repository):
        assert repository.get_next_available_lesson("empty-course") is None

    @pytest.mark.asyncio
    async def test_all_user_progress(self, repository):
        await repository.get_or_create(COURSE_ID)
        await repository.get_or_create("other")
        assert {p.course_id for p in repository.get_all_user_progress()} == {COURSE_ID, "other"}


class TestPersistence:

    @pytest.mark.asyncio
    async def test_reload_from_store(self, store, catalog):
        first = ProgressRepository(store, catalog, user_id="learner-1")
        await first.complete_lesson(COURSE_ID, "lesson-1")
        await first.record_quiz_attempt(COURSE_ID, "lesson-2", 80, True, [0, 0, 0, 0, 1])

        second = ProgressRepository(store, catalog, user_id="learner-1")
        await second.load()
        record = second.get(COURSE_ID)
        assert record.completed_lesson_ids == {"lesson-1"}
        assert record.quiz_scores["lesson-2"].passed is True

    @pytest.mark.asyncio
    async def test_load_runs_once(self, store, catalog):
        repository = ProgressRepository(store, catalog, user_id="learner-1")
        await repository.load()
        await store.set(course_progress_key("learner-1"), {"bogus": {}})
        await repository.load()
        assert repository.get("bogus") is None

    @pytest.mark.asyncio
    async def test_failed_write_keeps_memory_state(self, catalog):
        store = FailingStore()
        repository = ProgressRepository(store, catalog)

        record = await repository.complete_lesson(COURSE_ID, "lesson-1")

        assert record.completed_lesson_ids == {"lesson-1"}
        assert repository.get_course_completion_percent(COURSE_ID) == 33
        assert store.write_attempts == 2  # create + complete, no retries

    @pytest.mark.asyncio
    async def test_failed_read_starts_empty(self, catalog):
        repository = ProgressRepository(FailingStore(fail_reads=True), catalog)
        await repository.load()
        assert repository.get_all_user_progress() == []

    @pytest.mark.asyncio
    async def test_failed_read_never_overwrites_other_courses(self, catalog):
        store = FailingStore(fail_writes=False)
        first = ProgressRepository(store, catalog, user_id="learner-1")
        await first.complete_lesson(COURSE_ID, "lesson-1")
        writes_before = store.write_attempts

        store.fail_reads = True
        second = ProgressRepository(store, catalog, user_id="learner-1")
        record = await second.get_or_create("course-other")
        await second.complete_lesson(COURSE_ID, "lesson-2")

        assert record.course_id == "course-other"
        assert store.write_attempts == writes_before

        store.fail_reads = False
        stored = await store.get(course_progress_key("learner-1"))
        assert list(stored) == [COURSE_ID]
        assert stored[COURSE_ID]["completed_lesson_ids"] == ["lesson-1"]

    @pytest.mark.asyncio
    async def test_invalid_records_skipped(self, store, catalog):
        await store.set(course_progress_key("learner-1"), {
            "broken": {"user_id": "learner-1"},
            COURSE_ID: {
                "user_id": "learner-1",
                "course_id": COURSE_ID,
                "completed_lesson_ids": ["lesson-1"],
                "quiz_scores": {},
                "started_at": "2024-01-01T00:00:00",
                "last_accessed_at": "2024-01-02T00:00:00",
            },
        })
        repository = ProgressRepository(store, catalog, user_id="learner-1")
        await repository.load()

        assert repository.get("broken") is None
        assert repository.get(COURSE_ID).completed_lesson_ids == {"lesson-1"}

    def test_lessons_sorted_and_cached(self, repository):
        lessons = repository.lessons_for(COURSE_ID)
        assert [lesson.id for lesson in lessons] == ["lesson-1", "lesson-2", "lesson-3"]
        assert repository.lessons_for(COURSE_ID) is lessons

    def test_modules_sorted(self, repository):
        assert [m.id for m in repository.modules_for(COURSE_ID)] == ["mod-a", "mod-b"]
