"""Tests for catalog loading."""

import json
from pathlib import Path

import pytest

from lessonflow.classroom import InMemoryLessonCatalog, build_pages, load_catalog
from lessonflow.errors import CatalogError

from conftest import make_lesson


SAMPLE_CATALOG = Path(__file__).parent.parent / "data" / "sample_catalog.yaml"


def lesson_by_id(catalog, course_id, lesson_id):
    return next(l for l in catalog.get_lessons_by_course(course_id) if l.id == lesson_id)


class TestInMemoryCatalog:

    def test_filters_by_course(self):
        catalog = InMemoryLessonCatalog([
            make_lesson("a1", 1, course_id="a"),
            make_lesson("b1", 1, course_id="b"),
            make_lesson("a2", 2, course_id="a"),
        ])
        assert [l.id for l in catalog.get_lessons_by_course("a")] == ["a1", "a2"]
        assert catalog.get_lessons_by_course("missing") == []
        assert catalog.get_modules_by_course("a") == []

    def test_course_ids_first_seen(self):
        catalog = InMemoryLessonCatalog([
            make_lesson("b1", 1, course_id="b"),
            make_lesson("a1", 1, course_id="a"),
            make_lesson("b2", 2, course_id="b"),
        ])
        assert catalog.get_course_ids() == ["b", "a"]


class TestLoadCatalog:

    def test_sample_catalog(self):
        catalog = load_catalog(SAMPLE_CATALOG)

        assert catalog.get_course_ids() == ["prompting-101"]
        lessons = catalog.get_lessons_by_course("prompting-101")
        assert [l.id for l in lessons] == ["lesson-welcome", "lesson-structure", "lesson-iterate"]
        assert len(catalog.get_modules_by_course("prompting-101")) == 2

    def test_sample_lesson_pages(self):
        catalog = load_catalog(SAMPLE_CATALOG)

        welcome = lesson_by_id(catalog, "prompting-101", "lesson-welcome")
        assert [p.type for p in build_pages(welcome)] == ["stream", "block", "nav"]

        structure = lesson_by_id(catalog, "prompting-101", "lesson-structure")
        assert [p.type for p in build_pages(structure)] == ["block", "block", "quiz", "block", "nav"]

    def test_json_catalog(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({
            "lessons": [{"id": "l1", "course_id": "c1", "title": "One", "order": 1}],
        }), encoding="utf-8")

        catalog = load_catalog(path)
        assert lesson_by_id(catalog, "c1", "l1").title == "One"
        assert catalog.get_modules_by_course("c1") == []

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_catalog(path).get_course_ids() == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "nope.yaml")

    def test_unparsable_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogError, match="Could not parse"):
            load_catalog(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- id: l1\n", encoding="utf-8")
        with pytest.raises(CatalogError, match="mapping"):
            load_catalog(path)

    def test_invalid_lesson(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("lessons:\n  - id: l1\n    title: Missing course and order\n", encoding="utf-8")
        with pytest.raises(CatalogError, match="Invalid catalog entry"):
            load_catalog(path)

    def test_quiz_threshold_default_applied(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "lessons:\n"
            "  - id: l1\n"
            "    course_id: c1\n"
            "    title: One\n"
            "    order: 1\n"
            "    quiz: {id: q1, lesson_id: l1}\n"
            "  - id: l2\n"
            "    course_id: c1\n"
            "    title: Two\n"
            "    order: 2\n"
            "    quiz: {id: q2, lesson_id: l2, pass_threshold: 50}\n",
            encoding="utf-8",
        )
        catalog = load_catalog(path, default_quiz_pass_threshold=85)

        assert lesson_by_id(catalog, "c1", "l1").quiz.pass_threshold == 85
        assert lesson_by_id(catalog, "c1", "l2").quiz.pass_threshold == 50

    def test_quiz_threshold_module_default(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "lessons:\n"
            "  - {id: l1, course_id: c1, title: One, order: 1, quiz: {id: q1, lesson_id: l1}}\n",
            encoding="utf-8",
        )
        assert lesson_by_id(load_catalog(path), "c1", "l1").quiz.pass_threshold == 70
