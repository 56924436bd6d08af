"""Tests for the in-memory entity store."""

from datetime import datetime, timezone

import pytest

from studymate.datasource import InMemoryEntityStore, parse_sort_spec
from studymate.datasource.base import SortSpec
from studymate.entities import Document, DocumentStatus, Question
from studymate.errors import EntityNotFoundError, InvalidTransitionError


def _doc(title: str) -> Document:
    return Document(title=title, original_file_url=f"file:///uploads/{title}")


class TestParseSortSpec:
    """Tests for parse_sort_spec."""

    def test_ascending_and_descending(self):
        assert parse_sort_spec("created_date") == SortSpec("created_date", False)
        assert parse_sort_spec("-created_date") == SortSpec("created_date", True)
        assert str(parse_sort_spec("-title")) == "-title"

    def test_empty_spec(self):
        with pytest.raises(ValueError):
            parse_sort_spec("-")

    def test_unknown_field(self):
        with pytest.raises(ValueError, match="unknown field"):
            parse_sort_spec("-size", Document)


class TestInMemoryEntityStore:
    """Tests for InMemoryEntityStore."""

    def test_create_assigns_id_and_date(self, document_store):
        doc = document_store.create(_doc("a"))

        assert doc.id
        assert doc.created_date == datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
        assert document_store.get(doc.id) == doc

    def test_ids_are_unique(self, document_store):
        ids = {document_store.create(_doc(str(i))).id for i in range(10)}

        assert len(ids) == 10

    def test_returns_copies(self, document_store):
        doc = document_store.create(_doc("a"))
        doc.title = "mutated"

        assert document_store.get(doc.id).title == "a"

    def test_get_missing(self, document_store):
        assert document_store.get("missing") is None

    def test_update(self, document_store):
        doc = document_store.create(_doc("a"))

        updated = document_store.update(doc.id, {"status": DocumentStatus.COMPLETED, "extracted_text": "t"})

        assert updated.status == DocumentStatus.COMPLETED
        assert document_store.get(doc.id).extracted_text == "t"

    def test_update_missing_raises(self, document_store):
        with pytest.raises(EntityNotFoundError):
            document_store.update("missing", {"title": "x"})

    def test_rejected_update_leaves_record_unchanged(self, document_store):
        doc = document_store.create(_doc("a"))
        document_store.update(doc.id, {"status": DocumentStatus.FAILED})

        with pytest.raises(InvalidTransitionError):
            document_store.update(doc.id, {"status": DocumentStatus.COMPLETED, "extracted_text": "late"})

        stored = document_store.get(doc.id)
        assert stored.status == DocumentStatus.FAILED
        assert stored.extracted_text == ""

    def test_delete(self, document_store):
        doc = document_store.create(_doc("a"))

        assert document_store.delete(doc.id) is True
        assert document_store.get(doc.id) is None
        assert document_store.delete(doc.id) is False

    def test_list_newest_first_by_default(self, document_store):
        for title in ("first", "second", "third"):
            document_store.create(_doc(title))

        assert [d.title for d in document_store.list()] == ["third", "second", "first"]
        assert [d.title for d in document_store.list(sort="created_date")] == ["first", "second", "third"]

    def test_limit(self, document_store):
        for title in ("first", "second", "third"):
            document_store.create(_doc(title))

        assert [d.title for d in document_store.list(limit=2)] == ["third", "second"]

    def test_ties_keep_insertion_order(self):
        fixed = datetime(2024, 1, 1, tzinfo=timezone.utc)
        store = InMemoryEntityStore(Document, clock=lambda: fixed)
        for title in ("a", "b", "c"):
            store.create(_doc(title))

        assert [d.title for d in store.list(sort="created_date")] == ["a", "b", "c"]

    def test_filter_and_count(self, document_store):
        done = document_store.create(_doc("done"))
        document_store.update(done.id, {"status": DocumentStatus.COMPLETED, "extracted_text": "x"})
        document_store.create(_doc("pending"))

        completed = document_store.filter({"status": DocumentStatus.COMPLETED})

        assert [d.title for d in completed] == ["done"]
        assert document_store.count() == 2
        assert document_store.count({"status": DocumentStatus.PROCESSING}) == 1

    def test_filter_unknown_field(self, document_store):
        with pytest.raises(ValueError):
            document_store.filter({"owner": "me"})

    def test_question_store(self, question_store):
        question = question_store.create(Question(question_text="Why?", ai_answer="Because.", document_ids=["d1"]))

        assert question_store.get(question.id).document_ids == ["d1"]
