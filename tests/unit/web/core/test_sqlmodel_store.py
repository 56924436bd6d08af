"""Tests for the SQLModel-backed entity store."""

from datetime import datetime, timezone

import pytest
from sqlmodel import SQLModel, create_engine
from sqlmodel.pool import StaticPool

from studymate.entities import Document, DocumentStatus, FileType, Question
from studymate.errors import EntityNotFoundError, InvalidTransitionError
from web.core.entity_store import SQLModelEntityStore
from web.models.database import DocumentRecord, QuestionRecord


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def documents(engine, clock):
    return SQLModelEntityStore(engine, DocumentRecord, Document, clock=clock)


@pytest.fixture
def questions(engine, clock):
    return SQLModelEntityStore(engine, QuestionRecord, Question, clock=clock)


def _doc(title: str) -> Document:
    return Document(title=title, original_file_url=f"file:///uploads/{title}.pdf", file_type=FileType.PDF)


class TestSQLModelEntityStore:
    """Tests for SQLModelEntityStore."""

    def test_create_and_get(self, documents):
        doc = documents.create(_doc("bio"))

        fetched = documents.get(doc.id)

        assert fetched == doc
        assert fetched.status == DocumentStatus.PROCESSING
        assert fetched.file_type == FileType.PDF
        assert fetched.created_date == datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

    def test_get_missing(self, documents):
        assert documents.get("missing") is None

    def test_update_finalizes(self, documents):
        doc = documents.create(_doc("bio"))

        updated = documents.update(doc.id, {"status": DocumentStatus.COMPLETED, "extracted_text": "Cells."})

        assert updated.status == DocumentStatus.COMPLETED
        assert documents.get(doc.id).extracted_text == "Cells."

    def test_update_terminal_rejected(self, documents):
        doc = documents.create(_doc("bio"))
        documents.update(doc.id, {"status": DocumentStatus.FAILED})

        with pytest.raises(InvalidTransitionError):
            documents.update(doc.id, {"status": DocumentStatus.COMPLETED})

        assert documents.get(doc.id).status == DocumentStatus.FAILED

    def test_update_missing(self, documents):
        with pytest.raises(EntityNotFoundError):
            documents.update("missing", {"title": "x"})

    def test_delete(self, documents):
        doc = documents.create(_doc("bio"))

        assert documents.delete(doc.id) is True
        assert documents.delete(doc.id) is False
        assert documents.count() == 0

    def test_filter_sort_limit(self, documents):
        for title in ("first", "second", "third"):
            doc = documents.create(_doc(title))
            if title != "second":
                documents.update(doc.id, {"status": DocumentStatus.COMPLETED, "extracted_text": title})

        assert [d.title for d in documents.list()] == ["third", "second", "first"]
        assert [d.title for d in documents.list(sort="created_date", limit=2)] == ["first", "second"]
        completed = documents.filter({"status": DocumentStatus.COMPLETED})
        assert [d.title for d in completed] == ["third", "first"]
        assert documents.count({"status": DocumentStatus.PROCESSING}) == 1

    def test_filter_unknown_field(self, documents):
        with pytest.raises(ValueError):
            documents.filter({"owner": "me"})

    def test_question_round_trip(self, questions):
        question = questions.create(Question(
            question_text="What is ATP?",
            context_used="[Document: Bio]\nATP is energy.",
            ai_answer="Energy currency.",
            document_ids=["d1", "d2"],
        ))

        fetched = questions.get(question.id)

        assert fetched.document_ids == ["d1", "d2"]
        assert fetched.context_used == "[Document: Bio]\nATP is energy."
        assert questions.count() == 1
