"""Pytest configuration and global fixtures for StudyMate tests."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from studymate.datasource import InMemoryEntityStore
from studymate.engine import StudyAssistant
from studymate.entities import Document, DocumentStatus, FileType, Question, SourceFile
from tests.utils.fake_gateway import FakeAIGateway


class StepClock:
    """Deterministic clock: each call returns a time ``step`` later than the last."""

    def __init__(self, start: datetime, step: timedelta = timedelta(minutes=1)):
        self.current = start - step
        self.step = step

    def __call__(self) -> datetime:
        self.current += self.step
        return self.current


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock():
    return StepClock(datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc))


# ==================== Stores ====================

@pytest.fixture
def document_store(clock):
    return InMemoryEntityStore(Document, clock=clock)


@pytest.fixture
def question_store(clock):
    return InMemoryEntityStore(Question, clock=clock)


@pytest.fixture
def add_document(document_store):
    """Create a finalized document directly in the store."""
    def _add(title: str, text: str = "", status: DocumentStatus | None = None) -> Document:
        doc = document_store.create(Document(
            title=title,
            original_file_url=f"file:///uploads/{title}",
            file_type=FileType.PDF,
        ))
        final = status or (DocumentStatus.COMPLETED if text else DocumentStatus.FAILED)
        return document_store.update(doc.id, {"extracted_text": text, "status": final})
    return _add


# ==================== Gateway & Sources ====================

@pytest.fixture
def fake_gateway():
    return FakeAIGateway()


@pytest.fixture
def pdf_source():
    return SourceFile(filename="notes.pdf", content=b"%PDF-1.4 fake", content_type="application/pdf")


@pytest.fixture
def image_source():
    return SourceFile(filename="scan.png", content=b"\x89PNG fake", content_type="image/png")


@pytest.fixture
def assistant(fake_gateway, document_store, question_store):
    return StudyAssistant(fake_gateway, document_store, question_store)
