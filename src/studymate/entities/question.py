"""Question entity and the answer returned to callers."""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, Field

from .base import Entity


class Confidence(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Question(Entity):
    """
    A persisted question/answer pair.

    ``context_used`` is a point-in-time snapshot of the context and
    ``document_ids`` is provenance only; the referenced documents may be
    deleted later. Questions are never edited, only deleted.
    """

    immutable_fields: ClassVar[frozenset[str]] = frozenset(
        {"id", "created_date", "question_text", "context_used", "ai_answer", "document_ids"}
    )

    question_text: str = Field(..., min_length=1)
    context_used: str = ""
    ai_answer: str = Field(..., min_length=1)
    document_ids: list[str] = Field(default_factory=list)


class AnswerResult(BaseModel):
    """What the answer pipeline hands back to its caller."""

    question: str
    answer: str
    context: str
    confidence: Confidence | None = None
    question_id: str | None = None
