"""Domain entities."""

from .base import Entity
from .document import Document, DocumentStatus, FileType
from .question import AnswerResult, Confidence, Question
from .source_file import SourceFile

__all__ = [
    "Entity",
    "Document",
    "DocumentStatus",
    "FileType",
    "Question",
    "Confidence",
    "AnswerResult",
    "SourceFile",
]
