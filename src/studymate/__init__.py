"""
StudyMate - upload study notes, ask questions grounded in them.

This package provides the document ingestion and question answering
pipelines, independent of any web framework. Storage and AI services are
passed in as collaborators (entity stores and an AI gateway).
"""

__version__ = "0.1.0"

from .datasource import BaseEntityStore, InMemoryEntityStore, parse_sort_spec
from .engine import Overview, StudyAssistant
from .entities import (
    AnswerResult,
    Confidence,
    Document,
    DocumentStatus,
    FileType,
    Question,
    SourceFile,
)
from .gateway import BaseAIGateway, ExtractionResult, ExtractionStatus, GatewayFactory, UploadedFile
from .history import HistoryOrder, group_by_day, search_questions
from .pipeline import AnswerPipeline, IngestionPipeline, build_context, build_prompt

__all__ = [
    # Version
    "__version__",
    # Entities
    "Document",
    "DocumentStatus",
    "FileType",
    "Question",
    "Confidence",
    "AnswerResult",
    "SourceFile",
    # Stores
    "BaseEntityStore",
    "InMemoryEntityStore",
    "parse_sort_spec",
    # Gateway
    "BaseAIGateway",
    "ExtractionResult",
    "ExtractionStatus",
    "UploadedFile",
    "GatewayFactory",
    # Pipelines
    "IngestionPipeline",
    "AnswerPipeline",
    "build_context",
    "build_prompt",
    # History
    "HistoryOrder",
    "search_questions",
    "group_by_day",
    # Engine
    "StudyAssistant",
    "Overview",
]
