"""Ingestion and answer pipelines."""

from .answer import (
    ANSWER_SCHEMA,
    CONTEXT_SEPARATOR,
    DEFAULT_PROMPT_TEMPLATE,
    FALLBACK_ANSWER,
    AnswerPipeline,
    build_context,
    build_prompt,
)
from .base import BasePipeline
from .ingestion import (
    EXTRACTION_SCHEMA,
    FALLBACK_EXTRACTION_PROMPT,
    FALLBACK_EXTRACTION_SCHEMA,
    IngestionPipeline,
)

__all__ = [
    "BasePipeline",
    "IngestionPipeline",
    "AnswerPipeline",
    "build_context",
    "build_prompt",
    "ANSWER_SCHEMA",
    "CONTEXT_SEPARATOR",
    "DEFAULT_PROMPT_TEMPLATE",
    "FALLBACK_ANSWER",
    "EXTRACTION_SCHEMA",
    "FALLBACK_EXTRACTION_PROMPT",
    "FALLBACK_EXTRACTION_SCHEMA",
]
