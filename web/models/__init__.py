"""Database models for the web application."""

from .database import DocumentRecord, QuestionRecord

__all__ = ["DocumentRecord", "QuestionRecord"]
