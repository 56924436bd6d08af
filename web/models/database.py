"""SQLModel tables backing the Document and Question entity stores."""

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Text
from sqlmodel import Field, SQLModel


class DocumentRecord(SQLModel, table=True):
    """文档表"""
    __tablename__ = "documents"

    id: str = Field(primary_key=True)
    title: str
    original_file_url: str
    file_type: str = "doc"  # pdf, image, doc
    status: str = Field(default="processing", index=True)  # processing, completed, failed
    extracted_text: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    created_date: datetime = Field(sa_column=Column(DateTime(timezone=True), index=True, nullable=False))


class QuestionRecord(SQLModel, table=True):
    """问答记录表"""
    __tablename__ = "questions"

    id: str = Field(primary_key=True)
    question_text: str = Field(sa_column=Column(Text, nullable=False))
    context_used: str = Field(default="", sa_column=Column(Text, nullable=False, default=""))
    ai_answer: str = Field(sa_column=Column(Text, nullable=False))
    document_ids: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    created_date: datetime = Field(sa_column=Column(DateTime(timezone=True), index=True, nullable=False))
