"""Application-wide StudyAssistant instance."""

from sqlalchemy.engine import Engine

from studymate.config import Settings, settings
from studymate.engine import StudyAssistant
from studymate.entities import Document, Question
from web.core.entity_store import SQLModelEntityStore
from web.models.database import DocumentRecord, QuestionRecord

_assistant: StudyAssistant | None = None


def build_assistant(db_engine: Engine, app_settings: Settings = settings) -> StudyAssistant:
    """Wire SQLModel-backed stores and the configured gateway into an assistant."""
    return StudyAssistant.from_settings(
        app_settings,
        documents=SQLModelEntityStore(db_engine, DocumentRecord, Document),
        questions=SQLModelEntityStore(db_engine, QuestionRecord, Question),
    )


def set_assistant(assistant: StudyAssistant | None) -> None:
    global _assistant
    _assistant = assistant


def get_assistant() -> StudyAssistant:
    """依赖注入：获取 StudyAssistant 单例"""
    global _assistant
    if _assistant is None:
        from web.core.database import engine, init_db
        init_db(engine)
        _assistant = build_assistant(engine)
    return _assistant
