"""StudyAssistant - high-level orchestrator for StudyMate operations."""

from datetime import date, timezone, tzinfo

from loguru import logger
from pydantic import BaseModel

from .config.settings import Settings
from .datasource.base import BaseEntityStore
from .entities.document import Document, DocumentStatus
from .entities.question import AnswerResult, Question
from .entities.source_file import SourceFile
from .gateway.base import BaseAIGateway
from .gateway.factory import GatewayFactory
from .history import HistoryOrder, group_by_day, search_questions
from .pipeline.answer import DEFAULT_PROMPT_TEMPLATE, AnswerPipeline
from .pipeline.ingestion import IngestionPipeline


class Overview(BaseModel):
    document_count: int
    question_count: int
    recent_documents: list[Document]
    recent_questions: list[Question]


class StudyAssistant:
    """High-level orchestrator for the study assistant.

    Wires the AI gateway and the two entity stores into the ingestion and
    answer pipelines, and serves the document library and question history.
    The stores and gateway are passed in so tests can substitute fakes.

    Attributes:
        gateway: AI gateway used by both pipelines
        documents: Document store
        questions: Question store
        ingestion_pipeline: Upload-to-Document workflow
        answer_pipeline: Question-to-answer workflow
    """

    def __init__(
        self,
        gateway: BaseAIGateway,
        documents: BaseEntityStore[Document],
        questions: BaseEntityStore[Question],
        prompt_template: str = DEFAULT_PROMPT_TEMPLATE,
        context_store_limit: int = 5000,
        context_display_limit: int = 2000
    ):
        self.gateway = gateway
        self.documents = documents
        self.questions = questions
        self.ingestion_pipeline = IngestionPipeline(gateway, documents)
        self.answer_pipeline = AnswerPipeline(
            gateway,
            questions,
            prompt_template=prompt_template,
            store_limit=context_store_limit,
            display_limit=context_display_limit,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        documents: BaseEntityStore[Document],
        questions: BaseEntityStore[Question],
        gateway: BaseAIGateway | None = None
    ) -> "StudyAssistant":
        """Build an assistant using the gateway and limits from settings."""
        gateway = gateway or GatewayFactory.create_from_settings(settings)
        logger.info(f"Initializing StudyAssistant with {type(gateway).__name__}")
        return cls(
            gateway,
            documents,
            questions,
            context_store_limit=settings.CONTEXT_STORE_LIMIT,
            context_display_limit=settings.CONTEXT_DISPLAY_LIMIT,
        )

    # ==================== Documents ====================

    async def upload(self, source: SourceFile, title: str | None = None) -> Document:
        return await self.ingestion_pipeline.run(source, title=title)

    def list_documents(
        self,
        status: DocumentStatus | None = None,
        limit: int | None = None
    ) -> list[Document]:
        criteria = {"status": status} if status else {}
        return self.documents.filter(criteria, sort="-created_date", limit=limit)

    def completed_documents(self) -> list[Document]:
        """The knowledge base: completed documents, newest first."""
        return self.list_documents(status=DocumentStatus.COMPLETED)

    def get_document(self, document_id: str) -> Document | None:
        return self.documents.get(document_id)

    def delete_document(self, document_id: str) -> bool:
        """Delete a document. Questions that reference it are kept."""
        deleted = self.documents.delete(document_id)
        if not deleted:
            logger.debug(f"Delete of unknown document {document_id} ignored")
        return deleted

    # ==================== Questions ====================

    async def ask(self, question_text: str) -> AnswerResult:
        return await self.answer_pipeline.run(question_text, self.completed_documents())

    def list_questions(
        self,
        search: str | None = None,
        order: HistoryOrder = HistoryOrder.NEWEST,
        limit: int | None = None
    ) -> list[Question]:
        questions = search_questions(self.questions.list(sort=order.sort_spec), search)
        return questions[:limit] if limit is not None else questions

    def question_history(
        self,
        search: str | None = None,
        order: HistoryOrder = HistoryOrder.NEWEST,
        tz: tzinfo = timezone.utc
    ) -> dict[date, list[Question]]:
        return group_by_day(self.list_questions(search=search, order=order), tz)

    def delete_question(self, question_id: str) -> bool:
        return self.questions.delete(question_id)

    def overview(self, recent: int = 5) -> Overview:
        return Overview(
            document_count=self.documents.count(),
            question_count=self.questions.count(),
            recent_documents=self.documents.list(limit=recent),
            recent_questions=self.questions.list(limit=recent),
        )
