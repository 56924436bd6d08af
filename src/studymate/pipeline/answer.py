"""
Answer Pipeline Module.

Answers a question from the whole corpus of completed documents:
Assemble context -> Build prompt -> LLM generation -> Persist Question

There is no retrieval step: every completed document is sent as context.
"""

import logging
from collections.abc import Sequence
from typing import Any

from studymate.datasource.base import BaseEntityStore
from studymate.entities.document import Document
from studymate.entities.question import AnswerResult, Confidence, Question
from studymate.errors import GenerationError, InvalidQuestionError, NoKnowledgeBaseError
from studymate.gateway.base import BaseAIGateway
from studymate.pipeline.base import BasePipeline

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n\n---\n\n"

FALLBACK_ANSWER = "I couldn't generate an answer. Please try again."

DEFAULT_PROMPT_TEMPLATE = """You are a helpful study assistant. Use the context below to answer the user's question accurately and helpfully.
Answer only from the provided material. If the answer is not found in the provided material, clearly state that the information is not available in the uploaded documents.
Be concise but thorough. Use bullet points or numbered lists when appropriate for clarity.

CONTEXT FROM UPLOADED DOCUMENTS:
{context}

USER'S QUESTION:
{question}

Please provide a helpful, accurate answer based on the context above."""

ANSWER_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "answer": {
            "type": "string",
            "description": "The complete answer to the user's question based on the provided context"
        },
        "confidence": {
            "type": "string",
            "enum": [c.value for c in Confidence],
            "description": "How well the context supports the answer"
        }
    }
}


def build_context(documents: Sequence[Document], separator: str = CONTEXT_SEPARATOR) -> str:
    """Concatenate documents that have text, in the order given."""
    return separator.join(
        f"[Document: {doc.title}]\n{doc.extracted_text}"
        for doc in documents
        if doc.extracted_text
    )


def build_prompt(context: str, question: str, template: str = DEFAULT_PROMPT_TEMPLATE) -> str:
    return template.format(context=context, question=question)


def _parse_confidence(value: Any) -> Confidence | None:
    try:
        return Confidence(value)
    except (ValueError, TypeError):
        return None


class AnswerPipeline(BasePipeline):
    """
    Grounded question answering over all completed documents.

    Args:
        gateway: AI gateway used for generation.
        questions: Store the answered Question is written to.
        prompt_template: Template with ``{context}`` and ``{question}`` placeholders.
        store_limit: Characters of context kept on the stored Question.
        display_limit: Characters of context returned to the caller.
    """

    def __init__(
        self,
        gateway: BaseAIGateway,
        questions: BaseEntityStore[Question],
        prompt_template: str = DEFAULT_PROMPT_TEMPLATE,
        store_limit: int = 5000,
        display_limit: int = 2000
    ):
        self.gateway = gateway
        self.questions = questions
        self.prompt_template = prompt_template
        self.store_limit = store_limit
        self.display_limit = display_limit

    async def run(self, question_text: str, documents: Sequence[Document]) -> AnswerResult:
        """
        Answer one question.

        Args:
            question_text: The user's question.
            documents: The current completed Documents, in display order.

        Raises:
            InvalidQuestionError: Blank question.
            NoKnowledgeBaseError: No documents; the gateway is not called.
            GenerationError: Prompt building or the gateway failed; nothing is stored.
        """
        question = question_text.strip()
        if not question:
            raise InvalidQuestionError("Question text must not be empty")

        if not documents:
            raise NoKnowledgeBaseError()

        context = build_context(documents)
        logger.info(f"[Answer] Asking with {len(documents)} documents, context={len(context)} chars")

        try:
            prompt = build_prompt(context, question, self.prompt_template)
            response = await self.gateway.invoke_llm(prompt, response_json_schema=ANSWER_SCHEMA)
        except Exception as e:
            logger.error(f"[Answer] Generation failed: {type(e).__name__}: {e}")
            raise GenerationError(original_error=e) from e

        if not isinstance(response, dict):
            response = {}

        answer = response.get("answer")
        if not isinstance(answer, str) or not answer.strip():
            logger.warning("[Answer] Gateway returned no usable answer, using fallback text")
            answer = FALLBACK_ANSWER
        confidence = _parse_confidence(response.get("confidence"))

        record = self.questions.create(Question(
            question_text=question,
            context_used=context[:self.store_limit],
            ai_answer=answer,
            document_ids=[doc.id for doc in documents],
        ))
        logger.info(f"[Answer] Stored question {record.id} (confidence={confidence})")

        return AnswerResult(
            question=question,
            answer=answer,
            context=context[:self.display_limit],
            confidence=confidence,
            question_id=record.id,
        )
