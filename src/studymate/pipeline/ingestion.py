"""
Ingestion Pipeline Module.

Turns one uploaded file into a queryable Document:
Upload -> Create record -> Structured extraction -> Fallback prompt -> Finalize

The record is created in ``processing`` and always finalized, even when an
extraction step raises, so it never stays ``processing`` after a run.
"""

import asyncio
import logging
from typing import Any

from studymate.datasource.base import BaseEntityStore
from studymate.entities.document import Document, DocumentStatus, FileType
from studymate.entities.source_file import SourceFile
from studymate.errors import IngestionError, StudyMateError, UploadError
from studymate.gateway.base import BaseAIGateway
from studymate.pipeline.base import BasePipeline

logger = logging.getLogger(__name__)

EXTRACTION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "extracted_text": {
            "type": "string",
            "description": "All text content extracted from the document"
        }
    }
}

FALLBACK_EXTRACTION_PROMPT = (
    "Extract all text content from this document. "
    "Return only the extracted text, no explanations."
)

FALLBACK_EXTRACTION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "text": {"type": "string", "description": "All extracted text from the document"}
    }
}


def _as_text(value: Any) -> str:
    """Non-string or missing values count as no text."""
    return value.strip() if isinstance(value, str) else ""


class IngestionPipeline(BasePipeline):
    """
    Document ingestion pipeline.

    Side effects per run: one Document create, at most one Document update,
    and one or two gateway extraction calls after the upload.
    """

    def __init__(self, gateway: BaseAIGateway, documents: BaseEntityStore[Document]):
        self.gateway = gateway
        self.documents = documents

    async def run(self, source: SourceFile, title: str | None = None) -> Document:
        """
        Ingest one file.

        Args:
            source: The uploaded file.
            title: Display name; defaults to the file name.

        Returns:
            The finalized Document (``completed`` or ``failed``).

        Raises:
            UploadError: Upload failed; no Document was created.
            IngestionError: Extraction raised (the Document was finalized as
                ``failed``), or the final update of the Document failed.
        """
        logger.info(f"[Ingestion] Uploading {source.filename} ({source.size} bytes, {source.content_type})")

        # 1. Upload
        try:
            uploaded = await self.gateway.upload_file(source)
        except UploadError:
            raise
        except Exception as e:
            raise UploadError(
                f"Failed to upload {source.filename}",
                details={"filename": source.filename},
                original_error=e
            ) from e

        # 2. Record creation
        doc = self.documents.create(Document(
            title=(title or "").strip() or source.filename,
            original_file_url=uploaded.file_url,
            file_type=FileType.from_mime(source.content_type),
            status=DocumentStatus.PROCESSING,
        ))
        logger.info(f"[Ingestion] Created document {doc.id} ({doc.file_type})")

        # 3-5. Extraction, always followed by finalization
        text = ""
        try:
            text = await self._extract_primary(uploaded.file_url)
            if not text:
                text = await self._extract_fallback(uploaded.file_url)
        except Exception as e:
            logger.exception(f"[Ingestion] Extraction failed for document {doc.id}")
            self._mark_failed(doc)
            raise IngestionError(
                f"Failed to process {doc.title}",
                document_id=doc.id,
                original_error=e
            ) from e
        except asyncio.CancelledError:
            self._mark_failed(doc)
            raise

        try:
            return self._finalize(doc, text)
        except StudyMateError as e:
            logger.error(f"[Ingestion] Could not finalize document {doc.id}: {e}")
            raise IngestionError(
                f"Failed to save the extracted text of {doc.title}",
                document_id=doc.id,
                original_error=e
            ) from e

    async def _extract_primary(self, file_url: str) -> str:
        result = await self.gateway.extract_data(file_url, EXTRACTION_SCHEMA)
        if not result.succeeded or not result.output:
            logger.info(f"[Ingestion] Structured extraction returned no output ({result.status}: {result.error})")
            return ""
        return _as_text(result.output.get("extracted_text"))

    async def _extract_fallback(self, file_url: str) -> str:
        logger.info("[Ingestion] No text from structured extraction, falling back to prompt invocation")
        response = await self.gateway.invoke_llm(
            FALLBACK_EXTRACTION_PROMPT,
            file_urls=[file_url],
            response_json_schema=FALLBACK_EXTRACTION_SCHEMA
        )
        if not isinstance(response, dict):
            return ""
        return _as_text(response.get("text"))

    def _finalize(self, doc: Document, text: str) -> Document:
        status = DocumentStatus.COMPLETED if text else DocumentStatus.FAILED
        finalized = self.documents.update(doc.id, {"extracted_text": text, "status": status})
        logger.info(f"[Ingestion] Document {doc.id} finalized as {status} ({len(text)} characters)")
        return finalized

    def _mark_failed(self, doc: Document) -> None:
        """Finalize as ``failed`` without hiding the error being handled."""
        try:
            self._finalize(doc, "")
        except Exception:
            logger.exception(f"[Ingestion] Could not mark document {doc.id} as failed")
