"""Document entity: one uploaded study file and its extracted text."""

from enum import StrEnum
from typing import Any, ClassVar

from pydantic import Field

from studymate.errors import InvalidTransitionError

from .base import Entity


class DocumentStatus(StrEnum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not DocumentStatus.PROCESSING


class FileType(StrEnum):
    PDF = "pdf"
    IMAGE = "image"
    DOC = "doc"

    @classmethod
    def from_mime(cls, mime_type: str | None) -> "FileType":
        """Derive the file type from a declared MIME type ("pdf" wins over "image")."""
        mime = (mime_type or "").lower()
        if "pdf" in mime:
            return cls.PDF
        if "image" in mime:
            return cls.IMAGE
        return cls.DOC


class Document(Entity):
    """
    An ingested document.

    Created in ``processing`` right after upload and finalized exactly once
    to ``completed`` (non-empty ``extracted_text``) or ``failed``.
    """

    immutable_fields: ClassVar[frozenset[str]] = frozenset(
        {"id", "created_date", "original_file_url", "file_type"}
    )

    title: str = Field(..., min_length=1)
    original_file_url: str = Field(..., min_length=1)
    file_type: FileType = FileType.DOC
    status: DocumentStatus = DocumentStatus.PROCESSING
    extracted_text: str = ""

    @property
    def has_text(self) -> bool:
        return bool(self.extracted_text)

    def validate_changes(self, changes: dict[str, Any]) -> None:
        super().validate_changes(changes)
        if "status" in changes and self.status.is_terminal:
            new_status = DocumentStatus(changes["status"])
            if new_status != self.status:
                raise InvalidTransitionError(
                    f"Document status is final: {self.status} -> {new_status}",
                    details={"id": self.id}
                )
