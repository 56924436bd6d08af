"""AI gateway interface: file upload, schema-guided extraction, prompt invocation."""

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Any

from pydantic import BaseModel

from studymate.entities.source_file import SourceFile


class UploadedFile(BaseModel):
    file_url: str


class ExtractionStatus(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"


class ExtractionResult(BaseModel):
    status: ExtractionStatus
    output: dict[str, Any] | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == ExtractionStatus.SUCCESS


class BaseAIGateway(ABC):
    """Abstract base class for AI gateways.

    Every call is attempted exactly once; implementations raise StudyMate
    errors for transport failures and leave timeouts to their client.
    """

    @abstractmethod
    async def upload_file(self, source: SourceFile) -> UploadedFile:
        """Store the raw file and return a URL the other primitives accept.

        Raises:
            UploadError: The file was rejected or could not be stored
        """
        pass

    @abstractmethod
    async def extract_data(self, file_url: str, json_schema: dict[str, Any]) -> ExtractionResult:
        """Extract structured data matching ``json_schema`` from an uploaded file.

        Extraction problems are reported through ``status``, not exceptions.
        """
        pass

    @abstractmethod
    async def invoke_llm(
        self,
        prompt: str,
        *,
        file_urls: list[str] | None = None,
        response_json_schema: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Run a prompt, optionally with attached files.

        Fields of ``response_json_schema`` may be missing or empty in the
        returned object; callers must not assume every field is populated.
        """
        pass
