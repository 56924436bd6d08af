"""
AI gateway backed by any OpenAI-compatible chat completions endpoint.

Uploads are kept on local disk and addressed by ``file://`` URLs. Text
extraction runs locally (see ``studymate.gateway.extractors``); prompt
invocation goes to the configured model, with images attached as data URLs
and PDFs as base64 file parts so the model can read pages that have no
text layer.
"""

from __future__ import annotations

import asyncio
import base64
import json
import mimetypes
import re
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname
from uuid import uuid4

import httpx
from loguru import logger
from openai import AsyncOpenAI, OpenAIError

from studymate.entities.source_file import SourceFile
from studymate.errors import (
    GatewayResponseError,
    InvalidRequestError,
    StudyMateError,
    UploadError,
    wrap_exception,
)

from ..base import BaseAIGateway, ExtractionResult, ExtractionStatus, UploadedFile
from ..extractors import IMAGE_EXTENSIONS, extract_text, supports

ACCEPTED_EXTENSIONS = frozenset({".pdf", ".png", ".jpg", ".jpeg", ".doc", ".docx", ".txt", ".md"})

CONNECT_TIMEOUT = 10.0

FILE_PART_EXTENSIONS = frozenset({".pdf"})

JSON_INSTRUCTION = """Respond with a single JSON object that matches this JSON schema:
{schema}
Do not wrap the JSON in markdown and do not add any other text."""

STRUCTURE_PROMPT = """Extract the requested fields from the document text below.

DOCUMENT TEXT:
{text}"""

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_UNSAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


def parse_json_object(reply: str) -> dict[str, Any]:
    """Parse a model reply that should hold one JSON object.

    An empty reply yields an empty dict.

    Raises:
        GatewayResponseError: the reply is not a JSON object
    """
    cleaned = _FENCE_RE.sub("", reply.strip())
    if not cleaned:
        return {}
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise GatewayResponseError(
            "LLM returned invalid JSON",
            details={"raw_response": reply[:500]},
            original_error=e
        ) from e
    if not isinstance(data, dict):
        raise GatewayResponseError(
            "LLM returned JSON that is not an object",
            details={"raw_response": reply[:500]}
        )
    return data


def single_text_field(json_schema: dict[str, Any]) -> str | None:
    """Name of the only property of an object schema when it is a string, else None."""
    properties = json_schema.get("properties") or {}
    if len(properties) != 1:
        return None
    name, spec = next(iter(properties.items()))
    return name if spec.get("type") == "string" else None


class OpenAICompatibleGateway(BaseAIGateway):
    """
    Gateway for OpenAI-compatible APIs (OpenAI, Azure, vLLM, Ollama, ...).

    Args:
        base_url: API base URL
        api_key: API key (local servers usually accept any value)
        model: Chat model name; must accept image parts to read images
        upload_dir: Directory where uploads are stored
        temperature: Sampling temperature
        timeout: Request timeout in seconds, enforced by the client
        max_upload_bytes: Largest accepted upload
        client: Pre-built AsyncOpenAI client (tests inject a mock)
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        model: str,
        upload_dir: str | Path,
        temperature: float = 0.2,
        timeout: float = 120.0,
        max_upload_bytes: int = 25 * 1024 * 1024,
        client: AsyncOpenAI | None = None
    ):
        if not api_key:
            logger.warning("No LLM API key configured; requests are sent unauthenticated")

        self.model = model
        self.temperature = temperature
        self.max_upload_bytes = max_upload_bytes
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.client = client or AsyncOpenAI(
            base_url=base_url,
            api_key=api_key or "not-needed",
            timeout=httpx.Timeout(timeout, connect=CONNECT_TIMEOUT),
            max_retries=0
        )

    # ==================== Upload ====================

    async def upload_file(self, source: SourceFile) -> UploadedFile:
        details = {"filename": source.filename, "size": source.size}

        if source.extension not in ACCEPTED_EXTENSIONS:
            raise UploadError(
                f"Unsupported file type '{source.extension or source.filename}'",
                details={**details, "accepted": sorted(ACCEPTED_EXTENSIONS)}
            )
        if source.size == 0:
            raise UploadError("File is empty", details=details)
        if source.size > self.max_upload_bytes:
            raise UploadError(
                f"File exceeds the {self.max_upload_bytes / (1024 * 1024):g} MB upload limit",
                details=details
            )

        safe_name = _UNSAFE_NAME_RE.sub("_", Path(source.filename).name)
        target = self.upload_dir / f"{uuid4().hex}_{safe_name}"
        try:
            await asyncio.to_thread(target.write_bytes, source.content)
        except OSError as e:
            raise UploadError(f"Failed to store {source.filename}", details=details, original_error=e) from e

        logger.info(f"Stored upload {source.filename} ({source.size} bytes) at {target}")
        return UploadedFile(file_url=target.resolve().as_uri())

    # ==================== Extraction ====================

    async def extract_data(self, file_url: str, json_schema: dict[str, Any]) -> ExtractionResult:
        try:
            path = self._resolve(file_url)
            text = (await asyncio.to_thread(extract_text, path)).strip()
        except (OSError, ValueError, StudyMateError) as e:
            logger.warning(f"Local extraction failed for {file_url}: {e}")
            return ExtractionResult(status=ExtractionStatus.FAILURE, error=str(e))

        field = single_text_field(json_schema)
        if field is not None:
            return ExtractionResult(status=ExtractionStatus.SUCCESS, output={field: text})

        if not text:
            return ExtractionResult(status=ExtractionStatus.SUCCESS, output={})

        try:
            output = await self.invoke_llm(
                STRUCTURE_PROMPT.format(text=text),
                response_json_schema=json_schema
            )
        except StudyMateError as e:
            logger.warning(f"Structured extraction failed for {file_url}: {e}")
            return ExtractionResult(status=ExtractionStatus.FAILURE, error=str(e))
        return ExtractionResult(status=ExtractionStatus.SUCCESS, output=output)

    # ==================== Invocation ====================

    async def invoke_llm(
        self,
        prompt: str,
        *,
        file_urls: list[str] | None = None,
        response_json_schema: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        content: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
        for url in file_urls or []:
            content.append(await self._attachment_part(url))

        messages: list[dict[str, Any]] = []
        if response_json_schema:
            messages.append({
                "role": "system",
                "content": JSON_INSTRUCTION.format(schema=json.dumps(response_json_schema, indent=2))
            })
        messages.append({"role": "user", "content": content})

        reply = await self._chat(messages, json_mode=bool(response_json_schema))
        if not response_json_schema:
            return {"text": reply}
        return parse_json_object(reply)

    async def _chat(self, messages: list[dict[str, Any]], json_mode: bool = False) -> str:
        kwargs: dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                **kwargs
            )
        except OpenAIError as e:
            logger.error(f"LLM request failed: {type(e).__name__}: {e}")
            raise wrap_exception(e, context="LLM invocation") from e

        if not completion.choices:
            raise GatewayResponseError("LLM returned no choices")
        return completion.choices[0].message.content or ""

    async def _attachment_part(self, file_url: str) -> dict[str, Any]:
        path = self._resolve(file_url)

        if path.suffix.lower() in IMAGE_EXTENSIONS:
            data = await asyncio.to_thread(path.read_bytes)
            mime = mimetypes.guess_type(path.name)[0] or "image/png"
            encoded = base64.b64encode(data).decode("ascii")
            return {"type": "image_url", "image_url": {"url": f"data:{mime};base64,{encoded}"}}

        # Sent whole so the model can read scanned pages without a text layer
        if path.suffix.lower() in FILE_PART_EXTENSIONS:
            data = await asyncio.to_thread(path.read_bytes)
            encoded = base64.b64encode(data).decode("ascii")
            return {
                "type": "file",
                "file": {"filename": path.name, "file_data": f"data:application/pdf;base64,{encoded}"},
            }

        if supports(path):
            try:
                text = await asyncio.to_thread(extract_text, path)
                return {"type": "text", "text": f"[Attachment: {path.name}]\n{text}"}
            except ValueError as e:
                logger.warning(f"Could not read attachment {path.name}: {e}")

        return {"type": "text", "text": f"[Attachment: {path.name} could not be read as text]"}

    def _resolve(self, file_url: str) -> Path:
        """Map a ``file://`` URL issued by ``upload_file`` back to its path."""
        parsed = urlparse(file_url)
        if parsed.scheme != "file":
            raise InvalidRequestError(f"Unsupported file URL: {file_url}")

        path = Path(url2pathname(unquote(parsed.path))).resolve()
        if not path.is_relative_to(self.upload_dir.resolve()):
            raise InvalidRequestError(f"File URL outside the upload directory: {file_url}")
        return path
