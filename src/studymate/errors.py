"""
StudyMate error classification.

Errors fall into three groups:

1. Retryable errors: transient AI gateway failures (rate limiting, service
   unavailable, timeouts, dropped connections). Nothing in StudyMate retries
   automatically; the flag tells the caller that asking again may succeed.

2. Permanent errors: failures that need user or operator action (bad
   credentials, invalid requests, missing resources, configuration).

3. Domain errors: raised by the ingestion and answer pipelines and the
   entity stores.

Every class carries a ``default_message`` so callers only pass a message
when they have something more specific to say.

Usage:
------
    from studymate.errors import GenerationError, NoKnowledgeBaseError

    try:
        result = await assistant.ask(question)
    except NoKnowledgeBaseError:
        # Nothing has been ingested yet
        ...
    except GenerationError as e:
        if e.retryable:
            ...
"""

from typing import Any, ClassVar


class StudyMateError(Exception):
    """
    Base exception for all StudyMate errors.

    Attributes:
        message: Human-readable description (``default_message`` when omitted)
        details: Structured context, e.g. ids or status codes
        original_error: The exception this one was raised from, if any
    """

    default_message: ClassVar[str] = "StudyMate error"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        self.message = message or self.default_message
        self.details = details or {}
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self) -> str:
        text = self.message
        if self.details:
            text += f" {self.details}"
        if self.original_error is not None:
            text += f" (from {type(self.original_error).__name__}: {self.original_error})"
        return text

    def to_dict(self) -> dict[str, Any]:
        """Serializable form, used for API error bodies and logs."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "details": self.details,
            "original_error": str(self.original_error) if self.original_error else None
        }


# =============================================================================
# Retryable Errors
# =============================================================================

class RetryableError(StudyMateError):
    """
    A failure that may go away if the user tries again.

    Attributes:
        retry_after: Seconds the service asked us to wait, if it said so
    """

    default_message = "Temporary failure"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None,
        retry_after: float | None = None
    ):
        super().__init__(message, details, original_error)
        self.retry_after = retry_after


class RateLimitError(RetryableError):
    """HTTP 429 from the AI service."""
    default_message = "API rate limit exceeded"


class ServiceUnavailableError(RetryableError):
    """HTTP 503 from the AI service."""
    default_message = "Service temporarily unavailable"


class ConnectionError(RetryableError):
    """The AI service could not be reached."""
    default_message = "Failed to connect to service"


class TimeoutError(RetryableError):
    """The AI service did not answer within the client timeout."""

    default_message = "Request timed out"

    def __init__(
        self,
        message: str | None = None,
        timeout: float | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, {**(details or {}), "timeout": timeout}, original_error)
        self.timeout = timeout


class TransientError(RetryableError):
    """Unclassified server-side (5xx) failure."""
    default_message = "Server error"


# =============================================================================
# Permanent Errors
# =============================================================================

class PermanentError(StudyMateError):
    """A failure that trying again will not fix."""
    default_message = "Request failed"


class AuthenticationError(PermanentError):
    """HTTP 401/403: the AI service rejected the credentials."""
    default_message = "Authentication failed - check LLM_API_KEY"


class InvalidRequestError(PermanentError):
    """HTTP 400, or a request StudyMate refuses to send."""
    default_message = "Invalid request parameters"


class NotFoundError(PermanentError):
    """HTTP 404 from the AI service (unknown model or endpoint)."""
    default_message = "Resource not found"


class ConfigurationError(PermanentError):
    """Missing or invalid settings."""
    default_message = "Configuration error"


# =============================================================================
# Domain-Specific Errors
# =============================================================================

class UploadError(StudyMateError):
    """Raised when a file cannot be uploaded. No Document is created."""
    default_message = "Upload failed"


class IngestionError(StudyMateError):
    """
    Raised when ingestion fails after the Document record was created.

    When extraction raised, the record has already been finalized as
    ``failed``. It is also raised when the final update of the record fails.
    ``document_id`` identifies the record in both cases.
    """

    default_message = "Document processing failed"

    def __init__(
        self,
        message: str | None = None,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        details = dict(details or {})
        if document_id is not None:
            details["document_id"] = document_id
        super().__init__(message, details, original_error)
        self.document_id = document_id


class GatewayResponseError(StudyMateError):
    """Raised when the AI gateway returns a reply that cannot be parsed."""
    default_message = "Unreadable response from the AI service"


class NoKnowledgeBaseError(StudyMateError):
    """Raised when a question is asked before any document is completed."""
    default_message = "No completed documents to answer from. Please upload some documents first."


class InvalidQuestionError(StudyMateError):
    """Raised for blank question text."""
    default_message = "Question text must not be empty"


class GenerationError(StudyMateError):
    """
    Raised when answer generation fails. No Question is persisted.

    Attributes:
        retryable: True when the underlying gateway failure was transient
    """

    default_message = "Failed to generate answer"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ):
        super().__init__(message, details, original_error)
        self.retryable = is_retryable(original_error)


class EntityNotFoundError(StudyMateError):
    """Raised when an entity store is asked to update an unknown id."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} '{entity_id}' not found", details={"id": entity_id})
        self.entity = entity
        self.entity_id = entity_id


class InvalidTransitionError(StudyMateError):
    """Raised when an update would change an immutable field or reopen a terminal status."""
    default_message = "Invalid entity update"


# =============================================================================
# Helper Functions
# =============================================================================

_STATUS_ERRORS: dict[int, type[StudyMateError]] = {
    400: InvalidRequestError,
    401: AuthenticationError,
    403: AuthenticationError,
    404: NotFoundError,
    429: RateLimitError,
    503: ServiceUnavailableError,
}


def is_retryable(error: BaseException | None) -> bool:
    """Check whether an error is (or wraps) a transient failure."""
    if isinstance(error, GenerationError):
        return error.retryable
    return isinstance(error, RetryableError)


def _retry_after(headers: dict[str, Any]) -> float | None:
    value = headers.get("Retry-After") or headers.get("retry-after")
    try:
        return float(value) if value is not None else None
    except (ValueError, TypeError):
        return None


def classify_http_error(status_code: int, message: str = "", headers: dict | None = None) -> StudyMateError:
    """
    Classify an HTTP error returned by the AI service.

    Args:
        status_code: HTTP status code
        message: Error message from the response (class default when empty)
        headers: Response headers; ``Retry-After`` is kept on retryable errors

    Returns:
        The matching StudyMateError subclass instance
    """
    details = {"status_code": status_code}
    error_cls = _STATUS_ERRORS.get(status_code)
    if error_cls is None:
        error_cls = TransientError if status_code >= 500 else PermanentError
        message = message or f"HTTP error {status_code}"

    if issubclass(error_cls, RetryableError):
        return error_cls(message or None, details=details, retry_after=_retry_after(headers or {}))
    return error_cls(message or None, details=details)


def wrap_exception(error: Exception, context: str = "") -> StudyMateError:
    """
    Wrap a client/transport exception in the matching StudyMateError.

    HTTP status errors (anything carrying a ``status_code``) are classified by
    status; everything else by its type name and message.

    Example:
        try:
            completion = await client.chat.completions.create(...)
        except openai.OpenAIError as e:
            raise wrap_exception(e, context="LLM invocation") from e
    """
    if isinstance(error, StudyMateError):
        return error

    message = f"{context}: {error}" if context else str(error)

    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        headers = getattr(getattr(error, "response", None), "headers", None)
        wrapped = classify_http_error(status_code, message, dict(headers or {}))
        wrapped.original_error = error
        return wrapped

    type_name = type(error).__name__.lower()
    text = str(error).lower()

    if "timeout" in type_name or "timed out" in text:
        return TimeoutError(message, original_error=error)
    if "connection" in type_name or any(word in text for word in ("connection", "network", "dns")):
        return ConnectionError(message, original_error=error)
    if "rate limit" in text or "too many requests" in text:
        return RateLimitError(message, original_error=error)
    return PermanentError(message, original_error=error)
