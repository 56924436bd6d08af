"""Tests for the StudyMate error hierarchy."""

import pytest

from studymate.errors import (
    AuthenticationError,
    ConnectionError,
    GenerationError,
    IngestionError,
    InvalidRequestError,
    NoKnowledgeBaseError,
    NotFoundError,
    PermanentError,
    RateLimitError,
    RetryableError,
    ServiceUnavailableError,
    StudyMateError,
    TimeoutError,
    TransientError,
    classify_http_error,
    is_retryable,
    wrap_exception,
)


class TestStudyMateError:
    """Tests for the base error."""

    def test_str_includes_details_and_cause(self):
        cause = ValueError("bad")
        error = StudyMateError("Failed", details={"id": "x"}, original_error=cause)

        text = str(error)

        assert "Failed" in text
        assert "'id': 'x'" in text
        assert "ValueError: bad" in text

    def test_to_dict(self):
        error = StudyMateError("Failed", details={"id": "x"})

        assert error.to_dict() == {
            "error_type": "StudyMateError",
            "message": "Failed",
            "details": {"id": "x"},
            "original_error": None,
        }

    def test_ingestion_error_carries_document_id(self):
        error = IngestionError("Failed to process", document_id="doc-1")

        assert error.document_id == "doc-1"
        assert error.details["document_id"] == "doc-1"

    def test_no_knowledge_base_default_message(self):
        assert "upload some documents" in NoKnowledgeBaseError().message


class TestClassifyHttpError:
    """Tests for classify_http_error."""

    @pytest.mark.parametrize("status,expected", [
        (429, RateLimitError),
        (401, AuthenticationError),
        (403, AuthenticationError),
        (400, InvalidRequestError),
        (404, NotFoundError),
        (503, ServiceUnavailableError),
        (500, TransientError),
        (502, TransientError),
        (418, PermanentError),
    ])
    def test_status_mapping(self, status, expected):
        error = classify_http_error(status)

        assert type(error) is expected
        assert error.details["status_code"] == status

    def test_retry_after_header(self):
        error = classify_http_error(429, headers={"Retry-After": "30"})

        assert error.retry_after == 30.0

    def test_invalid_retry_after_ignored(self):
        error = classify_http_error(503, headers={"Retry-After": "soon"})

        assert error.retry_after is None


class TestWrapException:
    """Tests for wrap_exception."""

    def test_passes_through_studymate_errors(self):
        error = InvalidRequestError("nope")

        assert wrap_exception(error) is error

    def test_status_code_attribute(self):
        class FakeStatusError(Exception):
            status_code = 429

        original = FakeStatusError("slow down")
        wrapped = wrap_exception(original, context="LLM invocation")

        assert isinstance(wrapped, RateLimitError)
        assert wrapped.original_error is original
        assert wrapped.message.startswith("LLM invocation:")

    def test_timeout_by_type_name(self):
        class APITimeoutError(Exception):
            pass

        assert isinstance(wrap_exception(APITimeoutError("x")), TimeoutError)

    def test_connection_by_type_name(self):
        class APIConnectionError(Exception):
            pass

        assert isinstance(wrap_exception(APIConnectionError("x")), ConnectionError)

    def test_rate_limit_by_message(self):
        assert isinstance(wrap_exception(RuntimeError("Rate limit reached")), RateLimitError)

    def test_unknown_is_permanent(self):
        wrapped = wrap_exception(RuntimeError("boom"))

        assert type(wrapped) is PermanentError
        assert not is_retryable(wrapped)


class TestIsRetryable:
    """Tests for is_retryable and GenerationError.retryable."""

    def test_retryable_hierarchy(self):
        assert is_retryable(RateLimitError())
        assert is_retryable(TimeoutError(timeout=5))
        assert isinstance(ServiceUnavailableError(), RetryableError)
        assert not is_retryable(AuthenticationError())
        assert not is_retryable(ValueError("x"))
        assert not is_retryable(None)

    def test_generation_error_inherits_cause_retryability(self):
        assert GenerationError(original_error=ServiceUnavailableError()).retryable
        assert is_retryable(GenerationError(original_error=ConnectionError()))
        assert not GenerationError(original_error=AuthenticationError()).retryable
        assert not GenerationError().retryable
