"""Tests for assistant wiring and HTTP error mapping in the web layer."""

import pytest
from sqlmodel import create_engine
from sqlmodel.pool import StaticPool

from studymate.config.settings import Settings
from studymate.errors import (
    ConnectionError,
    EntityNotFoundError,
    GatewayResponseError,
    IngestionError,
    InvalidQuestionError,
    InvalidTransitionError,
    NoKnowledgeBaseError,
    UploadError,
)
from web.core import context
from web.core.entity_store import SQLModelEntityStore
from web.core.errors import http_error


@pytest.fixture(autouse=True)
def reset_assistant():
    context.set_assistant(None)
    yield
    context.set_assistant(None)


class TestAssistantContext:
    """Tests for build_assistant and get_assistant."""

    def test_build_assistant_uses_sqlmodel_stores(self, temp_dir):
        engine = create_engine("sqlite://", poolclass=StaticPool)

        assistant = context.build_assistant(engine, Settings(UPLOAD_DIR=temp_dir))

        assert isinstance(assistant.documents, SQLModelEntityStore)
        assert isinstance(assistant.questions, SQLModelEntityStore)
        assert assistant.documents.engine is engine

    def test_get_assistant_returns_installed_instance(self, assistant):
        context.set_assistant(assistant)

        assert context.get_assistant() is assistant

    def test_get_assistant_builds_lazily_once(self, mocker, assistant):
        init_db = mocker.patch("web.core.database.init_db")
        build = mocker.patch("web.core.context.build_assistant", return_value=assistant)

        first = context.get_assistant()
        second = context.get_assistant()

        assert first is second is assistant
        init_db.assert_called_once()
        build.assert_called_once()


class TestHttpError:
    """Tests for http_error."""

    @pytest.mark.parametrize("error,status", [
        (InvalidQuestionError("blank"), 400),
        (UploadError("too big"), 400),
        (NoKnowledgeBaseError(), 409),
        (InvalidTransitionError("final"), 409),
        (EntityNotFoundError("Document", "x"), 404),
        (UploadError("disk", original_error=OSError("full")), 502),
        (GatewayResponseError("bad json"), 502),
        (IngestionError("failed", document_id="d1", original_error=ConnectionError()), 503),
        (ConnectionError(), 503),
    ])
    def test_status_codes(self, error, status):
        exc = http_error(error)

        assert exc.status_code == status
        assert exc.detail["error_type"] == type(error).__name__
        assert exc.detail["retryable"] is (status == 503)

    def test_detail_carries_document_id(self):
        exc = http_error(IngestionError("failed", document_id="d1"))

        assert exc.detail["details"]["document_id"] == "d1"
