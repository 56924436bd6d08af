"""Mapping of StudyMate errors to HTTP responses."""

from fastapi import HTTPException, status

from studymate.errors import (
    EntityNotFoundError,
    InvalidQuestionError,
    InvalidTransitionError,
    NoKnowledgeBaseError,
    StudyMateError,
    UploadError,
    is_retryable,
)


def http_error(error: StudyMateError) -> HTTPException:
    """Translate a pipeline/store error into an HTTPException.

    User-correctable problems map to 4xx; gateway failures map to 503 when
    trying again may help and 502 otherwise.
    """
    if isinstance(error, InvalidQuestionError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, NoKnowledgeBaseError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(error, EntityNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, InvalidTransitionError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(error, UploadError) and error.original_error is None:
        code = status.HTTP_400_BAD_REQUEST
    elif is_retryable(error) or is_retryable(error.original_error):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_502_BAD_GATEWAY

    detail = error.to_dict()
    detail["retryable"] = code == status.HTTP_503_SERVICE_UNAVAILABLE
    return HTTPException(status_code=code, detail=detail)
