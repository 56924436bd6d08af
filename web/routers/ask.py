"""提问 API"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from studymate.engine import StudyAssistant
from studymate.entities import Confidence
from studymate.errors import StudyMateError
from web.core.context import get_assistant
from web.core.errors import http_error

router = APIRouter(prefix="/api/ask", tags=["ask"])


class AskRequest(BaseModel):
    question: str


class AskResponse(BaseModel):
    question: str
    answer: str
    context: str
    confidence: Optional[Confidence] = None
    question_id: Optional[str] = None


@router.post("", response_model=AskResponse)
async def ask_question(req: AskRequest, assistant: StudyAssistant = Depends(get_assistant)):
    """根据已完成的文档回答问题"""
    try:
        result = await assistant.ask(req.question)
    except StudyMateError as e:
        raise http_error(e) from e
    return AskResponse(**result.model_dump())
