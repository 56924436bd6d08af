"""问答历史 API"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from studymate.engine import StudyAssistant
from studymate.entities import Question
from studymate.history import HistoryOrder
from web.core.context import get_assistant
from web.routers.documents import DeleteResponse, DocumentResponse

router = APIRouter(prefix="/api", tags=["history"])


class QuestionResponse(BaseModel):
    id: str
    question_text: str
    context_used: str
    ai_answer: str
    document_ids: List[str]
    created_date: datetime

    @classmethod
    def from_entity(cls, question: Question) -> "QuestionResponse":
        return cls.model_validate(question.model_dump())


class DayGroup(BaseModel):
    day: date
    questions: List[QuestionResponse]


class OverviewResponse(BaseModel):
    document_count: int
    question_count: int
    recent_documents: List[DocumentResponse]
    recent_questions: List[QuestionResponse]


@router.get("/questions", response_model=List[QuestionResponse])
def list_questions(
    search: Optional[str] = None,
    order: HistoryOrder = HistoryOrder.NEWEST,
    limit: Optional[int] = Query(None, ge=1),
    assistant: StudyAssistant = Depends(get_assistant)
):
    """问答历史，支持搜索与排序"""
    questions = assistant.list_questions(search=search, order=order, limit=limit)
    return [QuestionResponse.from_entity(q) for q in questions]


@router.get("/questions/by-day", response_model=List[DayGroup])
def questions_by_day(
    search: Optional[str] = None,
    order: HistoryOrder = HistoryOrder.NEWEST,
    tz_offset_minutes: int = Query(0, ge=-720, le=840, description="客户端时区相对 UTC 的偏移（分钟）"),
    assistant: StudyAssistant = Depends(get_assistant)
):
    """按日期分组的问答历史，日期按客户端时区计算（默认 UTC）"""
    tz = timezone(timedelta(minutes=tz_offset_minutes))
    groups = assistant.question_history(search=search, order=order, tz=tz)
    return [
        DayGroup(day=day, questions=[QuestionResponse.from_entity(q) for q in questions])
        for day, questions in groups.items()
    ]


@router.delete("/questions/{question_id}", response_model=DeleteResponse)
def delete_question(question_id: str, assistant: StudyAssistant = Depends(get_assistant)):
    return DeleteResponse(deleted=assistant.delete_question(question_id))


@router.get("/overview", response_model=OverviewResponse)
def overview(assistant: StudyAssistant = Depends(get_assistant)):
    """首页概览：数量统计与最近记录"""
    data = assistant.overview()
    return OverviewResponse(
        document_count=data.document_count,
        question_count=data.question_count,
        recent_documents=[DocumentResponse.from_entity(d) for d in data.recent_documents],
        recent_questions=[QuestionResponse.from_entity(q) for q in data.recent_questions],
    )
