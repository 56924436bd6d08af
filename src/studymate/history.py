"""Question history: search, ordering and grouping by day."""

from collections.abc import Iterable
from datetime import date, timezone, tzinfo
from enum import StrEnum

from studymate.entities.question import Question


class HistoryOrder(StrEnum):
    NEWEST = "newest"
    OLDEST = "oldest"

    @property
    def sort_spec(self) -> str:
        return "-created_date" if self is HistoryOrder.NEWEST else "created_date"


def matches(question: Question, query: str) -> bool:
    """Case-insensitive substring match on the question or its answer."""
    needle = query.strip().lower()
    if not needle:
        return True
    return needle in question.question_text.lower() or needle in question.ai_answer.lower()


def search_questions(questions: Iterable[Question], query: str | None) -> list[Question]:
    if not query:
        return list(questions)
    return [q for q in questions if matches(q, query)]


def group_by_day(questions: Iterable[Question], tz: tzinfo = timezone.utc) -> dict[date, list[Question]]:
    """
    Group questions by the calendar day they were asked in ``tz``.

    Days are UTC unless the caller passes its own timezone, so a question
    asked late in the evening lands on the user's local day.
    Groups appear in the order their first question appears, so a list
    sorted newest-first yields days newest-first.
    """
    groups: dict[date, list[Question]] = {}
    for question in questions:
        groups.setdefault(question.created_date.astimezone(tz).date(), []).append(question)
    return groups
