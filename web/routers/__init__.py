"""API routers."""

from .ask import router as ask_router
from .documents import router as document_router
from .history import router as history_router

__all__ = ["document_router", "ask_router", "history_router"]
