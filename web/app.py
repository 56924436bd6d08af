"""
StudyMate Web Application
业务层应用，使用 studymate 作为核心引擎
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from studymate import __version__
from studymate.config import settings
from web.core.context import build_assistant, set_assistant
from web.core.database import engine, init_db
from web.routers import ask_router, document_router, history_router

# Setup logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("web-app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # Startup
    logger.info("Initializing database...")
    init_db(engine)

    set_assistant(build_assistant(engine))
    logger.info(f"Application started successfully (gateway: {settings.GATEWAY_TYPE}, model: {settings.LLM_MODEL})")

    yield

    # Shutdown
    set_assistant(None)
    logger.info("Application shutting down...")


# Initialize FastAPI
app = FastAPI(
    title="StudyMate API",
    description="Upload study notes and ask questions grounded in them",
    version=__version__,
    lifespan=lifespan
)

# Register routers
app.include_router(document_router)
app.include_router(ask_router)
app.include_router(history_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
