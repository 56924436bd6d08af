"""Database engine and schema management."""

import logging
from pathlib import Path

from sqlalchemy.engine import Engine, make_url
from sqlmodel import SQLModel, create_engine

from studymate.config import settings

# Register tables on SQLModel.metadata
from web.models import database as _models  # noqa: F401

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str) -> Engine:
    """Create an engine; SQLite files get their directory created."""
    url = make_url(database_url)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        # FastAPI runs sync dependencies in a threadpool
        connect_args["check_same_thread"] = False
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(database_url, echo=False, connect_args=connect_args)


engine = create_db_engine(settings.DATABASE_URL)


def init_db(db_engine: Engine = engine) -> None:
    """初始化数据库，创建所有表"""
    SQLModel.metadata.create_all(db_engine)
    logger.info(f"Database initialized at {db_engine.url}")
