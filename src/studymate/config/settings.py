import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from studymate.errors import ConfigurationError

# This file: src/studymate/config/settings.py
SERVER_ROOT = Path(__file__).resolve().parent.parent.parent.parent
ENV_PATH = SERVER_ROOT / ".env"

if ENV_PATH.exists():
    load_dotenv(ENV_PATH)
else:
    # Fallback to simple load_dotenv which looks in cwd
    load_dotenv()


class Settings(BaseModel):
    """Global Application Settings"""

    # Environment
    ENV: str = Field(default="development", description="Environment: development, production, testing")
    LOG_LEVEL: str = Field(default="INFO", description="Log level")

    # Project Paths
    ROOT_DIR: Path = Field(default=SERVER_ROOT, description="Project root directory")

    # Storage
    DATABASE_URL: str = Field(
        default=f"sqlite:///{SERVER_ROOT / 'storage' / 'studymate.db'}",
        description="SQLAlchemy URL of the entity database"
    )
    UPLOAD_DIR: Path = Field(default=SERVER_ROOT / "storage" / "uploads", description="Where uploaded files are kept")
    MAX_UPLOAD_MB: float = Field(default=25.0, gt=0, description="Largest accepted upload")

    # AI Gateway
    GATEWAY_TYPE: str = Field(default="openai", description="Registered gateway type")
    LLM_BASE_URL: str = Field(default="https://api.openai.com/v1", description="OpenAI-compatible base URL")
    LLM_API_KEY: Optional[str] = Field(default=None, description="API key for the LLM endpoint")
    LLM_MODEL: str = Field(default="gpt-4o-mini", description="Chat model (vision capable for images)")
    LLM_TEMPERATURE: float = Field(default=0.2, ge=0.0, le=2.0)
    LLM_TIMEOUT: float = Field(default=120.0, gt=0, description="Per-request timeout enforced by the client")

    # Answering
    CONTEXT_STORE_LIMIT: int = Field(default=5000, gt=0, description="Characters of context kept on a Question")
    CONTEXT_DISPLAY_LIMIT: int = Field(default=2000, gt=0, description="Characters of context returned to callers")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True
    }


def _env_number(name: str, default: str, cast: type) -> float | int:
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid value for {name}: {raw!r}",
            details={"variable": name},
            original_error=e
        ) from e


def load_settings() -> Settings:
    """Load settings from environment variables.

    Raises:
        ConfigurationError: a variable is not a number or is out of range
    """
    try:
        return _build_settings()
    except ValidationError as e:
        invalid = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
        raise ConfigurationError(
            f"Invalid settings: {', '.join(invalid)}",
            details={"variables": invalid},
            original_error=e
        ) from e


def _build_settings() -> Settings:
    return Settings(
        ENV=os.getenv("ENV", "development"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        ROOT_DIR=SERVER_ROOT,
        DATABASE_URL=os.getenv("DATABASE_URL", f"sqlite:///{SERVER_ROOT / 'storage' / 'studymate.db'}"),
        UPLOAD_DIR=Path(os.getenv("UPLOAD_DIR", str(SERVER_ROOT / "storage" / "uploads"))),
        MAX_UPLOAD_MB=_env_number("MAX_UPLOAD_MB", "25", float),
        GATEWAY_TYPE=os.getenv("GATEWAY_TYPE", "openai"),
        LLM_BASE_URL=os.getenv("LLM_BASE_URL", "https://api.openai.com/v1"),
        LLM_API_KEY=os.getenv("LLM_API_KEY"),
        LLM_MODEL=os.getenv("LLM_MODEL", "gpt-4o-mini"),
        LLM_TEMPERATURE=_env_number("LLM_TEMPERATURE", "0.2", float),
        LLM_TIMEOUT=_env_number("LLM_TIMEOUT", "120", float),
        CONTEXT_STORE_LIMIT=_env_number("CONTEXT_STORE_LIMIT", "5000", int),
        CONTEXT_DISPLAY_LIMIT=_env_number("CONTEXT_DISPLAY_LIMIT", "2000", int),
    )


# Global settings instance
settings = load_settings()
