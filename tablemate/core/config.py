"""Application configuration.

This module defines a ``Settings`` class that reads configuration
values from environment variables and provides sensible defaults.
``.env`` support is implemented by loading the file discovered by
python-dotenv before the settings object is built.  Variables that are
already present in the environment always win.
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# -----------------------------------------------------------------------------
# .env loading
#
# Whatever python-dotenv discovers from the current working directory is
# loaded without overriding already-set variables.

_FOUND_ENV = find_dotenv(usecwd=True)
if _FOUND_ENV:
    load_dotenv(dotenv_path=_FOUND_ENV, override=False)


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from the environment with sensible defaults.  Any
    attribute defined here can be overridden by setting the corresponding
    environment variable.
    """

    model_config = SettingsConfigDict(
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    # API Settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Tablemate"
    ENVIRONMENT: str = Field(default="development")
    LOG_LEVEL: str = Field(default="INFO")

    # Database
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./tablemate.db")

    # Storage backend: "database" uses SQLAlchemy, "memory" keeps records in
    # process memory (handy for demos and tests).
    STORAGE_BACKEND: str = Field(default="database")
    SEED_DEMO_DATA: bool = Field(default=True)

    # OpenAI.  The older OPENAI_KEY name is accepted as well.
    OPENAI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "OPENAI_KEY"),
    )
    OPENAI_MODEL: str = Field(default="gpt-4o")
    ANALYSIS_TIMEOUT_SECONDS: float = Field(default=30.0)

    # File Upload
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB

    # CORS
    BACKEND_CORS_ORIGINS: list[str] = Field(
        default=["http://localhost:5173", "http://127.0.0.1:5173"],
    )

    # Sentry
    SENTRY_DSN: Optional[str] = Field(default=None)
    SENTRY_TRACES_SAMPLE_RATE: float = Field(default=0.0)
    SENTRY_RELEASE: Optional[str] = Field(default=None)

    @property
    def is_development(self) -> bool:
        return (self.ENVIRONMENT or "development").lower() == "development"

    @property
    def uses_memory_storage(self) -> bool:
        return (self.STORAGE_BACKEND or "").lower() == "memory"


# Instantiate global settings
settings = Settings()

# Libraries that read the key straight from the environment see the same value
if settings.OPENAI_API_KEY:
    os.environ.setdefault("OPENAI_API_KEY", settings.OPENAI_API_KEY)
