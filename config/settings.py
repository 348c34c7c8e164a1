"""Application settings and configuration management."""
from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    CONFIG_PATH: str = Field(default="app_config.json")

    STATE_DIR: str = Field(default="data/state")
    PERSIST_STATE: bool = True
    PERSIST_NAMESPACE: str = "persist:root"

    # Remote deployment of the AI endpoints; in-process services when unset.
    AI_API_BASE_URL: Optional[str] = None
    AI_API_TIMEOUT_S: float = Field(default=30.0, gt=0.0)

    TIMER_TICK_SECONDS: float = Field(default=1.0, gt=0.0)
    MESSAGE_PACING: float = Field(default=1.0, ge=0.0)

    ROLE_TITLE: str = "Full Stack Engineer"
    ROLE_FOCUS: str = "React and Node.js"

    LOG_LEVEL: str = "INFO"
    # JSON-lines event log; console only when empty.
    EVENT_LOG_FILE: str = ""
    EVENT_LOG_MAX_BYTES: int = Field(default=5_242_880, gt=0)
    EVENT_LOG_BACKUPS: int = Field(default=5, ge=0)

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
