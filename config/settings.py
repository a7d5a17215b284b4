"""Application settings and configuration management."""
from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/interviews.db")

    SCORE_FLOOR: int = Field(default=70, ge=0, le=100)
    SCORE_CEILING: int = Field(default=99, ge=0, le=100)
    SCORING_SEED: Optional[int] = None
    HIGHLIGHT_LIMIT: int = Field(default=3, ge=0)
    HIGHLIGHT_QUOTE_CHARS: int = Field(default=100, ge=1)

    SHARE_TOKEN_BYTES: int = Field(default=24, ge=16)
    SHARE_TTL_DAYS: Optional[int] = Field(default=None, ge=1)

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True)


settings = Settings()
