# src/feedback_sentiment/config/config.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _resolve_env_file() -> str:
    here = Path(__file__).resolve()
    for p in (here.parents[2] / ".env", here.parents[1] / ".env", Path(".env")):
        if p.exists():
            return str(p)
    return ".env"


class Settings(BaseSettings):
    # --- Scoring ---
    NORMALIZATION_CONSTANT: float = Field(default=10.0, gt=0)
    NEGATION_ENABLED: bool = True
    LEXICON_PATH: Optional[str] = None  # AFINN-style "word<TAB>weight" file

    # --- Trend bucketing ---
    TREND_TIMEZONE: str = "UTC"

    # --- Storage / boundary defaults ---
    DATA_PATH: str = "data/processed/feedback.parquet"
    DEFAULT_USER_ID: str = "local"
    TOP_CONTRIBUTORS_LIMIT: int = Field(default=10, ge=1)
    RECENT_FEEDBACK_LIMIT: int = Field(default=5, ge=0)

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("LEXICON_PATH", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _known_log_level(cls, v):
        level = (v or "INFO").strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def LOG_LEVEL_NORMALIZED(self) -> str:
        return (self.LOG_LEVEL or "INFO").strip().upper()


@lru_cache()
def get_settings() -> Settings:
    return Settings()
