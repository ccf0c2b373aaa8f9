from __future__ import annotations

from pathlib import Path

import pytz
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/dayscore"

    # All LocalDate / LocalTime values are interpreted in this zone
    REFERENCE_TIMEZONE: str = "Asia/Manila"

    # Others
    DEFAULT_TREND_DAYS: int = 30
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("REFERENCE_TIMEZONE")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.exceptions.UnknownTimeZoneError as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value


settings = Settings()
