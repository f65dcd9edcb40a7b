"""Application configuration via environment variables."""

import json
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from leavebot.common import constants


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "info"
    CORS_ORIGINS: str = '["http://localhost:3000"]'

    # Leave policy
    ADVANCE_NOTICE_DAYS: int = constants.ADVANCE_NOTICE_DAYS
    MAX_LEAVE_SPAN_DAYS: int = 365

    # Rate limiting (slowapi syntax)
    DEFAULT_RATE_LIMIT: str = "60/minute"
    CALCULATE_RATE_LIMIT: str = "30/minute"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS JSON string into a list."""
        try:
            return json.loads(self.CORS_ORIGINS)
        except (json.JSONDecodeError, TypeError):
            return ["http://localhost:3000"]


settings = Settings()
