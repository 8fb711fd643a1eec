"""
app/config.py -- Application settings loaded from environment / .env.

TXN_API_URL unset -> the fixed local dataset is used as the data source.
"""
from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Data source
    # ======================
    TXN_API_URL: Optional[str] = None
    HTTP_TIMEOUT_SECONDS: float = 10.0
    FIXTURE_DELAY_SECONDS: float = 0.0
    STRICT_RECORDS: bool = False

    # ======================
    # Paging
    # ======================
    PAGE_SIZE: int = 10

    # ======================
    # Application
    # ======================
    LOG_LEVEL: str = "INFO"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 5477

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
