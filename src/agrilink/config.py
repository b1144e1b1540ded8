"""
agrilink/config.py - runtime configuration.

Values come from the environment (prefix ``AGRILINK_``) or a local ``.env``
file. Leave ``AGRILINK_DATABASE_URL`` unset to keep orders in memory.
"""
from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from agrilink.core.domain.service.metrics_service import DEFAULT_SHARE


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AGRILINK_", env_file=".env", case_sensitive=False, extra="ignore"
    )

    database_url: Optional[str] = Field(None, description="SQLAlchemy URL; None = in-memory")
    token_retries: int = Field(1, ge=0, description="Extra attempts on a token collision")
    matrix_size: int = Field(5, ge=1, le=64)
    contribution_share: Decimal = Field(DEFAULT_SHARE, ge=0, le=1)
    metrics_window: int = Field(4, ge=1)
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8787


@lru_cache
def get_settings() -> Settings:
    return Settings()
