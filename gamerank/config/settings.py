"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables and .env files.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Upstream endpoints
    steamspy_url: str = "https://steamspy.com/api.php"
    store_api_url: str = "https://store.steampowered.com"
    store_url: str = "https://store.steampowered.com/app"

    # Cross-origin relay: requests become GET <relay_url>?url=<target>
    relay_url: str | None = None

    # HTTP
    http_timeout_seconds: float = 30.0

    # Catalog
    catalog_max_pages: int = Field(default=20, ge=1)
    bulk_limit: int = Field(default=100, ge=1)

    # Batching
    batch_size: int = Field(default=10, ge=1)
    batch_policy: Literal["attempts", "successes"] = "attempts"
    enrichment_concurrency: int = Field(default=8, ge=1)

    # Search
    search_page_budget: int = Field(default=5, ge=0)
    search_result_budget: int = Field(default=10, ge=1)

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
