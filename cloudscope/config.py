"""CloudScope centralized configuration management.

Uses pydantic-settings to load configuration from environment variables
and .env files with validation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_API_PROGRESS_CAP,
    DEFAULT_BACKEND_URL,
    DEFAULT_PROGRESS_TICK_INTERVAL,
    DEFAULT_PROGRESS_TICK_STEP,
    DEFAULT_REQUEST_TIMEOUT,
)


class Settings(BaseSettings):
    """CloudScope application settings.

    All settings can be overridden via environment variables
    prefixed with CLOUDSCOPE_.

    Example:
        CLOUDSCOPE_BACKEND_URL=http://backend:8080/api
        CLOUDSCOPE_GROUP_STORE_PATH=/var/lib/cloudscope/groups.json
    """

    model_config = SettingsConfigDict(
        env_prefix="CLOUDSCOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Enumeration backend
    backend_url: str = Field(default=DEFAULT_BACKEND_URL, description="Base URL of the cloud backend API")
    backend_token: str = Field(default="", description="Authorization token sent to the backend")
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0, description="Backend request timeout in seconds")

    # Resource group persistence
    group_store_path: Path = Field(
        default=Path.home() / ".cloudscope" / "groups.json",
        description="JSON file holding saved resource groups",
    )

    # API server
    api_host: str = Field(default="127.0.0.1", description="API server bind address")
    api_port: int = Field(default=9850, description="API server port")
    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        description="Comma-separated allowed CORS origins",
    )

    # Progress pacing
    progress_tick_interval: float = Field(
        default=DEFAULT_PROGRESS_TICK_INTERVAL, gt=0, description="Seconds between api progress ticks"
    )
    progress_tick_step: int = Field(default=DEFAULT_PROGRESS_TICK_STEP, ge=1, le=50)
    api_progress_cap: int = Field(
        default=DEFAULT_API_PROGRESS_CAP, ge=0, le=99, description="Ceiling for api progress while waiting"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    def get_cors_origins(self) -> List[str]:
        """Get CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance loaded from environment
    """
    return Settings()


def configure_logging(level: str) -> None:
    """Configure root logging for the CLI and API server."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
