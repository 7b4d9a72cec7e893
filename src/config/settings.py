"""Application settings using Pydantic Settings.

Centralized configuration for the intake service. Every field can be
overridden with an ``INTAKE_``-prefixed environment variable or a ``.env``
file, e.g. ``INTAKE_LOG_LEVEL=DEBUG``.
"""

import logging
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="INTAKE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application info
    name: str = Field(default="Family Intake", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Root log level")

    # API settings
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins for the intake client",
    )

    # Intake limits
    max_family_members: int = Field(
        default=20,
        ge=1,
        description="Maximum number of family members on one intake form",
    )
    max_sessions: int = Field(
        default=1000,
        ge=1,
        description="Maximum number of intake sessions held in memory at once",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment in ("production", "prod", "staging")


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    settings = Settings()
    if settings.is_production and settings.debug:
        logger.warning("Debug mode is enabled in a production environment")
    return settings
