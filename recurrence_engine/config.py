"""
Configuration management for the recurrence engine.

Uses Pydantic Settings for type-safe environment variable loading.
Values can come from a .env file or RECURRENCE_* environment variables.
"""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Example:
        RECURRENCE_FIRST_DAY_OF_WEEK=0  # weeks start on Sunday
    """

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the recurrence_engine logger"
    )

    # Calendar preferences
    first_day_of_week: int = Field(
        default=1,
        ge=0,
        le=6,
        description="First day of the week for week views (0 = Sunday, 1 = Monday)"
    )
    default_end_after_occurrences: int = Field(
        default=10,
        ge=1,
        description="Occurrence count used when an 'after' end condition omits it"
    )

    model_config = SettingsConfigDict(
        env_prefix="RECURRENCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance loaded from environment

    Example:
        >>> from recurrence_engine.config import get_settings
        >>> get_settings().first_day_of_week
        1
    """
    return Settings()


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """
    Apply the configured log level to the package logger.

    Handlers are left to the host application.

    Returns:
        The ``recurrence_engine`` logger
    """
    settings = settings or get_settings()
    logger = logging.getLogger("recurrence_engine")
    logger.setLevel(settings.log_level)
    return logger
