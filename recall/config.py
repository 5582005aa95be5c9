"""
Configuration settings for recall-scheduler.

Uses Pydantic Settings for environment variable management with .env file support.
All variables are prefixed with RECALL_ (e.g. RECALL_MINIMUM_EASE=1.3).
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RECALL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # SM-2 Scheduling
    # ========================================
    initial_ease: float = Field(
        default=2.5,
        description="Ease factor assigned on an item's first review",
    )
    minimum_ease: float = Field(
        default=1.3,
        description="Floor for the ease factor after any review",
    )
    first_interval: int = Field(
        default=1,
        ge=1,
        description="Days until the review after the first success",
    )
    second_interval: int = Field(
        default=6,
        ge=1,
        description="Days until the review after the second consecutive success",
    )

    # ========================================
    # Memory Strength
    # ========================================
    overdue_decay_per_day: float = Field(
        default=10.0,
        description="Strength points lost per day past the due date",
    )
    review_decay_scale: float = Field(
        default=5.0,
        description="Strength points lost per day since review, divided by ease",
    )

    # ========================================
    # Dashboard / CLI
    # ========================================
    upcoming_limit: int = Field(
        default=4,
        ge=1,
        description="Number of upcoming reviews shown on the dashboard",
    )
    log_level: str = Field(
        default="WARNING",
        description="Loguru level for the CLI stderr sink",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
