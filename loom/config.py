"""
Configuration settings for loom.

Uses Pydantic Settings for environment variable management with .env file support.
Variables are read with the ``LOOM_`` prefix, e.g. ``LOOM_MASTERY_THRESHOLD=3``
or ``LOOM_SRS_INTERVALS='[1, 2, 4, 8]'``.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from loom.graph.scheduler import DEFAULT_MASTERY_THRESHOLD, DEFAULT_SRS_INTERVALS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LOOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Scheduling
    # ========================================
    mastery_threshold: int = Field(
        default=DEFAULT_MASTERY_THRESHOLD,
        ge=0,
        le=5,
        description="Familiarity at which a node counts as mastered and satisfies prerequisites",
    )
    srs_intervals: list[int] = Field(
        default_factory=lambda: list(DEFAULT_SRS_INTERVALS),
        description="Review delay in days for each spaced repetition stage",
    )
    preserve_paused: bool = Field(
        default=False,
        description="Keep paused nodes paused when they are reviewed",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Minimum level for the stderr log sink",
    )

    @field_validator("srs_intervals", mode="before")
    @classmethod
    def _split_intervals(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("srs_intervals")
    @classmethod
    def _check_intervals(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("srs_intervals must contain at least one interval")
        if any(days <= 0 for days in value):
            raise ValueError("srs_intervals must be positive day counts")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def get_scheduling_config(self) -> dict[str, Any]:
        """Get the values threaded into every scheduling call."""
        return {
            "mastery_threshold": self.mastery_threshold,
            "intervals": list(self.srs_intervals),
            "preserve_paused": self.preserve_paused,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
