"""
Configuration settings for the trivia content engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRIVIA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Content Sources
    # ========================================
    content_primary_path: Path = Field(
        default=PROJECT_ROOT / "data" / "questions_fixed.json",
        description="Localized content document (category -> item records)",
    )
    content_legacy_path: Path = Field(
        default=PROJECT_ROOT / "data" / "questions.json",
        description="Legacy difficulty-keyed content document",
    )
    content_use_builtin_samples: bool = Field(
        default=True,
        description="Fall back to the built-in sample set when both documents fail",
    )
    fallback_locale: str = Field(
        default="de",
        description="Locale used when a requested translation is missing",
    )

    # ========================================
    # Content Cache
    # ========================================
    cache_max_categories: int = Field(
        default=5,
        ge=1,
        description="Maximum resident categories before LRU eviction (5 keeps every category resident)",
    )
    cache_max_items_per_category: int = Field(
        default=200,
        ge=1,
        description="Maximum cached items per difficulty tier of a category",
    )
    cache_expiration_minutes: int = Field(
        default=60,
        ge=1,
        description="Minutes a cached category stays fresh",
    )
    cache_item_size_kb: int = Field(
        default=2,
        ge=1,
        description="Approximate memory footprint of one cached item",
    )
    content_load_timeout_seconds: float | None = Field(
        default=10.0,
        description="Upper bound for a single content load (None disables)",
    )

    # ========================================
    # Pool Selection
    # ========================================
    path_filter_mode: Literal["strict", "any"] = Field(
        default="strict",
        description="'strict' filters by path relevance, 'any' matches every item",
    )
    shuffle_seed: str | None = Field(
        default=None,
        description="Seed for reproducible shuffles (None = system randomness)",
    )

    # ========================================
    # Memory Pressure
    # ========================================
    memory_medium_threshold_mb: int = Field(
        default=50,
        description="Usage at or above this is medium pressure",
    )
    memory_high_threshold_mb: int = Field(
        default=100,
        description="Usage at or above this is high pressure",
    )
    memory_check_interval_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Seconds between memory samples",
    )
    memory_moderate_shrink_ratio: float = Field(
        default=0.5,
        gt=0,
        le=1,
        description="Fraction of configured limits kept on moderate cleanup",
    )

    # ========================================
    # Session / Progression
    # ========================================
    session_max_lives: int = Field(
        default=3,
        ge=1,
        description="Lives restored after a checkpoint fallback or restart",
    )
    fallback_reward_accuracy: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Accuracy assumed when re-issuing checkpoint rewards",
    )
    bonus_accuracy_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Accuracy at or above which checkpoint bonus rewards are granted",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="INFO",
        description="Loguru sink level for the CLI",
    )

    @property
    def cache_expiration(self) -> timedelta:
        return timedelta(minutes=self.cache_expiration_minutes)

    def get_memory_config(self) -> dict[str, int | float]:
        """Get memory pressure thresholds in KB."""
        return {
            "medium_threshold_kb": self.memory_medium_threshold_mb * 1024,
            "high_threshold_kb": self.memory_high_threshold_mb * 1024,
            "interval_seconds": self.memory_check_interval_seconds,
            "shrink_ratio": self.memory_moderate_shrink_ratio,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
