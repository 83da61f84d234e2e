"""Centralized settings for the floating notification pipeline.

Uses pydantic-settings to load from environment variables (prefixed
FLOATNOTE_) with defaults matching the pipeline's built-in constants.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Pipeline settings loaded from environment variables."""

    # --- Admission ---
    max_visible: int = Field(default=5, ge=1)
    arrival_cap: int = Field(default=10, ge=1)  # per-snapshot flood guard

    # --- Dedup ledger ---
    ledger_capacity: int = Field(default=100, ge=1)
    trim_interval_seconds: float = Field(default=60.0, gt=0)

    # --- Preferences ---
    in_app_channel: str = "in_app"
    max_preference_fetch_attempts: int = Field(default=2, ge=1)

    # --- Sound ---
    sound_asset: str = "/notification-sound.mp3"
    sound_volume: float = Field(default=0.5, ge=0.0, le=1.0)

    model_config = {
        "env_prefix": "FLOATNOTE_",
        "env_file": ".env",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
