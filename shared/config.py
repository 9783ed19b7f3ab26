"""
Central configuration for the Sports Scores services.
Uses pydantic-settings for env-based config with validation.
"""
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Auto-refresh presets offered to the user, in seconds
REFRESH_INTERVAL_PRESETS: tuple[float, ...] = (15.0, 30.0, 60.0, 300.0)
DEFAULT_REFRESH_INTERVAL_S = 30.0


class Environment(str, Enum):
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Root settings shared across the feed, refresh and selection layers."""

    model_config = SettingsConfigDict(
        env_prefix="SCORES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── General ──────────────────────────────────────────────
    environment: Environment = Environment.DEV
    debug: bool = False
    log_level: str = "INFO"
    log_json: Optional[bool] = Field(
        default=None,
        description="Force JSON (True) or console (False) log rendering; unset means JSON outside dev.",
    )

    # ── Feed ─────────────────────────────────────────────────
    feed_base_url: str = "https://site.api.espn.com/apis/site/v2/sports"
    feed_request_timeout_s: float = Field(default=30.0, gt=0)
    feed_connect_timeout_s: float = Field(default=10.0, gt=0)
    feed_connectivity_retry_s: float = Field(
        default=2.0,
        gt=0,
        description="Pause between connection attempts while waiting for the network to come back.",
    )

    # ── Refresh ──────────────────────────────────────────────
    default_refresh_interval_s: float = DEFAULT_REFRESH_INTERVAL_S
    preferences_path: Path = Field(
        default=Path.home() / ".config" / "sports-scores" / "preferences.json",
        description="JSON key-value file holding the user's persisted choices.",
    )

    # ── Observability ────────────────────────────────────────
    metrics_enabled: bool = False
    metrics_port: int = 9090

    @field_validator("default_refresh_interval_s")
    @classmethod
    def refresh_interval_is_preset(cls, value: float) -> float:
        if value not in REFRESH_INTERVAL_PRESETS:
            raise ValueError(
                f"default_refresh_interval_s must be one of {REFRESH_INTERVAL_PRESETS}, got {value}"
            )
        return value

    @property
    def feed_base_url_str(self) -> str:
        return self.feed_base_url.rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton access to validated settings."""
    return Settings()
