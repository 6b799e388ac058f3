"""Core configuration for the RugGuard detector."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RUGGUARD_",
        case_sensitive=False,
        extra="ignore",
    )

    # ── App ──────────────────────────────────────────────────────────────
    app_name: str = "RugGuard Detector"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ── HTTP ─────────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8080
    max_request_size: int = 10 * 1024 * 1024  # 10 MB
    max_trace_calls: int = 10_000

    # ── Token units ──────────────────────────────────────────────────────
    token_decimals: int = Field(default=18, ge=0, le=77)

    # ── Signature rule thresholds ────────────────────────────────────────
    suspicious_mint_threshold: int = 1_000_000  # whole tokens
    max_acceptable_fee_bps: int = 1_000  # 10%

    # ── State analysis thresholds ────────────────────────────────────────
    concentration_threshold_pct: int = Field(default=50, ge=0, le=100)
    balance_decrease_threshold_pct: int = Field(default=80, ge=0, le=100)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings singleton."""
    return Settings()
