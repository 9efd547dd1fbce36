"""
ReelSearch — Application Settings

Design patterns:
  - Singleton: single Settings instance shared everywhere
  - Configuration Object: centralizes all env-based config
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration sourced from environment / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── OMDb ──────────────────────────────────────────────
    omdb_api_key: str = ""                  # https://www.omdbapi.com/apikey.aspx
    omdb_base_url: str = "https://www.omdbapi.com"
    omdb_timeout: float = 10.0
    omdb_max_concurrency: int = 8

    # ── Matching ──────────────────────────────────────────
    match_missing_letter: bool = True

    # ── Sessions ──────────────────────────────────────────
    session_ttl_minutes: int = 120

    # ── App ───────────────────────────────────────────────
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_reload: bool = False
    log_level: str = "info"

    # ── Derived helpers ───────────────────────────────────
    @property
    def has_omdb_key(self) -> bool:
        return bool(self.omdb_api_key.strip())


# Singleton – import this everywhere
settings = Settings()
