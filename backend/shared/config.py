"""
Centralized configuration for the bbtap backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., SUPABASE_*, ANALYTICS_*).
"""

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "bbtap API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""
    # Direct Postgres URL, only used by run_migrations.py
    supabase_db_url: str = ""

    # Frontend URLs (public profile links, card URLs)
    frontend_url: str = "http://localhost:5173"

    # Entitlements
    near_limit_threshold: float = Field(default=0.75, gt=0, le=1)

    # Analytics
    analytics_window_days: int = Field(default=7, ge=1, le=366)
    view_dedupe_minutes: int = Field(default=60, ge=0)

    # Templates
    default_template_slug: str = "default-professional"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
