"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    auth_token: str
    storage_backend: Literal["supabase", "memory"] = "supabase"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    entries_table: str = "entries"
    totals_table: str = "daily_totals"
    increment_function: str = "increment_daily_total"
    lenient_numbers: bool = True
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def fingerprint(value: str | None) -> str:
    """Return a short, log-safe fingerprint of a secret."""
    if not value:
        return ""
    if len(value) <= 8:  # noqa: PLR2004
        return value
    return f"{value[:4]}...{value[-4:]}"
