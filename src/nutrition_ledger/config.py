"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: str = "file"
    state_path: Path = Path.home() / ".nutrition_ledger" / "state.json"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_user_id: str = "local"
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    classifier_timeout_seconds: float = 30.0
    timezone: str | None = None
    analytics_window_days: int = 14
    insight_window_days: int = 7
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str) -> str:
    """Normalize the configured storage backend name."""
    cleaned = raw.strip().lower()
    if cleaned in {"", "file", "json"}:
        return "file"
    if cleaned == "supabase":
        return "supabase"
    raise ValueError(f"Unsupported storage backend: {raw}")
