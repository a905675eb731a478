"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_password: str
    pool_size: int = 30
    exclusion_window: int = 3
    message_max_length: int = 20
    pending_claim_ttl_seconds: int | None = None
    receipt_printer_url: str | None = None
    receipt_printer_timeout_seconds: float = 10.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_optional_url(raw: str | None) -> str | None:
    """Normalize an optional URL setting; blank means unset."""
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None
