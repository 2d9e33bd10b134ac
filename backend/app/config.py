"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./docuflow.db"

    # Object storage
    storage_root: str = "./storage"
    storage_signing_secret: SecretStr = SecretStr("dev-signing-secret")
    signed_url_ttl_seconds: int = 60
    max_upload_bytes: int = 20 * 1024 * 1024

    # Extraction model (OpenAI-compatible endpoint)
    llm_api_key: SecretStr | None = None
    llm_base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    llm_model: str = "gemini-2.5-flash"
    llm_timeout_seconds: float = 60.0

    # Transactional email
    resend_api_key: SecretStr | None = None
    resend_api_url: str = "https://api.resend.com/emails"
    reminder_email_from: str = "DocuFlow AI <onboarding@resend.dev>"
    reminder_email_to: str = "delivered@resend.dev"

    # Reminder sweep
    reminder_window_days: int = 3

    # Status polling (seconds)
    poll_initial_interval_seconds: float = 2.0
    poll_backoff_factor: float = 1.5
    poll_max_interval_seconds: float = 10.0
    poll_timeout_seconds: float = 180.0

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
