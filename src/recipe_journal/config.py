"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    supabase_anon_key: str
    session_cookie_name: str = "recipe_journal_session"
    session_refresh_cookie_name: str = "recipe_journal_refresh"
    session_cookie_secure: bool = True
    session_cookie_max_age: int = 60 * 60 * 24 * 7
    recipe_list_load_attempts: int = 2
    recipe_list_retry_delay_seconds: float = 0.3
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
