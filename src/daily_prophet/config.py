"""Configuration helpers for the daily edition service."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    openai_api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    openai_model: str = Field(
        "gpt-4o-mini", description="Model used to write each day's edition."
    )
    temperature: float = Field(0.9, description="Generation temperature.")
    max_output_tokens: int = Field(
        800,
        description="Output length budget per edition; 0 removes the cap.",
    )
    generation_timeout: float | None = Field(
        None,
        description="Seconds before the OpenAI client gives up; unset keeps the SDK default.",
    )
    timezone: str = Field(
        "UTC", description="IANA zone that decides where one edition day ends."
    )
    date_key_style: str = Field(
        "iso", description="Date key format: 'iso' (YYYY-MM-DD) or 'day_month'."
    )
    schema_template: str = Field(
        "plain",
        description="Bundled template name (plain, themed) or path to a template JSON file.",
    )
    store_backend: str = Field("file", description="Edition store: memory, file or redis.")
    store_dir: str = Field(
        "data/editions", description="Directory for the file store backend."
    )
    redis_url: str = Field("redis://localhost:6379/0", alias="REDIS_URL")
    key_prefix: str = Field("daily:", description="Prefix for edition store keys.")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    cors_allow_origins: str = Field(
        "*", description="Comma-separated origins allowed to read editions; * for any."
    )
    cors_allow_credentials: bool = Field(
        False, description="Send credentials headers; ignored when any origin is allowed."
    )


def get_settings() -> Settings:
    """Return a fresh settings instance (reads env on every call)."""
    return Settings()


def configure_logging(level: str | int = "INFO") -> None:
    """Set up root logging for CLI and server entry points."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
