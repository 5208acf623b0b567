"""Environment configuration and validation.

This module defines strongly-typed application settings loaded from environment variables
(optionally via a local `.env` file).
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

StoreBackend = Literal["memory", "postgres"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    The goal store defaults to the in-process backend; the Postgres backend needs `DATABASE_URL`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    telegram_bot_token: str = Field(alias="TELEGRAM_BOT_TOKEN")
    store_backend: StoreBackend = Field(default="memory", alias="STORE_BACKEND")
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    db_timezone: str = Field(default="UTC", alias="DB_TIMEZONE")

    @field_validator("store_backend", mode="before")
    @classmethod
    def normalize_store_backend(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("db_timezone")
    @classmethod
    def validate_db_timezone_is_utc(cls, value: str) -> str:
        """Validate that the DB timezone is locked to UTC.

        Stored timestamps are read back as UTC-aware datetimes; any other timezone is rejected at
        startup.
        """

        if value.upper() != "UTC":
            raise ValueError("DB_TIMEZONE must be UTC")
        return "UTC"

    @model_validator(mode="after")
    def validate_store_config(self) -> Settings:
        """The Postgres backend requires a database URL."""

        if self.store_backend == "postgres" and not self.database_url:
            raise ValueError("DATABASE_URL is required when STORE_BACKEND=postgres")
        return self


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is missing or invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
