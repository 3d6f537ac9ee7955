"""Application configuration management."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PROVIDER_KEY_FIELDS = {
    "gemini": "gemini_api_key",
    "openai": "openai_api_key",
    "anthropic": "anthropic_api_key",
}


class Settings(BaseSettings):
    """Centralised application settings derived from environment variables."""

    ai_provider: Literal["gemini", "openai", "anthropic"] = Field(
        default="gemini",
        description="Text-generation provider used to write training plans.",
    )
    gemini_api_key: str | None = None
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None

    generation_model: str | None = Field(
        default=None,
        description="Override for the provider's default model id.",
    )
    generation_timeout_seconds: float = Field(default=30.0, gt=0)

    environment: Literal["development", "production"] = Field(default="development")
    app_host: str = Field(default="127.0.0.1")
    app_port: int = Field(default=5000, ge=1, le=65535)
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
    )

    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("ai_provider", mode="before")
    @classmethod
    def normalize_provider(cls, value: str) -> str:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(sorted(valid))}")
        return upper

    @model_validator(mode="after")
    def require_provider_key(self) -> "Settings":
        """Refuse to start without a credential for the selected provider."""

        field_name = PROVIDER_KEY_FIELDS[self.ai_provider]
        value = getattr(self, field_name)
        if not value or not value.strip():
            raise ValueError(
                f"{field_name.upper()} is required when AI_PROVIDER={self.ai_provider}. "
                "Update your .env file before running the app."
            )
        return self

    @property
    def provider_api_key(self) -> str:
        return getattr(self, PROVIDER_KEY_FIELDS[self.ai_provider])

    @property
    def expose_error_details(self) -> bool:
        return self.environment == "development"


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance so it can be reused across the app."""

    settings = Settings()
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    return settings
