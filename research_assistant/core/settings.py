from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("HOST", "host"),
        description="Interface the HTTP server binds to.",
    )
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "port"),
        description="TCP port the HTTP server listens on.",
    )
    cors_allowed_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "https://research-assistant-tims-projects-d59677e7.vercel.app",
        ],
        validation_alias=AliasChoices("CORS_ALLOWED_ORIGINS", "cors_allowed_origins"),
        description="Browser origins allowed to call the API with credentials.",
    )

    # Upstream completion API (OpenRouter)
    # The key is read once; requests that need it fail with 500 when it is missing.
    openrouter_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENROUTER_API_KEY", "openrouter_api_key"),
        description="OpenRouter API key (required for every /api route).",
    )
    openrouter_model: str = Field(
        default="openai/gpt-3.5-turbo",
        validation_alias=AliasChoices("OPENROUTER_MODEL", "openrouter_model"),
        description="Model identifier sent with every completion request.",
    )
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        validation_alias=AliasChoices("OPENROUTER_BASE_URL", "openrouter_base_url"),
        description="Base URL for the chat-completion API (override for proxies/emulators).",
    )
    openrouter_timeout_seconds: float = Field(
        default=60.0,
        ge=1.0,
        validation_alias=AliasChoices("OPENROUTER_TIMEOUT_SECONDS", "openrouter_timeout_seconds"),
        description="Timeout for a single completion request (seconds).",
    )

    @property
    def has_api_key(self) -> bool:
        return bool(self.openrouter_api_key)


@lru_cache
def get_settings() -> Settings:
    return Settings()
