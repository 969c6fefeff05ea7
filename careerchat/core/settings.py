from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

OPENROUTER_CHAT_COMPLETIONS_URL = "https://openrouter.ai/api/v1/chat/completions"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="AI Career Guidance Chat", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server-side proxy
    openrouter_api_key: str | None = Field(default=None, alias="OPENROUTER_API_KEY")
    openrouter_model: str = Field(default="openai/gpt-4o-mini", alias="OPENROUTER_MODEL")
    openrouter_api_url: str = Field(
        default=OPENROUTER_CHAT_COMPLETIONS_URL, alias="OPENROUTER_API_URL"
    )
    openrouter_app_title: str = Field(
        default="AI Career Guidance System", alias="OPENROUTER_APP_TITLE"
    )
    openrouter_temperature: float = Field(default=0.2, alias="OPENROUTER_TEMPERATURE")
    openrouter_max_tokens: int = Field(default=500, alias="OPENROUTER_MAX_TOKENS")
    deployment_host: str | None = Field(default=None, alias="VERCEL_URL")
    default_referer: str = Field(default="https://vercel.app", alias="DEFAULT_REFERER")

    upstream_retry_delay_seconds: float = Field(
        default=0.6, alias="UPSTREAM_RETRY_DELAY_SECONDS"
    )
    upstream_timeout_seconds: float = Field(default=60.0, alias="UPSTREAM_TIMEOUT_SECONDS")

    # Client wrapper
    chat_proxy_base_url: str = Field(
        default="http://localhost:8000", alias="CHAT_PROXY_BASE_URL"
    )
    client_model: str = Field(
        default="openai/gpt-4o-mini",
        validation_alias=AliasChoices("OPENROUTER_CLIENT_MODEL", "VITE_OPENROUTER_MODEL"),
    )
    client_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "OPENROUTER_CLIENT_API_KEY", "VITE_OPENROUTER_API_KEY"
        ),
    )
    allow_direct_fallback: bool | None = Field(
        default=None, alias="CHAT_ALLOW_DIRECT_FALLBACK"
    )
    client_origin: str = Field(default="http://localhost:5173", alias="CHAT_CLIENT_ORIGIN")

    # Chat history store
    db_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    db_port: int = Field(default=5432, alias="POSTGRES_PORT")
    db_user: str = Field(default="app", alias="POSTGRES_USER")
    db_password: str = Field(default="app", alias="POSTGRES_PASSWORD")
    db_name: str = Field(default="app", alias="POSTGRES_DB")

    database_url_override: str | None = Field(default=None, alias="DATABASE_URL")

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+psycopg2://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
