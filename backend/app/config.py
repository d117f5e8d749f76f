"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _is_postgres(url: str) -> bool:
    return url.startswith(("postgres://", "postgresql://", "postgresql+"))


def _with_scheme(url: str, scheme: str) -> str:
    """Swap the dialect+driver part of a database URL."""
    _, sep, rest = url.partition("://")
    return f"{scheme}{sep}{rest}" if sep else url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "AskMyNotes"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    # DATABASE_URL_OVERRIDE (hosted Postgres, or SQLite for local runs and tests)
    # takes precedence over the individual POSTGRES_* parts
    database_url_override: str | None = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "askmynotes"
    postgres_password: str = ""
    postgres_db: str = "askmynotes"

    def _base_database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field
    @property
    def database_url(self) -> str:
        """Async URL for the app engine (asyncpg or aiosqlite)."""
        url = self._base_database_url()
        if _is_postgres(url):
            # asyncpg rejects libpq query params; SSL goes through connect_args
            return _with_scheme(url, "postgresql+asyncpg").split("?")[0]
        return _with_scheme(url, "sqlite+aiosqlite") if url.startswith("sqlite") else url

    @computed_field
    @property
    def database_requires_ssl(self) -> bool:
        """Whether the override asks for SSL (Neon and similar hosts)."""
        url = self.database_url_override or ""
        return "sslmode=require" in url or "ssl=require" in url

    @computed_field
    @property
    def database_url_sync(self) -> str:
        """Sync URL for Alembic (psycopg2 or pysqlite)."""
        url = self._base_database_url()
        if _is_postgres(url):
            return _with_scheme(url, "postgresql")
        return _with_scheme(url, "sqlite") if url.startswith("sqlite") else url

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Anthropic API
    anthropic_api_key: str

    # LLM Configuration
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 4000
    llm_timeout_seconds: float = 45.0

    # Context limits (characters)
    ask_context_max_chars: int = 30000
    study_set_context_max_chars: int = 25000
    context_truncation: Literal["prefix", "proportional"] = "prefix"

    # Conversation history
    history_window: int = 10
    history_list_limit: int = 100
    title_max_chars: int = 30

    # Subjects
    # "strict" requires subjects to exist (created at setup), "upsert" creates them on first use
    corpus_resolution: Literal["strict", "upsert"] = "upsert"
    subjects_per_user: int = 3

    # Uploads
    max_upload_size_bytes: int = 10 * 1024 * 1024  # 10MB


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def sanitize_error(error: Exception, *, generic_message: str = "An internal error occurred.") -> str:
    """
    Return a user-safe error message.

    In development, returns the full exception string for debugging.
    In staging/production, returns a generic message to avoid leaking internals.
    """
    settings = get_settings()
    if settings.environment == "development":
        return str(error)
    return generic_message
