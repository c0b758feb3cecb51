"""Application configuration via pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "LabHub"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4

    # Database
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "labhub"
    postgres_password: str = Field(default="labhub_secret")
    postgres_db: str = "labhub"
    db_pool_size: int = 10
    db_max_overflow: int = 5
    database_url_override: Optional[str] = None  # e.g. sqlite+aiosqlite:///./labhub.db

    @computed_field
    @property
    def database_url(self) -> str:
        """Async database connection URL."""
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Identity (tokens are issued by the external auth provider)
    jwt_secret_key: str = Field(default="your-auth-provider-jwt-secret")
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None
    default_requester_role: str = "student"

    # Notifications
    notification_webhook_url: Optional[str] = None
    notification_timeout_seconds: float = 10.0

    # CORS
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:8080"]

    # Requests slower than this are logged
    slow_request_seconds: float = 1.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
