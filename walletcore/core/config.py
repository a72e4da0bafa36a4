"""Application configuration using pydantic-settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    SECRET_KEY has no default and must be provided via environment
    variables or a .env file. Missing or invalid values raise a
    ValidationError at application startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra environment variables
    )

    # Document store
    STORE_BACKEND: Literal["memory", "json", "sql"] = "json"
    STORE_PATH: str = "data/ledger.json"
    DATABASE_URL: str = "sqlite+aiosqlite:///./ledger.db"
    DOCUMENT_NAME: str = "default"

    # Ledger
    DEFAULT_CURRENCY: str = Field(default="NGN", min_length=3, max_length=3)
    COMMIT_MAX_RETRIES: int = Field(default=5, ge=1)
    COMMIT_RETRY_BACKOFF: float = Field(default=0.01, ge=0)

    # Redis - Optional with defaults
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379

    # Celery
    CELERY_TASK_ALWAYS_EAGER: bool = False
    NOTIFICATIONS_ENABLED: bool = True

    # Identity
    SECRET_KEY: str = Field(min_length=8)
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24 * 7, gt=0)

    # Application
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    DEBUG: bool = False

    @property
    def celery_broker_url(self) -> str:
        """Construct Celery broker URL using Redis settings."""
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/0"

    @property
    def celery_result_backend(self) -> str:
        """Construct Celery result backend URL using Redis settings."""
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/0"


# Singleton settings instance - lazily loaded
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
