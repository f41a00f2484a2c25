"""Configuration management for Feed List Organizer."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="FEEDLIST_", extra="ignore"
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./feedlist.db"

    # Redis (preference store)
    redis_url: str = "redis://localhost:6379/0"
    grouping_mode_key: str = "feedlist:grouping_mode"

    # Upper bound for a single repository call
    repository_timeout_seconds: float = Field(default=5.0, gt=0)

    # CORS
    frontend_origin: str = "http://localhost:5173"

    # Logging
    log_level: str = Field(
        default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$"
    )

    # Environment
    env: str = Field(default="dev", pattern="^(dev|prod)$")


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
