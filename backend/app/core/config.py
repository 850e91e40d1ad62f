"""
Application configuration using Pydantic Settings.

Environment-based infrastructure switching is controlled by the ENVIRONMENT variable.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "test"] = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./timeblocks.db"

    # ===========================================
    # Auth
    # ===========================================
    # When disabled every request acts as the development user.
    AUTH_ENABLED: bool = False

    # ===========================================
    # Scheduler defaults
    # ===========================================
    SCHEDULER_DEFAULT_WORKING_HOURS_START: str = "09:00"
    SCHEDULER_DEFAULT_WORKING_HOURS_END: str = "17:00"
    SCHEDULER_DEFAULT_STRATEGY: Literal["balanced", "deadline-first", "priority-first"] = "balanced"
    # "deadline-then-priority" | "priority-then-deadline"
    SCHEDULER_BALANCED_ORDERING: Literal[
        "deadline-then-priority", "priority-then-deadline"
    ] = "deadline-then-priority"
    SCHEDULER_MIN_CHUNK_MINUTES: int = Field(30, ge=1)
    # Upper bound on horizon length accepted by the API (cost guard)
    SCHEDULER_MAX_HORIZON_DAYS: int = Field(366, ge=1)

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )

    @property
    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.ENVIRONMENT == "local"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
