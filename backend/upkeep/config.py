"""Application configuration management."""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ADMIN_API_TOKEN: str = ""  # If empty, admin task routes are not authenticated

    # Task Scheduler
    # Interval overrides in seconds keyed by task name, e.g.
    # TASK_SCHEDULE='{"Cleanup Tokens": 300}'. 0 or absent uses the default.
    TASK_SCHEDULE: dict[str, int] = Field(default_factory=dict)
    SCHEDULER_TIMEZONE: str = "UTC"
    SCHEDULER_MAX_WORKERS: int = Field(default=10, ge=1)
    SCHEDULER_MISFIRE_GRACE_SECONDS: int = 300  # Grace period for misfired runs

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
