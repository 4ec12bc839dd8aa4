"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from commission_engine.config.constants import (
    DEFAULT_ENGINE_VERSION,
    DEFAULT_MAX_GLOBAL_DEPTH,
    HARD_MAX_GLOBAL_DEPTH,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False
    db_pool_size: int = Field(default=10, ge=1)
    db_max_overflow: int = Field(default=20, ge=0)
    db_pool_timeout: int = Field(default=30, ge=1)
    db_pool_recycle: int = Field(default=1800, ge=1)

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str = "logs"

    # Commission engine
    commission_max_global_depth: int = Field(
        default=DEFAULT_MAX_GLOBAL_DEPTH,
        ge=1,
        le=HARD_MAX_GLOBAL_DEPTH,
        description="Platform ceiling on upline hops walked per transaction",
    )
    commission_record_zero_amounts: bool = Field(
        default=True,
        description="Persist zero-amount commission lines for audit completeness",
    )
    commission_run_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Wall-clock budget for one engine run before rollback",
    )
    commission_engine_version: str = Field(
        default=DEFAULT_ENGINE_VERSION,
        max_length=20,
        description="Version stamped on every commission record",
    )

    # Redis (for Dramatiq)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0
    commission_task_max_retries: int = Field(default=5, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case log level names so loguru accepts them."""
        return v.upper()

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
