"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) - single instance per process
    - database_url always names an async driver (aiosqlite or asyncpg)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - DB_PATH accepted as a legacy alias for DATABASE_URL; a bare path means a SQLite file
    - Defaults provided for every setting: runs out-of-the-box against a local SQLite file
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, populate_by_name=True,
    )

    # Database
    database_url: str = Field(
        "sqlite+aiosqlite:///users.db",
        validation_alias=AliasChoices("DATABASE_URL", "DB_PATH"),
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Map sync driver URLs and bare file paths to their async equivalents."""
        if not isinstance(v, str):
            return v
        if "://" not in v:
            return f"sqlite+aiosqlite:///{v}"
        if v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Server
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)

    # Per-request deadline applied to every service operation
    request_timeout_seconds: float = Field(10.0, gt=0)

    # API
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
