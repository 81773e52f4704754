"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All deployment-specific values come from environment variables / .env
    - get_settings() is cached (lru_cache) — single instance per process
    - listing_page_size is always >= 1

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for everything: works out-of-the-box with docker-compose
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from app.core.domain_types import RecordOrder


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://logbook:logbook@db:5432/logbook"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    # ADR: alembic owns the schema; create_all is a local-dev shortcut
    database_create_all: bool = False

    # Listing
    listing_page_size: int = Field(10, ge=1)
    listing_order: RecordOrder = RecordOrder.TIMESTAMP_DESC

    # Session cookie
    session_cookie_name: str = "logbook_session"
    session_cookie_secure: bool = False

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
