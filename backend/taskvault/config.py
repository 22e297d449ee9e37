"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - jwt_secret has no default: a missing secret surfaces as SERVER_MISCONFIGURATION

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from taskvault.core.passwords import DEFAULT_HASH_ROUNDS


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://taskvault:taskvault@db:5432/taskvault"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Tokens
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = Field(7 * 24 * 60 * 60, gt=0)
    token_not_before_seconds: int = Field(0, ge=0)
    token_leeway_seconds: int = Field(0, ge=0)

    # Passwords
    password_hash_rounds: int = Field(DEFAULT_HASH_ROUNDS, ge=4, le=31)

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(seconds=self.token_ttl_seconds)

    @property
    def token_not_before_delay(self) -> timedelta | None:
        if not self.token_not_before_seconds:
            return None
        return timedelta(seconds=self.token_not_before_seconds)

    @property
    def token_leeway(self) -> timedelta:
        return timedelta(seconds=self.token_leeway_seconds)


@lru_cache
def get_settings() -> Settings:
    return Settings()
