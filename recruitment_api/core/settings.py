from __future__ import annotations

import logging
from typing import Annotated, List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-me-in-production"

# Read from the environment as plain strings ("a,b" or "*"), not JSON.
OriginList = Annotated[List[str], NoDecode]


class AppSettings(BaseSettings):
    """
    Application-level settings for the FastAPI service.

    Database settings live separately in recruitment_api.db.config.Settings.
    """

    # FastAPI metadata
    APP_NAME: str = Field(default="Recruitment API")
    APP_DESCRIPTION: str = Field(
        default=(
            "Backend API for a multi-tenant recruitment and gym management platform. "
            "Provides organization-scoped CRUD, authentication and paginated listings."
        )
    )
    APP_VERSION: str = Field(default="0.1.0")
    ENVIRONMENT: Optional[str] = Field(
        default=None, description="Environment label (development/test/production)"
    )
    LOG_LEVEL: str = Field(default="INFO", description="Root log level name")

    # CORS
    CORS_ORIGINS: OriginList = Field(
        default_factory=lambda: ["*"],
        description="Comma-separated list of allowed origins. Default: *",
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)
    CORS_ALLOW_METHODS: OriginList = Field(default_factory=lambda: ["*"])
    CORS_ALLOW_HEADERS: OriginList = Field(default_factory=lambda: ["*"])

    # Tokens
    JWT_SECRET_KEY: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="Secret used to sign access and refresh tokens.",
    )
    JWT_ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60, ge=1)
    REFRESH_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 24 * 7, ge=1)

    # Startup steps, run in this order by the lifespan handler
    RUN_MIGRATIONS_ON_STARTUP: bool = Field(
        default=False,
        description="If true, run Alembic migrations (upgrade head) at app startup.",
    )
    CREATE_SCHEMA_ON_STARTUP: bool = Field(
        default=False,
        description="If true, create missing tables from model metadata at startup (dev/test).",
    )
    AUTO_SEED: bool = Field(
        default=False,
        description="If true, run pending seeders after the schema is in place.",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("CORS_ORIGINS", "CORS_ALLOW_METHODS", "CORS_ALLOW_HEADERS", mode="before")
    @classmethod
    def _split_csv(cls, v):
        """Accept a comma-separated string or a list; empty means '*'."""
        if isinstance(v, str):
            v = [p.strip() for p in v.split(",") if p.strip()]
        return list(v) if v else ["*"]

    @model_validator(mode="after")
    def _require_real_secret_in_production(self) -> "AppSettings":
        if self.is_production and self.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be set when ENVIRONMENT=production")
        return self

    @property
    def is_development(self) -> bool:
        """True when running with ENVIRONMENT=development (or dev)."""
        return (self.ENVIRONMENT or "").lower() in ("development", "dev")

    @property
    def is_production(self) -> bool:
        return (self.ENVIRONMENT or "").lower() in ("production", "prod")

    @property
    def log_level(self) -> int:
        """Numeric log level; unknown names fall back to INFO."""
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.INFO


# PUBLIC_INTERFACE
def get_app_settings() -> AppSettings:
    """
    Return a new AppSettings instance populated from environment variables.

    A new instance is built on every call so tests can change the
    environment between app instances.
    """
    return AppSettings()
