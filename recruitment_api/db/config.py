from __future__ import annotations

import re
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Database configuration.

    Reads from environment variables (or .env via pydantic-settings):
      - DATABASE_URL (full URL; mysql://, mysql+aiomysql://, sqlite:// ...)
      - or MYSQL_HOST, MYSQL_PORT, MYSQL_USER, MYSQL_PASSWORD, MYSQL_DB
    """

    DATABASE_URL: Optional[str] = Field(
        default=None, description="If provided, full database connection URL."
    )
    MYSQL_USER: Optional[str] = Field(default=None, description="DB username")
    MYSQL_PASSWORD: Optional[str] = Field(default=None, description="DB password")
    MYSQL_DB: Optional[str] = Field(default=None, description="Database name")
    MYSQL_PORT: Optional[int] = Field(default=3306, description="Database port (default 3306)")
    MYSQL_HOST: Optional[str] = Field(default="localhost", description="Database host (default localhost)")

    # SQLAlchemy engine options
    SQL_ECHO: bool = Field(
        default=False, description="Echo SQL statements for debugging (default False)"
    )
    DB_POOL_SIZE: int = Field(default=10, ge=1, description="Connections kept in the pool")
    DB_MAX_OVERFLOW: int = Field(default=5, ge=0, description="Extra connections allowed under load")

    # Automatically load from .env at runtime.
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @property
    def database_url(self) -> str:
        """
        Compute the base (driver-neutral) database URL. Prefers DATABASE_URL
        if present, otherwise constructs one from the MYSQL_* variables.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if not all([self.MYSQL_USER, self.MYSQL_PASSWORD, self.MYSQL_DB]):
            raise ValueError(
                "Database configuration missing. Ensure DATABASE_URL or "
                "MYSQL_USER, MYSQL_PASSWORD, and MYSQL_DB are set in the environment."
            )
        host = self.MYSQL_HOST or "localhost"
        port = self.MYSQL_PORT or 3306
        return f"mysql://{self.MYSQL_USER}:{self.MYSQL_PASSWORD}@{host}:{port}/{self.MYSQL_DB}"

    @property
    def dialect(self) -> str:
        """Backend name used by the query generator ('mysql' or 'sqlite')."""
        return re.match(r"^(\w+)", self.database_url).group(1)

    @property
    def async_database_url(self) -> str:
        """
        Convert the base URL to an async-driver SQLAlchemy URL, required for AsyncEngine.
        """
        url = self.database_url
        if url.startswith("sqlite"):
            return re.sub(r"^sqlite(\+\w+)?://", "sqlite+aiosqlite://", url)
        return re.sub(r"^mysql(\+\w+)?://", "mysql+aiomysql://", url)

    @property
    def sync_database_url(self) -> str:
        """
        Provide a sync URL variant for Alembic offline mode. Driver tags are
        stripped; online mode uses the async URL.
        """
        return re.sub(r"^(mysql|sqlite)\+\w+://", r"\1://", self.database_url)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return a settings object for reuse across modules."""
    return Settings()
