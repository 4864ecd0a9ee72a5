import logging

import pytest

from recruitment_api.core.settings import AppSettings
from recruitment_api.db.config import Settings


def test_cors_origins_accept_comma_separated_values():
    settings = AppSettings(CORS_ORIGINS="https://a.example, https://b.example")
    assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]
    assert AppSettings(CORS_ORIGINS="").CORS_ORIGINS == ["*"]


def test_environment_and_log_level_helpers():
    assert AppSettings(ENVIRONMENT="Development").is_development is True
    assert AppSettings(ENVIRONMENT="production").is_development is False
    assert AppSettings(LOG_LEVEL="debug").log_level == logging.DEBUG
    assert AppSettings(LOG_LEVEL="nonsense").log_level == logging.INFO


@pytest.mark.parametrize(
    "url, async_url, sync_url, dialect",
    [
        ("mysql://u:p@db:3306/app", "mysql+aiomysql://u:p@db:3306/app", "mysql://u:p@db:3306/app", "mysql"),
        ("mysql+pymysql://u:p@db/app", "mysql+aiomysql://u:p@db/app", "mysql://u:p@db/app", "mysql"),
        ("sqlite:///./app.db", "sqlite+aiosqlite:///./app.db", "sqlite:///./app.db", "sqlite"),
        ("sqlite+aiosqlite://", "sqlite+aiosqlite://", "sqlite://", "sqlite"),
    ],
)
def test_database_url_normalization(url, async_url, sync_url, dialect):
    settings = Settings(DATABASE_URL=url)
    assert settings.async_database_url == async_url
    assert settings.sync_database_url == sync_url
    assert settings.dialect == dialect


def test_database_url_from_mysql_parts():
    settings = Settings(
        DATABASE_URL=None,
        MYSQL_USER="u",
        MYSQL_PASSWORD="p",
        MYSQL_DB="app",
        MYSQL_HOST="db",
        MYSQL_PORT=3307,
    )
    assert settings.database_url == "mysql://u:p@db:3307/app"


def test_database_url_missing_configuration():
    settings = Settings(DATABASE_URL=None, MYSQL_USER=None, MYSQL_PASSWORD=None, MYSQL_DB=None)
    with pytest.raises(ValueError):
        _ = settings.database_url


def test_cors_lists_read_from_environment(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example,https://b.example")
    monkeypatch.setenv("CORS_ALLOW_METHODS", "GET,POST")
    settings = AppSettings()
    assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]
    assert settings.CORS_ALLOW_METHODS == ["GET", "POST"]
    assert settings.CORS_ALLOW_HEADERS == ["*"]


def test_production_requires_a_jwt_secret():
    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        AppSettings(ENVIRONMENT="production", JWT_SECRET_KEY="change-me-in-production")
    assert AppSettings(ENVIRONMENT="prod", JWT_SECRET_KEY="s3cret").is_production
