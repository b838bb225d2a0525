"""Settings - defaults, environment overrides, and database URL rewriting."""

import pytest

from survey_gateway.config import DEFAULT_CORS_ORIGINS, Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("PORT", "ENVIRONMENT", "DATABASE_URL", "CORS_ORIGINS", "LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    s = Settings(_env_file=None)
    assert s.port == 5000
    assert s.environment == "development"
    assert s.api_version == "1.0.0"
    assert s.cors_origins == DEFAULT_CORS_ORIGINS
    assert s.database_url.startswith("postgresql+asyncpg://")


def test_environment_overrides(clean_env):
    clean_env.setenv("PORT", "8081")
    clean_env.setenv("ENVIRONMENT", "production")
    clean_env.setenv("CORS_ORIGINS", '["https://a.example"]')
    s = Settings(_env_file=None)
    assert s.port == 8081
    assert s.environment == "production"
    assert s.cors_origins == ["https://a.example"]


@pytest.mark.parametrize("url", [
    "postgresql://u:p@h:5432/db",
    "postgres://u:p@h:5432/db",
])
def test_postgres_urls_get_async_driver(clean_env, url):
    s = Settings(_env_file=None, database_url=url)
    assert s.database_url == "postgresql+asyncpg://u:p@h:5432/db"


def test_other_urls_untouched(clean_env):
    s = Settings(_env_file=None, database_url="sqlite+aiosqlite:///:memory:")
    assert s.database_url == "sqlite+aiosqlite:///:memory:"
