"""App Factory - shared state on app.state and the startup/shutdown lifespan."""

import logging

from httpx import ASGITransport, AsyncClient

from survey_gateway.config import Settings
from survey_gateway.core.origin_policy import OriginAdmissionPolicy
from survey_gateway.infrastructure.database import DatabaseConnectivity
from survey_gateway.main import create_app, lifespan


def _settings(**overrides) -> Settings:
    return Settings(
        _env_file=None, database_url="sqlite+aiosqlite:///:memory:",
        log_format="text", **overrides,
    )


def test_create_app_builds_shared_state():
    app = create_app(_settings(cors_origins=["https://a.example"]))
    assert isinstance(app.state.connectivity, DatabaseConnectivity)
    assert app.state.origin_policy == OriginAdmissionPolicy(("https://a.example",))
    assert app.title == "Maternal Survey API"


async def test_lifespan_connects_and_disposes(caplog):
    caplog.set_level(logging.INFO)
    app = create_app(_settings(environment="production", port=8080))
    async with lifespan(app):
        async with AsyncClient(
            transport=ASGITransport(app=app), base_url="http://test",
        ) as c:
            res = await c.get("/api/health")
        assert res.json()["database"] == "connected"
    assert "Server running in production mode on port 8080" in caplog.text
    assert "database: connected" in caplog.text
    assert app.state.connectivity.is_ready().value == "disconnected"
