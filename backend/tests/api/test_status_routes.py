"""Welcome and Health Routes - static payload and infra state reporting.

Invariants:
    - GET / returns the same endpoint map regardless of request headers or body
    - GET /api/health is 200 with status "ok" even when the database is down
    - The database field is sampled on every call
"""

import re

from survey_gateway.core.domain_types import ConnectionState

ISO_UTC = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")

WELCOME = {
    "message": "Maternal Survey API",
    "version": "1.0.0",
    "endpoints": {
        "survey": "/api/v1/responses",
        "auth": "/api/v1/auth",
        "analytics": "/api/v1/analytics",
        "advanced": "/api/v1/adv",
    },
    "documentation": "https://github.com/your-repo/docs",
}


async def test_welcome_payload(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json() == WELCOME


async def test_welcome_ignores_headers_and_body(client):
    res = await client.request(
        "GET", "/",
        headers={"Origin": "http://localhost:5173", "Authorization": "Bearer x"},
        content=b'{"ignored": true}',
    )
    assert res.status_code == 200
    assert res.json() == WELCOME


async def test_health_connected(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["database"] == "connected"
    assert body["version"] == "1.0.0"
    assert ISO_UTC.match(body["timestamp"])


async def test_health_disconnected_still_ok(client, connectivity):
    connectivity.state = ConnectionState.DISCONNECTED
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"
    assert res.json()["database"] == "disconnected"


async def test_health_is_idempotent(client):
    first = (await client.get("/api/health")).json()
    second = (await client.get("/api/health")).json()
    assert first["status"] == second["status"]
    assert first["database"] == second["database"]


async def test_health_samples_state_each_call(client, connectivity):
    await client.get("/api/health")
    connectivity.state = ConnectionState.DISCONNECTED
    res = await client.get("/api/health")
    assert res.json()["database"] == "disconnected"
    assert connectivity.reads == 2
