"""API test fixtures - app built with a fake connectivity and recording collaborators.

Invariants:
    - Every test gets a fresh app from create_app (no shared app.state)
    - Collaborators append to `calls` so tests can assert they never ran
    - raise_app_exceptions=False: the catch-all handler's 500 is what the client sees

Design Decisions:
    - FakeConnectivity instead of SQLite: the health route only reads the flag
"""

import pytest
from fastapi import APIRouter, Depends
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from survey_gateway.api.body import parse_body
from survey_gateway.api.routes.collaborators import RouteCollaborators
from survey_gateway.config import Settings
from survey_gateway.core.domain_types import ConnectionState
from survey_gateway.core.errors import DatabaseError
from survey_gateway.main import create_app


class SurveyItem(BaseModel):
    question: str
    answer: int


class FakeConnectivity:
    def __init__(self, state: ConnectionState = ConnectionState.CONNECTED):
        self.state = state
        self.reads = 0

    def is_ready(self) -> ConnectionState:
        self.reads += 1
        return self.state

    async def connect(self) -> ConnectionState:
        return self.state

    async def dispose(self) -> None:
        self.state = ConnectionState.DISCONNECTED


def build_collaborators(calls: list) -> RouteCollaborators:
    survey = APIRouter()

    @survey.post("")
    async def submit_response(body=Depends(parse_body)):
        calls.append(("survey", body))
        return {"received": body}

    @survey.post("/items")
    async def submit_item(item: SurveyItem):
        calls.append(("survey", item.model_dump()))
        return item

    auth = APIRouter()

    @auth.get("/crash")
    def crash():
        calls.append(("auth", None))
        raise RuntimeError("collaborator exploded")

    @auth.get("/db-down")
    async def db_down():
        calls.append(("auth", None))
        raise DatabaseError("connection refused", "query")

    analytics = APIRouter()

    @analytics.get("/summary")
    async def summary():
        calls.append(("analytics", None))
        return {"total_responses": 42}

    responses = APIRouter()

    @responses.get("")
    async def list_surveys():
        calls.append(("responses", None))
        return {"items": []}

    return RouteCollaborators(
        survey=survey, auth=auth, analytics=analytics, responses=responses,
    )


@pytest.fixture
def settings():
    return Settings(_env_file=None, database_url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
def connectivity():
    return FakeConnectivity()


@pytest.fixture
def calls():
    return []


@pytest.fixture
def app(settings, connectivity, calls):
    return create_app(settings, connectivity, build_collaborators(calls))


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c
