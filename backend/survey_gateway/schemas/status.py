"""Status Schemas - response models for the welcome and health endpoints.

Invariants:
    - HealthStatus.status is always "ok"; infra state lives in the database field
    - Timestamps are ISO-8601 UTC with millisecond precision and a "Z" suffix
"""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel

from survey_gateway.core.domain_types import ConnectionState


def iso_now() -> str:
    """Current UTC time, e.g. 2026-10-17T18:22:05.123Z."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class HealthStatus(BaseModel):
    status: Literal["ok"] = "ok"
    database: ConnectionState
    version: str
    timestamp: str


class EndpointMap(BaseModel):
    survey: str
    auth: str
    analytics: str
    advanced: str


class WelcomePayload(BaseModel):
    """Static landing payload served at GET /."""
    message: str
    version: str
    endpoints: EndpointMap
    documentation: str
