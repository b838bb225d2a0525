"""Domain Types - enums and aliases shared by the gateway layers.

Invariants:
    - Connection state is one of exactly two values; no "connecting" state is exposed
    - str Enums serialize to JSON without custom encoders
"""

from enum import Enum


class ConnectionState(str, Enum):
    """Database readiness as reported by the health endpoint."""
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"

    @classmethod
    def from_ready(cls, ready: bool) -> "ConnectionState":
        return cls.CONNECTED if ready else cls.DISCONNECTED


class Collaborator(str, Enum):
    """Route collaborator slots the gateway mounts."""
    SURVEY = "survey"
    AUTH = "auth"
    ANALYTICS = "analytics"
    RESPONSES = "responses"
