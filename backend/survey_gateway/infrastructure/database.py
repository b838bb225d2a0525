"""Database Connectivity - long-lived async engine with a readiness flag.

Invariants:
    - One DatabaseConnectivity per process, created at startup and shared via app.state
    - is_ready() reads the flag at call time (never cached, never does IO)
    - The flag turns on when the pool opens a connection or a ping succeeds,
      and off on disconnect-class errors or dispose()

Design Decisions:
    - Pool events over periodic pings: readiness follows the driver, like a
      client-side ready state, and health checks stay synchronous
    - Startup ping failure is logged, not raised: the gateway still serves and
      the health endpoint reports "disconnected"
"""

import logging

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.engine import ExceptionContext
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine

from survey_gateway.core.domain_types import ConnectionState

logger = logging.getLogger(__name__)


class DatabaseConnectivity:
    """Owns the async engine and tracks whether the database is reachable."""

    def __init__(
        self, database_url: str, pool_size: int = 5, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._ready = False
        event.listen(self.engine.sync_engine, "connect", self._on_connect)
        event.listen(self.engine.sync_engine, "handle_error", self._on_error)

    def is_ready(self) -> ConnectionState:
        return ConnectionState.from_ready(self._ready)

    async def connect(self) -> ConnectionState:
        """Open a connection and ping it; failure leaves the state disconnected."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            self._ready = False
            logger.error(f"Database connection failed: {e}")
        else:
            self._ready = True
            logger.info("Database connected")
        return self.is_ready()

    async def dispose(self) -> None:
        await self.engine.dispose()
        self._ready = False
        logger.info("Database connection closed")

    def _on_connect(self, dbapi_connection, connection_record) -> None:
        self._ready = True

    def _on_error(self, context: ExceptionContext) -> None:
        if context.is_disconnect:
            if self._ready:
                logger.warning("Database disconnected")
            self._ready = False


def get_connectivity(request: Request) -> DatabaseConnectivity:
    """FastAPI dependency for the shared connectivity resource."""
    return request.app.state.connectivity

