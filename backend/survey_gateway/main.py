"""Maternal Survey API - FastAPI application factory and process entry point.

Invariants:
    - Long-lived resources (settings, connectivity, origin policy) are built once
      in create_app and shared through app.state
    - Database connected on startup and disposed on shutdown via lifespan
    - run() installs the fatal fault guard inside the running loop before serving

Usage:
    uvicorn survey_gateway.main:app        (no fault guard)
    survey-gateway                          (console script, guard installed)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from fastapi import FastAPI

from survey_gateway.api.pipeline import compose_pipeline
from survey_gateway.api.routes.collaborators import RouteCollaborators
from survey_gateway.config import Settings, get_settings
from survey_gateway.core.origin_policy import OriginAdmissionPolicy
from survey_gateway.infrastructure.database import DatabaseConnectivity
from survey_gateway.infrastructure.lifecycle import FatalFaultPolicy, UvicornListener
from survey_gateway.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    connectivity: DatabaseConnectivity = app.state.connectivity
    setup_logging(settings.log_level, settings.log_format)
    state = await connectivity.connect()
    logger.info(
        f"Server running in {settings.environment} mode on port {settings.port} "
        f"(database: {state.value}, time: {datetime.now().isoformat(timespec='seconds')})",
        extra={
            "environment": settings.environment,
            "port": settings.port,
            "database": state.value,
        },
    )
    yield
    logger.info("Maternal Survey API shutting down")
    await connectivity.dispose()


def create_app(
    settings: Settings | None = None,
    connectivity: DatabaseConnectivity | None = None,
    collaborators: RouteCollaborators | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    if connectivity is None:
        connectivity = DatabaseConnectivity(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    app = FastAPI(
        title="Maternal Survey API", version=settings.api_version, lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.connectivity = connectivity
    app.state.origin_policy = OriginAdmissionPolicy.from_origins(settings.cors_origins)

    compose_pipeline(
        app,
        app.state.origin_policy,
        collaborators or RouteCollaborators.unconfigured(),
    )
    return app


app = create_app()


def run() -> None:
    """Serve the module-level app with the fatal fault guard installed."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    server = uvicorn.Server(uvicorn.Config(
        app, host=settings.host, port=settings.port, log_config=None,
    ))
    listener = UvicornListener(server)
    guard = FatalFaultPolicy(listener)

    async def serve() -> None:
        guard.install(asyncio.get_running_loop())
        await listener.serve()

    asyncio.run(serve())


if __name__ == "__main__":
    run()
