"""Request Pipeline Composer - wires the per-request stages in fixed order.

Order for every request:
    CORS header decoration (middleware, headers only)
    → unhandled-error capture (middleware, hands crashes to the catch-all handler)
    → admission (middleware, before routing)
    → preflight (OPTIONS on any path, answered before body parsing and collaborators)
    → body parsing (parse_body)
    → routing: welcome, health, then the collaborator prefixes
    → terminal error handler

Invariants:
    - Admission runs for every HTTP request regardless of path or method
    - Body parsing is attached to every router except the preflight router
    - The preflight router is included before any collaborator
    - /api/v1/analytics and /api/v1/adv mount the same analytics router
    - Error handlers are registered last
"""

from fastapi import Depends, FastAPI

from survey_gateway.api.body import parse_body
from survey_gateway.api.cors import (
    CORSHeadersMiddleware, OriginAdmissionMiddleware, preflight_router,
)
from survey_gateway.api.error_handlers import UnhandledErrorMiddleware, register_error_handlers
from survey_gateway.api.routes import health, root
from survey_gateway.api.routes.collaborators import RouteCollaborators
from survey_gateway.core.domain_types import Collaborator
from survey_gateway.core.origin_policy import OriginAdmissionPolicy

PIPELINE_DEPENDENCIES = [Depends(parse_body)]

COLLABORATOR_MOUNTS: tuple[tuple[str, Collaborator], ...] = (
    ("/api/v1/responses", Collaborator.SURVEY),
    ("/api/v1/auth", Collaborator.AUTH),
    ("/api/v1/analytics", Collaborator.ANALYTICS),
    ("/api/v1/adv", Collaborator.ANALYTICS),
    ("/api/v1/surveys", Collaborator.RESPONSES),
)


def compose_pipeline(
    app: FastAPI,
    policy: OriginAdmissionPolicy,
    collaborators: RouteCollaborators,
) -> None:
    """Register middleware, routes and error handlers on a fresh app."""
    # add_middleware wraps outward: the last one added runs first
    app.add_middleware(OriginAdmissionMiddleware, policy=policy)
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(CORSHeadersMiddleware, policy=policy)

    app.include_router(preflight_router)
    app.include_router(root.router, dependencies=PIPELINE_DEPENDENCIES)
    app.include_router(health.router, dependencies=PIPELINE_DEPENDENCIES)
    for prefix, slot in COLLABORATOR_MOUNTS:
        app.include_router(
            collaborators.for_slot(slot),
            prefix=prefix,
            dependencies=PIPELINE_DEPENDENCIES,
        )

    register_error_handlers(app)
