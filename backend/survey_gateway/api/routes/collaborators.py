"""Route Collaborators - the four business routers the gateway mounts.

Invariants:
    - Collaborators are plain APIRouters supplied to the app factory
    - A slot left empty gets a placeholder that answers every path and method
      with CollaboratorNotConfiguredError (501) through the terminal handler
"""

from dataclasses import dataclass

from fastapi import APIRouter, Request

from survey_gateway.core.domain_types import Collaborator
from survey_gateway.core.errors import CollaboratorNotConfiguredError, ErrorContext

PLACEHOLDER_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


@dataclass(frozen=True)
class RouteCollaborators:
    survey: APIRouter
    auth: APIRouter
    analytics: APIRouter
    responses: APIRouter

    @classmethod
    def unconfigured(cls, **routers: APIRouter) -> "RouteCollaborators":
        """Fill any slot not given in routers with a placeholder."""
        return cls(**{
            slot.value: routers[slot.value] if slot.value in routers else placeholder_router(slot)
            for slot in Collaborator
        })

    def for_slot(self, slot: Collaborator) -> APIRouter:
        return getattr(self, slot.value)


def placeholder_router(slot: Collaborator) -> APIRouter:
    router = APIRouter(tags=[slot.value])

    async def not_configured(request: Request):
        raise CollaboratorNotConfiguredError(
            slot.value, ErrorContext(path=request.url.path),
        )

    for path in ("", "/{rest:path}"):
        router.add_api_route(
            path, not_configured, methods=PLACEHOLDER_METHODS,
            include_in_schema=False, name=f"{slot.value}_not_configured",
        )
    return router
