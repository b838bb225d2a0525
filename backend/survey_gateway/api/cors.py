"""CORS Admission - origin check, preflight route, and response header decoration.

Invariants:
    - OriginAdmissionMiddleware sees every HTTP request before routing: a denied
      origin never reaches routing, body parsing, or any collaborator, whatever
      the path or method
    - A denial is rendered by the registered SurveyApiError handler, so the
      terminal error stage stays the only writer of error responses
    - Preflight (OPTIONS, any path) is answered here with 200 and never reaches
      a collaborator or the body parser
    - CORSHeadersMiddleware only adds headers for admitted origins; it never
      writes a response of its own

Design Decisions:
    - Starlette's CORSMiddleware silently omits headers for unknown origins, so
      the decision lives in a middleware of its own that raises into the error
      handler; the header middleware keeps Starlette's send-wrapping approach
"""

from fastapi import APIRouter, Request, Response, status
from fastapi.routing import APIRoute
from starlette.datastructures import Headers, MutableHeaders
from starlette.routing import Match
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from survey_gateway.core.errors import OriginNotAllowedError, SurveyApiError
from survey_gateway.core.origin_policy import OriginAdmissionPolicy

ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
ALLOWED_HEADERS = ("Content-Type", "Authorization", "X-Requested-With")

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
    "Access-Control-Allow-Headers": ", ".join(ALLOWED_HEADERS),
}


class OriginAdmissionMiddleware:
    """Pipeline stage 1: reject requests from origins outside the allow-list."""

    def __init__(self, app: ASGIApp, policy: OriginAdmissionPolicy) -> None:
        self.app = app
        self.policy = policy

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        try:
            self.policy.admit(request.headers.get("origin"), request.url.path)
        except OriginNotAllowedError as exc:
            handler = scope["app"].exception_handlers[SurveyApiError]
            response = await handler(request, exc)
            await response(scope, receive, send)
            return
        await self.app(scope, receive, send)


class PreflightRoute(APIRoute):
    """Matches OPTIONS only, so other methods on unknown paths still 404."""

    def matches(self, scope: Scope) -> tuple[Match, Scope]:
        if scope["type"] == "http" and scope["method"] != "OPTIONS":
            return Match.NONE, {}
        return super().matches(scope)


preflight_router = APIRouter(tags=["cors"], route_class=PreflightRoute)


@preflight_router.options("/{full_path:path}", include_in_schema=False)
async def preflight(full_path: str) -> Response:
    """Answer browser preflights; 200 for legacy browser support."""
    return Response(status_code=status.HTTP_200_OK, headers=PREFLIGHT_HEADERS)


class CORSHeadersMiddleware:
    """Adds Access-Control-Allow-* headers to responses for admitted origins."""

    def __init__(self, app: ASGIApp, policy: OriginAdmissionPolicy) -> None:
        self.app = app
        self.policy = policy

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        origin = Headers(scope=scope).get("origin")
        if not origin or not self.policy.is_allowed(origin):
            await self.app(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers["Access-Control-Allow-Origin"] = origin
                headers["Access-Control-Allow-Credentials"] = "true"
                headers.add_vary_header("Origin")
            await send(message)

        await self.app(scope, receive, send_with_cors)
