"""Error Handlers - the terminal error stage of the request pipeline.

Invariants:
    - Registered last by the pipeline composer; the only place error responses are written
    - SurveyApiError → structured JSON with error code, message, severity
    - RequestValidationError → field-level error details
    - Starlette HTTPException (404/405 from routing) → same envelope, headers kept
    - Exception (catch-all) → never leaks internal details
    - UnhandledErrorMiddleware renders the catch-all inside the CORS header
      middleware, so crash responses keep Access-Control-Allow-* headers
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from survey_gateway.core.errors import ErrorCategory, ErrorSeverity, SurveyApiError

logger = logging.getLogger(__name__)

_HTTP_CODES = {
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", ErrorCategory.VALIDATION),
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_api_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_api_error_handler(app: FastAPI) -> None:
    """Register handler for admission, body, collaborator and database errors."""

    @app.exception_handler(SurveyApiError)
    async def survey_api_error_handler(request: Request, exc: SurveyApiError):
        exc.context.path = exc.context.path or request.url.path
        exc.context.origin = exc.context.origin or request.headers.get("origin")
        level = (
            logging.WARNING
            if exc.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING)
            else logging.ERROR
        )
        logger.log(
            level,
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": exc.context.path,
                "origin": exc.context.origin,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register routing error handler (unknown path, wrong method)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        code, category = _HTTP_CODES.get(
            exc.status_code, ("HTTP_ERROR", ErrorCategory.VALIDATION),
        )
        logger.info(
            f"{exc.status_code} on {request.method} {request.url.path}",
            extra={"error_code": code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.status_code,
            headers=exc.headers,
            content={
                "error": {
                    "code": code,
                    "message": str(exc.detail),
                    "category": category.value,
                    "severity": ErrorSeverity.ERROR.value,
                },
            },
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": ErrorCategory.INTERNAL.value,
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": ErrorCategory.VALIDATION.value,
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }


class UnhandledErrorMiddleware:
    """Hands exceptions that escape routing to the catch-all handler.

    Starlette runs the Exception handler in ServerErrorMiddleware, outside all
    user middleware; calling it here keeps the response inside the pipeline.
    A response that already started is left to ServerErrorMiddleware.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = False

        async def tracking_send(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self.app(scope, receive, tracking_send)
        except Exception as exc:
            if started:
                raise
            handler = scope["app"].exception_handlers[Exception]
            response = await handler(Request(scope, receive), exc)
            await response(scope, receive, send)
