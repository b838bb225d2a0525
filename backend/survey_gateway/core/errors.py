"""Error Hierarchy - typed, categorized exceptions for every per-request failure.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Request errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the one REST error envelope used by the terminal handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with SurveyApiError base: one global handler renders all of them
    - Fatal process faults are not modelled here; they never reach a request
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    ADMISSION = "admission"
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    NOT_IMPLEMENTED = "not_implemented"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Request context attached to an error for logs and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    path: str | None = None
    origin: str | None = None


class SurveyApiError(Exception):
    """Base exception for all request-scoped API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "path": self.context.path,
                    "origin": self.context.origin,
                },
            }
        }


# ─── Request Errors (400-level) ─────────────────────────────────

class OriginNotAllowedError(SurveyApiError):
    """Cross-origin request from an origin outside the allow-list."""
    def __init__(self, origin: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.origin = origin
        super().__init__(
            "Not allowed by CORS", "CORS_ORIGIN_DENIED", ErrorCategory.ADMISSION,
            ErrorSeverity.WARNING, ctx, 403,
        )
        self.origin = origin


class InvalidRequestBodyError(SurveyApiError):
    """Request body could not be decoded for its declared content type."""
    def __init__(self, content_type: str, context: ErrorContext | None = None):
        super().__init__(
            f"Request body is not valid {content_type}",
            "INVALID_BODY", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.content_type = content_type


class PayloadTooLargeError(SurveyApiError):
    """Request body exceeds the configured parser limit."""
    def __init__(self, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Request body exceeds {limit} bytes",
            "PAYLOAD_TOO_LARGE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 413,
        )
        self.limit = limit


class CollaboratorNotConfiguredError(SurveyApiError):
    """No route collaborator was mounted for this prefix."""
    def __init__(self, collaborator: str, context: ErrorContext | None = None):
        super().__init__(
            f"The {collaborator} service is not configured on this gateway",
            "COLLABORATOR_NOT_CONFIGURED", ErrorCategory.NOT_IMPLEMENTED,
            ErrorSeverity.ERROR, context, 501,
        )
        self.collaborator = collaborator


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(SurveyApiError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
