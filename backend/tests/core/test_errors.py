"""Error Hierarchy - status codes, codes, and the REST envelope."""

from survey_gateway.core.errors import (
    CollaboratorNotConfiguredError, DatabaseError, ErrorCategory, ErrorContext,
    ErrorSeverity, InvalidRequestBodyError, OriginNotAllowedError, PayloadTooLargeError,
)


def test_to_response_envelope_shape():
    err = OriginNotAllowedError("https://evil.example", ErrorContext(path="/"))
    body = err.to_response()["error"]
    assert body["code"] == "CORS_ORIGIN_DENIED"
    assert body["message"] == "Not allowed by CORS"
    assert body["category"] == "admission"
    assert body["severity"] == "warning"
    assert body["context"] == {"path": "/", "origin": "https://evil.example"}
    assert body["timestamp"].endswith("+00:00")


def test_status_codes_per_error():
    assert OriginNotAllowedError("x").http_status == 403
    assert InvalidRequestBodyError("JSON").http_status == 400
    assert CollaboratorNotConfiguredError("auth").http_status == 501
    assert PayloadTooLargeError(1024).http_status == 413
    assert DatabaseError("down", "query").http_status == 503


def test_database_error_is_critical():
    err = DatabaseError("down", "query")
    assert err.severity is ErrorSeverity.CRITICAL
    assert err.category is ErrorCategory.DATABASE
    assert err.message == "Database query failed: down"
    assert err.operation == "query"


def test_collaborator_error_names_the_slot():
    err = CollaboratorNotConfiguredError("analytics")
    assert "analytics" in err.message
    assert err.collaborator == "analytics"
    assert err.code == "COLLABORATOR_NOT_CONFIGURED"


def test_errors_are_exceptions_with_message():
    err = InvalidRequestBodyError("JSON")
    assert isinstance(err, Exception)
    assert str(err) == "Request body is not valid JSON"


def test_payload_too_large_names_the_limit():
    err = PayloadTooLargeError(102400)
    assert err.code == "PAYLOAD_TOO_LARGE"
    assert err.limit == 102400
    assert err.message == "Request body exceeds 102400 bytes"
