"""Body Parsing - decodes JSON and urlencoded bodies for route collaborators.

Invariants:
    - Runs after admission, before any collaborator code
    - JSON and urlencoded bodies above settings.body_limit_bytes are PAYLOAD_TOO_LARGE,
      checked against Content-Length before the body is read
    - JSON bodies must be an object or array; anything else is INVALID_BODY,
      including nesting too deep for the decoder
    - Urlencoded bodies support nested keys (see core/form_parsing.py)
    - Empty bodies and other content types yield {}
    - The parsed value is cached per request (FastAPI dependency cache) and
      also stored on request.state.body
"""

import json
from typing import Any
from urllib.parse import parse_qsl

from fastapi import Request

from survey_gateway.api.dependencies import get_app_settings
from survey_gateway.core.errors import (
    ErrorContext, InvalidRequestBodyError, PayloadTooLargeError,
)
from survey_gateway.core.form_parsing import parse_nested_form


FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";")[0].strip().lower()


def _is_json(media_type: str) -> bool:
    return media_type == "application/json" or media_type.endswith("+json")


async def parse_body(request: Request) -> Any:
    """Pipeline stage 2: parse the request body once."""
    media_type = _media_type(request)
    if not (_is_json(media_type) or media_type == FORM_CONTENT_TYPE):
        request.state.body = {}
        return request.state.body

    limit = get_app_settings(request).body_limit_bytes
    path = request.url.path
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(limit, ErrorContext(path=path))
    raw = await request.body()
    if len(raw) > limit:
        raise PayloadTooLargeError(limit, ErrorContext(path=path))

    body: Any = {}
    if raw and _is_json(media_type):
        body = _decode_json(raw, path)
    elif raw:
        body = _decode_form(raw, path)
    request.state.body = body
    return body


def _decode_json(raw: bytes, path: str) -> Any:
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        raise InvalidRequestBodyError("JSON", ErrorContext(path=path))
    if not isinstance(data, (dict, list)):
        raise InvalidRequestBodyError("JSON", ErrorContext(path=path))
    return data


def _decode_form(raw: bytes, path: str) -> dict[str, Any]:
    try:
        pairs = parse_qsl(
            raw.decode("utf-8"), keep_blank_values=True, strict_parsing=False,
        )
    except UnicodeDecodeError:
        raise InvalidRequestBodyError("form data", ErrorContext(path=path))
    return parse_nested_form(pairs)
