"""JSON response builder and bounded JSON body parser for API routes."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from folio.errors import InvalidRequestError, PayloadTooLargeError, UnsupportedMediaTypeError
from folio.observability import get_logger
from folio.transport.context import HEADER_REQUEST_ID
from folio.transport.request_id import normalize_request_id

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
DEFAULT_MAX_BODY_CHARS = 16_000

INVALID_JSON_MESSAGE = "Invalid JSON body."
UNSUPPORTED_MEDIA_TYPE_MESSAGE = "Content-Type must be application/json."
PAYLOAD_TOO_LARGE_MESSAGE = "Request body is too large."
INVALID_PAYLOAD_MESSAGE = "Invalid request payload."

BASE_HEADERS = {
    "Cache-Control": "no-store",
    "X-Content-Type-Options": "nosniff",
}


def json_response(
    body: Mapping[str, Any],
    status_code: int = 200,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    """Build a JSON response with the shared API headers.

    Error bodies (those carrying an ``error`` key) get the request id from
    the ``X-Request-Id`` header echoed as ``requestId``.
    """
    merged = {**BASE_HEADERS, **(headers or {})}
    content = dict(body)
    if "error" in content and "requestId" not in content:
        request_id = normalize_request_id(merged.get(HEADER_REQUEST_ID))
        if request_id:
            content["requestId"] = request_id
    response = JSONResponse(status_code=status_code, content=content, headers=merged)
    response.headers["content-type"] = JSON_CONTENT_TYPE
    return response


def _is_json_content_type(value: str) -> bool:
    media_type = value.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


async def read_json_body(request: Request, max_chars: int = DEFAULT_MAX_BODY_CHARS) -> Any:
    """Read and decode a JSON body.

    Raises:
        UnsupportedMediaTypeError: If Content-Type is present and not JSON (415)
        PayloadTooLargeError: If the body exceeds *max_chars* (413)
        InvalidRequestError: If the body is not valid UTF-8 JSON (400)
    """
    content_type = request.headers.get("content-type", "")
    if content_type and not _is_json_content_type(content_type):
        logger.info("folio.request.unsupported_media_type", content_type=content_type[:100])
        raise UnsupportedMediaTypeError(UNSUPPORTED_MEDIA_TYPE_MESSAGE)

    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > max_chars * 4:
        raise PayloadTooLargeError(PAYLOAD_TOO_LARGE_MESSAGE)

    body_bytes = bytearray()
    async for chunk in request.stream():
        body_bytes.extend(chunk)
        if len(body_bytes) > max_chars * 4:
            raise PayloadTooLargeError(PAYLOAD_TOO_LARGE_MESSAGE)

    try:
        text = body_bytes.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidRequestError(INVALID_JSON_MESSAGE) from e

    if len(text) > max_chars:
        logger.warning("folio.request.size_exceeded", actual_chars=len(text), max_chars=max_chars)
        raise PayloadTooLargeError(PAYLOAD_TOO_LARGE_MESSAGE)

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidRequestError(INVALID_JSON_MESSAGE) from e


async def parse_json_request(
    request: Request,
    model: type[M],
    *,
    max_chars: int = DEFAULT_MAX_BODY_CHARS,
    invalid_message: str = INVALID_PAYLOAD_MESSAGE,
    body_errors_as_invalid_json: bool = False,
) -> M:
    """Read a JSON body and validate it against *model*.

    Args:
        request: Incoming request
        model: Pydantic model describing the payload
        max_chars: Largest accepted body, in characters
        invalid_message: Single-line error used when validation fails
        body_errors_as_invalid_json: Report a non-JSON content type or an
            oversized body as a plain 400 ``Invalid JSON body.`` instead of
            415/413

    Raises:
        InvalidRequestError: For undecodable JSON or a payload *model* rejects
    """
    try:
        payload = await read_json_body(request, max_chars=max_chars)
    except (UnsupportedMediaTypeError, PayloadTooLargeError) as e:
        if not body_errors_as_invalid_json:
            raise
        raise InvalidRequestError(INVALID_JSON_MESSAGE) from e
    if not isinstance(payload, dict):
        raise InvalidRequestError(INVALID_JSON_MESSAGE)
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(
            invalid_message,
            details={"fields": [".".join(str(p) for p in err["loc"]) for err in e.errors()]},
        ) from e


__all__ = [
    "INVALID_JSON_MESSAGE",
    "JSON_CONTENT_TYPE",
    "json_response",
    "parse_json_request",
    "read_json_body",
]
