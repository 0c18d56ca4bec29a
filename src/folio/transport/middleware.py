"""HTTP middleware for folio.

AccessLogMiddleware assigns every request a correlation id, binds it into
the structlog context, logs one ``folio.request.completed`` event per
request and converts unhandled exceptions into a bounded 500 response.

Example:
    >>> from folio.transport.middleware import AccessLogMiddleware
    >>> app.add_middleware(AccessLogMiddleware)
"""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from folio.errors import serialize_server_error
from folio.observability import bind_context, get_logger, unbind_context
from folio.transport.context import HEADER_REQUEST_ID
from folio.transport.http import json_response
from folio.transport.request_id import create_request_id

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


def get_request_id(request: Request) -> str | None:
    """Return the id assigned by AccessLogMiddleware, if any."""
    return getattr(request.state, "request_id", None)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Per-request correlation id, access log and last-resort error handler."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Any]]
    ) -> Any:
        request_id = create_request_id()
        request.state.request_id = request_id
        bind_context(request_id=request_id)

        start = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                logger.error(
                    "folio.request.unhandled_error",
                    method=request.method,
                    path=request.url.path,
                    error=serialize_server_error(exc),
                )
                response = json_response(
                    {"error": INTERNAL_ERROR_MESSAGE},
                    500,
                    {HEADER_REQUEST_ID: request_id},
                )

            if HEADER_REQUEST_ID not in response.headers:
                response.headers[HEADER_REQUEST_ID] = request_id
            logger.info(
                "folio.request.completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return response
        finally:
            # also runs on CancelledError when the client disconnects
            unbind_context("request_id")


__all__ = ["AccessLogMiddleware", "INTERNAL_ERROR_MESSAGE", "get_request_id"]
