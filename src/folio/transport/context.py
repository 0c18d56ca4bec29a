"""Per-request API context: request id, client IP, rate-limit decision, headers.

Every rate-limited route starts with ``build_api_request_context``. The
returned ``ApiRequestContext`` carries two header sets: ``response_headers``
for normal responses and ``exceeded_headers`` (with ``Retry-After``) for 429s.

Example:
    >>> ctx = build_api_request_context(
    ...     headers=request.headers,
    ...     rate_limit_namespace="adaptive",
    ...     rate_limit_config=RateLimitConfig(40, 3_600_000),
    ...     limiter=app.state.limiter,
    ... )
    >>> if not ctx.rate_limit_result.success:
    ...     return json_response({"error": "..."}, 429, ctx.exceeded_headers)
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from folio.transport.rate_limit import (
    FixedWindowRateLimiter,
    RateLimitConfig,
    RateLimitResult,
    normalize_rate_limit_config,
)
from folio.transport.request_id import create_request_id, normalize_request_id
from folio.transport.request_ip import get_request_ip

HEADER_LIMIT = "X-RateLimit-Limit"
HEADER_REMAINING = "X-RateLimit-Remaining"
HEADER_RESET = "X-RateLimit-Reset"
HEADER_RETRY_AFTER = "Retry-After"
HEADER_REQUEST_ID = "X-Request-Id"

RATE_LIMIT_NAMESPACE_MAX_CHARS = 64
FALLBACK_NAMESPACE = "api"

_UNSAFE_NAMESPACE_CHARS = re.compile(r"[^a-zA-Z0-9:_-]")


class RateLimitSnapshot(Protocol):
    remaining: int | float
    reset_in: int | float


def _finite_or_zero(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value) if math.isfinite(value) else 0.0


def _reset_seconds(reset_in_ms: object) -> int:
    return max(0, math.ceil(_finite_or_zero(reset_in_ms) / 1000))


def normalize_exceeded_reset_seconds(reset_in_ms: object) -> int:
    """Seconds until retry for a rejected request, never below 1."""
    return max(1, _reset_seconds(reset_in_ms))


def build_rate_limit_headers(config: RateLimitConfig, snapshot: RateLimitSnapshot) -> dict[str, str]:
    """Build ``X-RateLimit-*`` headers for a normal response.

    ``Remaining`` is clamped to ``[0, max_requests]`` and ``Reset`` is
    ``ceil(reset_in / 1000)`` clamped to >= 0; non-finite values count as 0.
    """
    normalized = normalize_rate_limit_config(config)
    max_requests = int(normalized.max_requests)
    remaining = int(min(max_requests, max(0.0, _finite_or_zero(snapshot.remaining))))
    return {
        HEADER_LIMIT: str(max_requests),
        HEADER_REMAINING: str(remaining),
        HEADER_RESET: str(_reset_seconds(snapshot.reset_in)),
    }


def build_rate_limit_exceeded_headers(
    config: RateLimitConfig, snapshot: RateLimitSnapshot
) -> dict[str, str]:
    """Build headers for a 429 response: ``Reset`` and ``Retry-After`` are >= 1."""
    retry_after = normalize_exceeded_reset_seconds(snapshot.reset_in)
    headers = build_rate_limit_headers(config, snapshot)
    headers[HEADER_RESET] = str(retry_after)
    headers[HEADER_RETRY_AFTER] = str(retry_after)
    return headers


def build_api_response_headers(
    config: RateLimitConfig,
    snapshot: RateLimitSnapshot,
    request_id: str | None = None,
    include_retry_after: bool = False,
) -> dict[str, str]:
    """Rate-limit headers plus ``X-Request-Id`` when the id survives sanitizing."""
    if include_retry_after:
        headers = build_rate_limit_exceeded_headers(config, snapshot)
    else:
        headers = build_rate_limit_headers(config, snapshot)
    safe_request_id = normalize_request_id(request_id)
    if safe_request_id:
        headers[HEADER_REQUEST_ID] = safe_request_id
    return headers


def normalize_rate_limit_namespace(value: object) -> str:
    """Bound and sanitize a route namespace; degenerate values map to ``"api"``."""
    raw = value if isinstance(value, str) else ""
    sanitized = _UNSAFE_NAMESPACE_CHARS.sub("", raw[:RATE_LIMIT_NAMESPACE_MAX_CHARS])
    return sanitized.lower() if sanitized else FALLBACK_NAMESPACE


@dataclass(frozen=True)
class ApiRequestContext:
    """Derived per-request values; never stored beyond the request.

    Attributes:
        request_id: Correlation id generated for this request
        ip: Resolved client IP or ``"anonymous"``
        rate_limit_result: Decision returned by the limiter
        rate_limit_exceeded_reset_in_seconds: Backoff hint for 429 bodies (>= 1)
        response_headers: Headers for normal responses
        exceeded_headers: Headers for 429 responses
    """

    request_id: str
    ip: str
    rate_limit_result: RateLimitResult
    rate_limit_exceeded_reset_in_seconds: int
    response_headers: dict[str, str] = field(default_factory=dict)
    exceeded_headers: dict[str, str] = field(default_factory=dict)

    @property
    def allowed(self) -> bool:
        return self.rate_limit_result.success


def build_api_request_context(
    *,
    headers: Mapping[str, str],
    rate_limit_namespace: str,
    rate_limit_config: RateLimitConfig,
    limiter: FixedWindowRateLimiter,
    request_id: str | None = None,
) -> ApiRequestContext:
    """Resolve identity, charge the rate limiter and build response headers.

    The limiter key is ``"<namespace>:<ip>"``; the hit is counted whether
    or not the request later succeeds. A *request_id* already assigned by
    the access-log middleware is reused when it survives sanitizing.
    """
    request_id = normalize_request_id(request_id) or create_request_id()
    ip = get_request_ip(headers)
    namespace = normalize_rate_limit_namespace(rate_limit_namespace)
    config = normalize_rate_limit_config(rate_limit_config)
    result = limiter.hit(f"{namespace}:{ip}", config)

    response_headers = build_api_response_headers(config, result, request_id)
    exceeded_headers = build_api_response_headers(
        config, result, request_id, include_retry_after=True
    )

    return ApiRequestContext(
        request_id=request_id,
        ip=ip,
        rate_limit_result=result,
        rate_limit_exceeded_reset_in_seconds=int(exceeded_headers[HEADER_RETRY_AFTER]),
        response_headers=response_headers,
        exceeded_headers=exceeded_headers,
    )


__all__ = [
    "ApiRequestContext",
    "FALLBACK_NAMESPACE",
    "HEADER_LIMIT",
    "HEADER_REMAINING",
    "HEADER_REQUEST_ID",
    "HEADER_RESET",
    "HEADER_RETRY_AFTER",
    "build_api_request_context",
    "build_api_response_headers",
    "build_rate_limit_exceeded_headers",
    "build_rate_limit_headers",
    "normalize_exceeded_reset_seconds",
    "normalize_rate_limit_namespace",
]
