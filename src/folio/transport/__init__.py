"""Request layer shared by every API route.

Rate limiting, request ids, client IP resolution, per-request context and
JSON helpers. Import concrete names from the submodules, e.g.::

    from folio.transport.rate_limit import FixedWindowRateLimiter
    from folio.transport.context import build_api_request_context
"""

from folio.transport.context import ApiRequestContext, build_api_request_context
from folio.transport.rate_limit import FixedWindowRateLimiter, RateLimitConfig, RateLimitResult
from folio.transport.request_id import create_request_id, normalize_request_id
from folio.transport.request_ip import get_request_ip

__all__ = [
    "ApiRequestContext",
    "FixedWindowRateLimiter",
    "RateLimitConfig",
    "RateLimitResult",
    "build_api_request_context",
    "create_request_id",
    "get_request_ip",
    "normalize_request_id",
]
