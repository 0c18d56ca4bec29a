"""Observability module for folio.

Structured logging with JSON output for production, colored console
output for development and request-id propagation through structlog
context variables.

Example:
    >>> from folio.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("folio.adaptive.bundle_built", company_id="anthropic")
"""

from folio.observability.logging import (
    bind_context,
    configure_logging,
    get_logger,
    is_debug_mode,
    sanitize_for_logging,
    unbind_context,
)

__all__ = [
    "bind_context",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "sanitize_for_logging",
    "unbind_context",
]
