"""Folio Error Taxonomy.

This module defines the error hierarchy for the folio request layer,
providing structured error handling with specific error codes
and context information.

On /api/adaptive only invalid input (400), an unproducible bundle (404)
and an exhausted rate-limit window (429) ever reach a caller. The contact
route adds a rejected CAPTCHA (403) and a failed mail relay (502).
Everything else is recovered or logged behind the HTTP boundary.
"""
from __future__ import annotations

from typing import Any

# Upper bound for error messages copied into logs
ERROR_MESSAGE_MAX_CHARS = 1200


class FolioError(Exception):
    """Base exception for all folio errors.

    Attributes:
        code: Error code following the folio:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    status_code: int = 500

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(FolioError):
    """Raised at startup when an environment setting cannot be parsed."""

    def __init__(self, setting: str, reason: str) -> None:
        super().__init__(
            code="folio:config/invalid",
            message=f"Invalid setting {setting}: {reason}",
            details={"setting": setting},
        )
        self.setting = setting


class InvalidRequestError(FolioError):
    """Raised when a request body is malformed or references unknown ids.

    The message is returned verbatim to the caller, so it must be a
    single line that does not echo raw input.
    """

    status_code = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(code="folio:request/invalid", message=message, details=details)


class UnsupportedMediaTypeError(InvalidRequestError):
    """Raised when a JSON endpoint receives a non-JSON content type."""

    status_code = 415


class PayloadTooLargeError(InvalidRequestError):
    """Raised when a request body exceeds the configured character bound."""

    status_code = 413


class BundleNotFoundError(FolioError):
    """Raised when a valid company/persona pair yields no recommendation bundle."""

    status_code = 404

    def __init__(self, company_id: str, persona_id: str) -> None:
        super().__init__(
            code="folio:adaptive/bundle_not_found",
            message="Could not generate recommendations for this configuration.",
            details={"company_id": company_id, "persona_id": persona_id},
        )
        self.company_id = company_id
        self.persona_id = persona_id


class RateLimitExceededError(FolioError):
    """Raised when an identifier has exhausted its fixed window.

    Attributes:
        retry_after: Whole seconds until the window resets (always >= 1)
    """

    status_code = 429

    def __init__(self, retry_after: int, message: str = "Rate limit exceeded. Try again later.") -> None:
        super().__init__(
            code="folio:rate_limit/exceeded",
            message=message,
            details={"retry_after": retry_after},
        )
        self.retry_after = retry_after


class EnrichmentError(FolioError):
    """Raised by text-generation providers; never surfaced to callers.

    The enrichment boundary converts it into a deterministic fallback.
    """

    def __init__(self, provider: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="folio:enrichment/failed",
            message=f"{provider} enrichment failed: {reason}",
            details={"provider": provider, **(details or {})},
        )
        self.provider = provider
        self.reason = reason


class ContactDeliveryError(FolioError):
    """Raised when the mail relay rejects or cannot receive a contact submission."""

    status_code = 502

    def __init__(self, reason: str) -> None:
        super().__init__(
            code="folio:contact/delivery_failed",
            message=reason[:ERROR_MESSAGE_MAX_CHARS],
        )
        self.reason = reason


class CaptchaVerificationError(FolioError):
    """Raised when Cloudflare Turnstile rejects a contact form token."""

    status_code = 403

    def __init__(self, message: str) -> None:
        super().__init__(code="folio:contact/captcha_failed", message=message)


def serialize_server_error(error: BaseException | object) -> dict[str, str]:
    """Return a bounded ``{name, message}`` dict suitable for structured logs.

    Example:
        >>> serialize_server_error(ValueError("boom"))
        {'name': 'ValueError', 'message': 'boom'}
    """
    if isinstance(error, BaseException):
        return {
            "name": type(error).__name__ or "Error",
            "message": str(error)[:ERROR_MESSAGE_MAX_CHARS],
        }
    return {
        "name": "UnknownError",
        "message": str(error)[:ERROR_MESSAGE_MAX_CHARS],
    }
