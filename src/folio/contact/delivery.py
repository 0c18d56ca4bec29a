"""Contact submission delivery through the Resend HTTP API.

When no relay is configured the submission is only logged, which keeps
local development working without credentials.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

import httpx

from folio.config import AppConfig
from folio.contact.models import ContactSubmission
from folio.observability import get_logger

logger = get_logger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"
CONTACT_DELIVERY_TIMEOUT_SECONDS = 8.0
ERROR_BODY_MAX_CHARS = 500


@dataclass(frozen=True)
class ContactDeliveryResult:
    """Outcome of one delivery attempt.

    Attributes:
        attempted: False when no relay is configured
        delivered: True when the relay accepted the message
        error: Bounded failure description, if any
    """

    attempted: bool
    delivered: bool
    error: str | None = None


def build_email_text(submission: ContactSubmission) -> str:
    return (
        "New portfolio contact form submission\n\n"
        f"From: {submission.name} <{submission.email}>\n"
        f"Subject: {submission.subject or '(none)'}\n\n"
        f"Message:\n{submission.message}"
    )


class ContactDelivery:
    """Sends contact submissions to the configured inbox.

    Example:
        >>> delivery = ContactDelivery(AppConfig.from_env())
        >>> result = await delivery.deliver(submission)
        >>> result.delivered
        True
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        timeout_seconds: float = CONTACT_DELIVERY_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._timeout_seconds = timeout_seconds
        self._external_client = client

    @property
    def enabled(self) -> bool:
        return self._config.contact_delivery_enabled

    async def deliver(self, submission: ContactSubmission) -> ContactDeliveryResult:
        if not self.enabled:
            logger.info(
                "folio.contact.received",
                name=submission.name,
                email=submission.email,
                subject=submission.subject or "(none)",
                message_chars=len(submission.message),
                delivery="log_only",
            )
            return ContactDeliveryResult(attempted=False, delivered=False)

        payload = {
            "from": self._config.contact_from_email,
            "to": [self._config.contact_email],
            "subject": f"Portfolio Contact: {submission.subject or 'New message'}",
            "reply_to": submission.email,
            "text": build_email_text(submission),
        }
        headers = {"Authorization": f"Bearer {self._config.resend_api_key}"}

        start = time.monotonic()
        try:
            if self._external_client is not None:
                response = await self._external_client.post(RESEND_API_URL, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                    response = await client.post(RESEND_API_URL, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            error = f"Resend request error: {type(exc).__name__}"
            logger.warning(
                "folio.contact.delivery_failed",
                error=error,
                elapsed_ms=round((time.monotonic() - start) * 1000, 1),
            )
            return ContactDeliveryResult(attempted=True, delivered=False, error=error)

        elapsed_ms = round((time.monotonic() - start) * 1000, 1)
        if response.status_code >= 400:
            body = response.text[:ERROR_BODY_MAX_CHARS] or "unknown error"
            error = f"Resend delivery failed ({response.status_code}): {body}"
            logger.warning(
                "folio.contact.delivery_failed",
                status_code=response.status_code,
                error=error,
                elapsed_ms=elapsed_ms,
            )
            return ContactDeliveryResult(attempted=True, delivered=False, error=error)

        logger.info("folio.contact.delivered", status_code=response.status_code, elapsed_ms=elapsed_ms)
        return ContactDeliveryResult(attempted=True, delivered=True)


__all__ = [
    "CONTACT_DELIVERY_TIMEOUT_SECONDS",
    "ContactDelivery",
    "ContactDeliveryResult",
    "RESEND_API_URL",
    "build_email_text",
]
