"""Cloudflare Turnstile verification for the contact form.

The check only runs when ``TURNSTILE_SECRET_KEY`` is configured. Any
transport error or unexpected siteverify reply counts as a failed check.
"""

from __future__ import annotations

import time

import httpx

from folio.config import AppConfig
from folio.observability import get_logger
from folio.transport.request_ip import ANONYMOUS_IP

logger = get_logger(__name__)

TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"
TURNSTILE_TIMEOUT_SECONDS = 5.0


class TurnstileVerifier:
    """Checks a Turnstile response token against Cloudflare siteverify.

    Example:
        >>> verifier = TurnstileVerifier(AppConfig.from_env())
        >>> await verifier.verify(token, "203.0.113.9")
        True
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        timeout_seconds: float = TURNSTILE_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._timeout_seconds = timeout_seconds
        self._external_client = client

    @property
    def enabled(self) -> bool:
        return self._config.turnstile_enabled

    async def verify(self, token: str, remote_ip: str) -> bool:
        form = {"secret": self._config.turnstile_secret_key, "response": token}
        if remote_ip and remote_ip != ANONYMOUS_IP:
            form["remoteip"] = remote_ip

        start = time.monotonic()
        try:
            if self._external_client is not None:
                response = await self._external_client.post(TURNSTILE_VERIFY_URL, data=form)
            else:
                async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                    response = await client.post(TURNSTILE_VERIFY_URL, data=form)
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "folio.contact.turnstile_error",
                error=type(exc).__name__,
                elapsed_ms=round((time.monotonic() - start) * 1000, 1),
            )
            return False

        success = isinstance(data, dict) and data.get("success") is True
        logger.info(
            "folio.contact.turnstile_checked",
            success=success,
            status_code=response.status_code,
            error_codes=data.get("error-codes") if isinstance(data, dict) else None,
            elapsed_ms=round((time.monotonic() - start) * 1000, 1),
        )
        return success


__all__ = ["TURNSTILE_VERIFY_URL", "TurnstileVerifier"]
