"""Application configuration resolved once at startup.

Every environment-driven behavior (provider credentials, rate limits,
timeouts, contact delivery) is read here into a frozen ``AppConfig``
and passed down by the composition root. Handlers never read
``os.environ`` themselves.

Environment Variables:
    OPENAI_API_KEY: Enables OpenAI narrative enrichment when set
    ANTHROPIC_API_KEY: Enables Anthropic narrative enrichment when set
    FOLIO_OPENAI_MODEL: OpenAI model name (default: gpt-4o)
    FOLIO_ANTHROPIC_MODEL: Anthropic model name (default: claude-3-5-sonnet-latest)
    FOLIO_ENRICHMENT_TIMEOUT: Seconds before enrichment is abandoned (default: 10)
    FOLIO_ADAPTIVE_RATE_LIMIT: Requests per window on /api/adaptive (default: 40)
    FOLIO_CONTACT_RATE_LIMIT: Submissions per window on /api/contact (default: 5)
    FOLIO_RATE_LIMIT_WINDOW_MS: Window length in milliseconds (default: 3600000)
    FOLIO_MAX_BODY_CHARS: Maximum JSON body size in characters (default: 16000)
    RESEND_API_KEY / CONTACT_EMAIL / CONTACT_FROM_EMAIL: Contact form delivery
    TURNSTILE_SECRET_KEY: Requires a Cloudflare Turnstile token on /api/contact when set
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass

from folio.errors import ConfigurationError

DEFAULT_OPENAI_MODEL = "gpt-4o"
DEFAULT_ANTHROPIC_MODEL = "claude-3-5-sonnet-latest"
DEFAULT_ENRICHMENT_TIMEOUT_SECONDS = 10.0
DEFAULT_ADAPTIVE_RATE_LIMIT = 40
DEFAULT_CONTACT_RATE_LIMIT = 5
DEFAULT_RATE_LIMIT_WINDOW_MS = 60 * 60 * 1000
DEFAULT_MAX_BODY_CHARS = 16_000
DEFAULT_CONTACT_FROM = "Portfolio Contact <onboarding@resend.dev>"


def _read_str(env: Mapping[str, str], name: str, default: str = "") -> str:
    return env.get(name, default).strip()


def _read_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(name, "must be an integer") from e
    if value <= 0:
        raise ConfigurationError(name, "must be > 0")
    return value


def _read_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(name, "must be a number") from e
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(name, "must be a positive finite number")
    return value


@dataclass(frozen=True)
class AppConfig:
    """Resolved settings for one process.

    Attributes:
        openai_api_key: OpenAI credential; empty disables that provider
        anthropic_api_key: Anthropic credential; empty disables that provider
        openai_model: Model used for OpenAI enrichment
        anthropic_model: Model used for Anthropic enrichment
        enrichment_timeout_seconds: Upper bound on one enrichment call
        adaptive_rate_limit: Requests per window for /api/adaptive
        contact_rate_limit: Submissions per window for /api/contact
        rate_limit_window_ms: Fixed window length shared by both routes
        max_body_chars: Largest accepted JSON body
        resend_api_key: Mail relay credential for contact delivery
        contact_email: Destination address for contact submissions
        contact_from_email: Sender address used by the mail relay
        turnstile_secret_key: Cloudflare Turnstile secret; empty skips the CAPTCHA check
    """

    openai_api_key: str = ""
    anthropic_api_key: str = ""
    openai_model: str = DEFAULT_OPENAI_MODEL
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL
    enrichment_timeout_seconds: float = DEFAULT_ENRICHMENT_TIMEOUT_SECONDS
    adaptive_rate_limit: int = DEFAULT_ADAPTIVE_RATE_LIMIT
    contact_rate_limit: int = DEFAULT_CONTACT_RATE_LIMIT
    rate_limit_window_ms: int = DEFAULT_RATE_LIMIT_WINDOW_MS
    max_body_chars: int = DEFAULT_MAX_BODY_CHARS
    resend_api_key: str = ""
    contact_email: str = ""
    contact_from_email: str = DEFAULT_CONTACT_FROM
    turnstile_secret_key: str = ""

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> AppConfig:
        """Build a config from *env* (defaults to ``os.environ``).

        Raises:
            ConfigurationError: If a numeric setting is malformed
        """
        source = os.environ if env is None else env
        return cls(
            openai_api_key=_read_str(source, "OPENAI_API_KEY"),
            anthropic_api_key=_read_str(source, "ANTHROPIC_API_KEY"),
            openai_model=_read_str(source, "FOLIO_OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
            anthropic_model=_read_str(source, "FOLIO_ANTHROPIC_MODEL") or DEFAULT_ANTHROPIC_MODEL,
            enrichment_timeout_seconds=_read_float(
                source, "FOLIO_ENRICHMENT_TIMEOUT", DEFAULT_ENRICHMENT_TIMEOUT_SECONDS
            ),
            adaptive_rate_limit=_read_int(
                source, "FOLIO_ADAPTIVE_RATE_LIMIT", DEFAULT_ADAPTIVE_RATE_LIMIT
            ),
            contact_rate_limit=_read_int(
                source, "FOLIO_CONTACT_RATE_LIMIT", DEFAULT_CONTACT_RATE_LIMIT
            ),
            rate_limit_window_ms=_read_int(
                source, "FOLIO_RATE_LIMIT_WINDOW_MS", DEFAULT_RATE_LIMIT_WINDOW_MS
            ),
            max_body_chars=_read_int(source, "FOLIO_MAX_BODY_CHARS", DEFAULT_MAX_BODY_CHARS),
            resend_api_key=_read_str(source, "RESEND_API_KEY"),
            contact_email=_read_str(source, "CONTACT_EMAIL"),
            contact_from_email=_read_str(source, "CONTACT_FROM_EMAIL") or DEFAULT_CONTACT_FROM,
            turnstile_secret_key=_read_str(source, "TURNSTILE_SECRET_KEY"),
        )

    @property
    def has_openai(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def has_anthropic(self) -> bool:
        return bool(self.anthropic_api_key)

    @property
    def enrichment_enabled(self) -> bool:
        """True when at least one provider credential is configured."""
        return self.has_openai or self.has_anthropic

    @property
    def contact_delivery_enabled(self) -> bool:
        return bool(self.resend_api_key and self.contact_email)

    @property
    def turnstile_enabled(self) -> bool:
        return bool(self.turnstile_secret_key)


__all__ = [
    "AppConfig",
    "DEFAULT_ADAPTIVE_RATE_LIMIT",
    "DEFAULT_ANTHROPIC_MODEL",
    "DEFAULT_CONTACT_RATE_LIMIT",
    "DEFAULT_ENRICHMENT_TIMEOUT_SECONDS",
    "DEFAULT_OPENAI_MODEL",
    "DEFAULT_RATE_LIMIT_WINDOW_MS",
]
