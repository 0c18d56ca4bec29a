"""Request-correlation identifiers.

``create_request_id`` returns a header-safe token (charset
``[a-zA-Z0-9._:-]``). The primary source is ``uuid.uuid4``; when that is
unavailable it degrades to ``<base36 ms>-<base36 counter>-<hex secure bytes>``
and finally to ``<base36 ms>-<base36 counter>-<PRNG token>``. The rotating
counter keeps consecutive fallback ids distinct even when the clock stands
still. No tier raises.

``normalize_request_id`` sanitizes ids received from or sent to clients.
"""

from __future__ import annotations

import random
import re
import secrets
import threading
import time
import uuid
from collections.abc import Callable

from folio.utils.sanitization import bound_max_chars

DEFAULT_REQUEST_ID_MAX_CHARS = 120
FALLBACK_COUNTER_MODULO = 36**4
FALLBACK_RANDOM_BYTES = 12
FALLBACK_RANDOM_TOKEN_CHARS = 24

_UNSAFE_REQUEST_ID_CHARS = re.compile(r"[^a-zA-Z0-9._:-]")
_BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


class RequestIdGenerator:
    """Tiered request-id factory.

    Every entropy source is injectable so the fallback tiers can be
    exercised deterministically. A source set to ``None`` is treated as
    unavailable, and a source that raises is skipped.

    Args:
        uuid_factory: Primary source returning a UUID string
        secure_bytes: Returns *n* cryptographically strong bytes
        clock_ms: Millisecond wall clock used by the fallback tiers
        insecure_random: Returns a float in [0, 1) for the last tier
    """

    def __init__(
        self,
        *,
        uuid_factory: Callable[[], str] | None = lambda: str(uuid.uuid4()),
        secure_bytes: Callable[[int], bytes] | None = secrets.token_bytes,
        clock_ms: Callable[[], float] = lambda: time.time() * 1000,
        insecure_random: Callable[[], float] = random.random,
    ) -> None:
        self._uuid_factory = uuid_factory
        self._secure_bytes = secure_bytes
        self._clock_ms = clock_ms
        self._insecure_random = insecure_random
        self._counter = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        if self._uuid_factory is not None:
            try:
                return self._uuid_factory()
            except Exception:  # noqa: BLE001
                pass
        return f"{self._timestamp_token()}-{self._next_counter_token()}-{self._random_token()}"

    def _timestamp_token(self) -> str:
        try:
            return to_base36(max(0, int(self._clock_ms())))
        except (ValueError, OverflowError, TypeError):
            return "0"

    def _next_counter_token(self) -> str:
        with self._lock:
            self._counter = (self._counter + 1) % FALLBACK_COUNTER_MODULO
            counter = self._counter
        return to_base36(counter).rjust(4, "0")

    def _random_token(self) -> str:
        if self._secure_bytes is not None:
            try:
                return self._secure_bytes(FALLBACK_RANDOM_BYTES).hex()
            except Exception:  # noqa: BLE001
                pass
        token = ""
        while len(token) < FALLBACK_RANDOM_TOKEN_CHARS:
            token += to_base36(int(self._insecure_random() * 36**8)).rjust(8, "0")
        return token[:FALLBACK_RANDOM_TOKEN_CHARS]


_default_generator = RequestIdGenerator()


def create_request_id() -> str:
    """Return a new request id from the process-wide generator.

    Example:
        >>> len(create_request_id())
        36
    """
    return _default_generator()


def normalize_request_id(value: object, max_chars: object = DEFAULT_REQUEST_ID_MAX_CHARS) -> str | None:
    """Sanitize a request id, or return None when nothing usable remains.

    Whitespace is trimmed, the value is bounded to *max_chars* (at least 1)
    and characters outside ``[a-zA-Z0-9._:-]`` are removed. Non-string
    input yields None. The function is idempotent.

    Example:
        >>> normalize_request_id("  abc\\r\\n<script>  ")
        'abcscript'
        >>> normalize_request_id("###") is None
        True
    """
    if not isinstance(value, str):
        return None
    safe_max_chars = bound_max_chars(max_chars, DEFAULT_REQUEST_ID_MAX_CHARS)
    bounded = value.strip()[:safe_max_chars]
    if not bounded:
        return None
    sanitized = _UNSAFE_REQUEST_ID_CHARS.sub("", bounded)
    return sanitized or None


__all__ = [
    "DEFAULT_REQUEST_ID_MAX_CHARS",
    "RequestIdGenerator",
    "create_request_id",
    "normalize_request_id",
    "to_base36",
]
