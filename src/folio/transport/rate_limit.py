"""Fixed-window rate limiting for folio API routes.

This module provides:
    - **RateLimitConfig**: per-call-site budget (requests per window) with
      ``normalize_rate_limit_config`` guarding against malformed values.
    - **FixedWindowRateLimiter**: an in-memory store keyed by identifier.
      One instance is owned by the application (see ``folio.server.create_app``)
      and injected wherever it is needed; tests build their own isolated
      instances with a fake clock.

Window semantics:
    The first hit for an identifier opens a window ``[now, now + window_ms)``.
    Hits inside the window increment the counter until ``max_requests`` is
    reached; further hits are rejected without consuming budget. A hit at
    ``now >= reset_time`` opens a fresh window.

Storage:
    Per-process memory only. Restarting the process resets every counter,
    and in multi-worker deployments the effective limit is
    ``max_requests`` × number of workers.

Memory bound:
    Expired entries are swept opportunistically, at most once per cleanup
    interval, from inside ``hit``. When the map still exceeds its capacity,
    the entries closest to expiry are evicted.
"""

from __future__ import annotations

import math
import re
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from folio.observability import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_REQUESTS = 50
DEFAULT_WINDOW_MS = 60 * 60 * 1000
MIN_WINDOW_MS = 1000
DEFAULT_CLEANUP_INTERVAL_MS = 60_000
DEFAULT_MAX_ENTRIES = 50_000
IDENTIFIER_MAX_CHARS = 160
ANONYMOUS_IDENTIFIER = "anonymous"

_UNSAFE_IDENTIFIER_CHARS = re.compile(r"[^a-zA-Z0-9:._-]")

Clock = Callable[[], float]


def _wall_clock_ms() -> float:
    return time.time() * 1000


@dataclass(frozen=True)
class RateLimitConfig:
    """Budget for one call site.

    Attributes:
        max_requests: Requests allowed per window
        window_ms: Window length in milliseconds
    """

    max_requests: int | float = DEFAULT_MAX_REQUESTS
    window_ms: int | float = DEFAULT_WINDOW_MS


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single ``hit``.

    Attributes:
        success: False when the window was already exhausted
        remaining: Requests left in the current window
        reset_in: Milliseconds until the window resets
    """

    success: bool
    remaining: int
    reset_in: int


@dataclass
class RateLimitEntry:
    count: int
    reset_time: float


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def normalize_rate_limit_config(config: RateLimitConfig) -> RateLimitConfig:
    """Return *config* with integer, bounded values.

    Non-finite or non-numeric values fall back to 50 requests per hour.
    ``max_requests`` is floored to at least 1 and ``window_ms`` to at
    least 1000.

    Example:
        >>> normalize_rate_limit_config(RateLimitConfig(3.8, 500.2))
        RateLimitConfig(max_requests=3, window_ms=1000)
    """
    if _is_finite_number(config.max_requests):
        max_requests = max(1, math.floor(config.max_requests))
    else:
        max_requests = DEFAULT_MAX_REQUESTS
    if _is_finite_number(config.window_ms):
        window_ms = max(MIN_WINDOW_MS, math.floor(config.window_ms))
    else:
        window_ms = DEFAULT_WINDOW_MS
    return RateLimitConfig(max_requests=max_requests, window_ms=window_ms)


def normalize_rate_limit_identifier(identifier: object) -> str:
    """Collapse cosmetically different identifiers onto one bucket key.

    The raw value is bounded, stripped of characters outside
    ``[a-zA-Z0-9:._-]`` and lowercased; an empty result maps to
    ``"anonymous"``.

    Example:
        >>> normalize_rate_limit_identifier("NAMESPACE:1.2.3.4?!")
        'namespace:1.2.3.4'
    """
    raw = identifier if isinstance(identifier, str) else ("" if identifier is None else str(identifier))
    sanitized = _UNSAFE_IDENTIFIER_CHARS.sub("", raw[:IDENTIFIER_MAX_CHARS])
    return sanitized.lower() if sanitized else ANONYMOUS_IDENTIFIER


class FixedWindowRateLimiter:
    """In-memory fixed-window counter keyed by identifier.

    ``hit`` performs the read-check-increment sequence under a lock, so
    concurrent requests on a threaded server never over-admit.

    Example:
        >>> limiter = FixedWindowRateLimiter()
        >>> result = limiter.hit("adaptive:203.0.113.9", RateLimitConfig(40, 3_600_000))
        >>> result.remaining
        39
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        cleanup_interval_ms: int = DEFAULT_CLEANUP_INTERVAL_MS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._clock = clock or _wall_clock_ms
        self._cleanup_interval_ms = cleanup_interval_ms
        self._max_entries = max_entries
        self._entries: dict[str, RateLimitEntry] = {}
        self._last_cleanup_at = 0.0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def hit(self, identifier: object, config: RateLimitConfig | None = None) -> RateLimitResult:
        """Count one request against *identifier* and report the window state."""
        normalized_config = normalize_rate_limit_config(config or RateLimitConfig())
        max_requests = int(normalized_config.max_requests)
        window_ms = int(normalized_config.window_ms)
        key = normalize_rate_limit_identifier(identifier)

        with self._lock:
            now = self._clock()
            self._sweep_expired(now)
            entry = self._entries.get(key)

            if entry is None or now >= entry.reset_time:
                self._entries[key] = RateLimitEntry(count=1, reset_time=now + window_ms)
                self._trim_to_capacity(now)
                return RateLimitResult(success=True, remaining=max_requests - 1, reset_in=window_ms)

            reset_in = max(0, math.ceil(entry.reset_time - now))
            if entry.count >= max_requests:
                return RateLimitResult(success=False, remaining=0, reset_in=reset_in)

            entry.count += 1
            return RateLimitResult(
                success=True,
                remaining=max_requests - entry.count,
                reset_in=reset_in,
            )

    def reset(self) -> None:
        """Drop every tracked window."""
        with self._lock:
            self._entries.clear()
            self._last_cleanup_at = 0.0

    def _sweep_expired(self, now: float) -> None:
        if now - self._last_cleanup_at < self._cleanup_interval_ms:
            return
        self._last_cleanup_at = now
        expired = [key for key, entry in self._entries.items() if now >= entry.reset_time]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("folio.rate_limit.swept", removed=len(expired), remaining=len(self._entries))

    def _trim_to_capacity(self, now: float) -> None:
        if len(self._entries) <= self._max_entries:
            return
        for key in [k for k, entry in self._entries.items() if now >= entry.reset_time]:
            del self._entries[key]
        overflow = len(self._entries) - self._max_entries
        if overflow <= 0:
            return
        candidates = sorted(self._entries.items(), key=lambda item: item[1].reset_time)[:overflow]
        for key, _ in candidates:
            del self._entries[key]
        logger.warning("folio.rate_limit.capacity_evicted", evicted=overflow, max_entries=self._max_entries)


__all__ = [
    "ANONYMOUS_IDENTIFIER",
    "DEFAULT_CLEANUP_INTERVAL_MS",
    "DEFAULT_MAX_ENTRIES",
    "DEFAULT_MAX_REQUESTS",
    "DEFAULT_WINDOW_MS",
    "FixedWindowRateLimiter",
    "RateLimitConfig",
    "RateLimitEntry",
    "RateLimitResult",
    "normalize_rate_limit_config",
    "normalize_rate_limit_identifier",
]
