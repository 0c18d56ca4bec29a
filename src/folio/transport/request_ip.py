"""Best-effort client IP extraction from proxy headers."""

from __future__ import annotations

import re
from collections.abc import Mapping

ANONYMOUS_IP = "anonymous"
IP_TOKEN_MAX_CHARS = 80

_UNSAFE_IP_CHARS = re.compile(r"[^a-fA-F0-9:.]")


def _normalize_ip_token(value: str | None) -> str | None:
    if not value:
        return None
    trimmed = value.strip()
    if not trimmed or trimmed.lower() == "unknown":
        return None
    sanitized = _UNSAFE_IP_CHARS.sub("", trimmed[:IP_TOKEN_MAX_CHARS])
    return sanitized or None


def get_request_ip(headers: Mapping[str, str]) -> str:
    """Return the client IP from ``X-Forwarded-For`` or ``X-Real-IP``.

    Only the first ``X-Forwarded-For`` hop is considered. Returns
    ``"anonymous"`` when neither header yields a usable token.

    Args:
        headers: Case-insensitive header mapping (e.g. ``request.headers``)
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        normalized = _normalize_ip_token(forwarded.split(",")[0])
        if normalized:
            return normalized

    real_ip = _normalize_ip_token(headers.get("x-real-ip"))
    if real_ip:
        return real_ip

    return ANONYMOUS_IP


__all__ = ["ANONYMOUS_IP", "get_request_ip"]
