"""Sanitization utilities for untrusted free-form input.

Example:
    >>> from folio.utils.sanitization import sanitize_input
    >>>
    >>> sanitize_input("  <b>hi</b> ")
    'bhi/b'
"""

import math
import re

DEFAULT_INPUT_MAX_CHARS = 2000

_CONTROL_CHARS_PATTERN = re.compile(r"[\u0000-\u0008\u000B\u000C\u000E-\u001F\u007F]")
_BIDI_OVERRIDE_PATTERN = re.compile(r"[\u202A-\u202E\u2066-\u2069]")
_ANGLE_BRACKETS_PATTERN = re.compile(r"[<>]")
_JAVASCRIPT_SCHEME_PATTERN = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER_PATTERN = re.compile(r"on\w+=", re.IGNORECASE)


def bound_max_chars(max_chars: object, default: int) -> int:
    """Coerce a caller-provided length bound to a positive integer.

    Non-numeric and non-finite values fall back to *default*.
    """
    if isinstance(max_chars, bool) or not isinstance(max_chars, (int, float)):
        return default
    if not math.isfinite(max_chars):
        return default
    return max(1, math.floor(max_chars))


def sanitize_input(value: str, max_chars: int = DEFAULT_INPUT_MAX_CHARS) -> str:
    """Strip markup-ish and invisible characters from free-form user text.

    Removes control characters, bidi overrides, angle brackets,
    ``javascript:`` schemes and inline ``on*=`` handlers, then trims and
    truncates to *max_chars*.
    """
    safe_max_chars = bound_max_chars(max_chars, DEFAULT_INPUT_MAX_CHARS)
    cleaned = _CONTROL_CHARS_PATTERN.sub("", value)
    cleaned = _BIDI_OVERRIDE_PATTERN.sub("", cleaned)
    cleaned = _ANGLE_BRACKETS_PATTERN.sub("", cleaned)
    cleaned = _JAVASCRIPT_SCHEME_PATTERN.sub("", cleaned)
    cleaned = _EVENT_HANDLER_PATTERN.sub("", cleaned)
    return cleaned.strip()[:safe_max_chars]



__all__ = [
    "bound_max_chars",
    "sanitize_input",
]
