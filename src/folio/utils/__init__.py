"""Utility modules for folio.

Input sanitization for user-supplied text.
"""

__all__: list[str] = []
