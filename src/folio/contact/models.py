"""Contact form payloads and validation."""

from __future__ import annotations

import re

from pydantic import Field

from folio.errors import InvalidRequestError
from folio.models import FolioBaseModel, FolioRequestModel
from folio.utils.sanitization import sanitize_input

NAME_MAX_CHARS = 100
EMAIL_MAX_CHARS = 254
SUBJECT_MAX_CHARS = 200
MESSAGE_MAX_CHARS = 5000

REQUIRED_FIELDS_MESSAGE = "Name, email, and message are required."
CAPTCHA_REQUIRED_MESSAGE = "CAPTCHA verification is required."
CAPTCHA_FAILED_MESSAGE = "CAPTCHA verification failed. Please try again."
INVALID_EMAIL_MESSAGE = "Please enter a valid email address."

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ContactRequest(FolioRequestModel):
    """Raw body of POST /api/contact.

    ``honeypot`` is a hidden form field; humans leave it empty.
    ``turnstileToken`` is only checked when a Turnstile secret is configured.
    """

    name: str = ""
    email: str = ""
    subject: str = ""
    message: str = ""
    honeypot: str = ""
    turnstile_token: str = Field(default="", alias="turnstileToken")

    @property
    def is_bot(self) -> bool:
        return bool(self.honeypot)


class ContactSubmission(FolioBaseModel):
    """Sanitized, bounded submission ready for delivery."""

    name: str = Field(..., min_length=1, max_length=NAME_MAX_CHARS)
    email: str = Field(..., min_length=3, max_length=EMAIL_MAX_CHARS)
    subject: str = Field(default="", max_length=SUBJECT_MAX_CHARS)
    message: str = Field(..., min_length=1, max_length=MESSAGE_MAX_CHARS)


def validate_contact_request(request: ContactRequest) -> ContactSubmission:
    """Check required fields and email format, then sanitize and bound each field.

    Raises:
        InvalidRequestError: If a required field is missing or the email is malformed
    """
    if not request.name or not request.email or not request.message:
        raise InvalidRequestError(REQUIRED_FIELDS_MESSAGE)
    if not _EMAIL_PATTERN.match(request.email):
        raise InvalidRequestError(INVALID_EMAIL_MESSAGE)

    name = sanitize_input(request.name, NAME_MAX_CHARS)
    message = sanitize_input(request.message, MESSAGE_MAX_CHARS)
    if not name or not message:
        raise InvalidRequestError(REQUIRED_FIELDS_MESSAGE)

    return ContactSubmission(
        name=name,
        email=request.email.strip()[:EMAIL_MAX_CHARS],
        subject=sanitize_input(request.subject, SUBJECT_MAX_CHARS),
        message=message,
    )


__all__ = [
    "CAPTCHA_FAILED_MESSAGE",
    "CAPTCHA_REQUIRED_MESSAGE",
    "ContactRequest",
    "ContactSubmission",
    "INVALID_EMAIL_MESSAGE",
    "REQUIRED_FIELDS_MESSAGE",
    "validate_contact_request",
]
