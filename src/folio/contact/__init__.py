"""Contact form validation, CAPTCHA verification and delivery."""

from folio.contact.delivery import ContactDelivery, ContactDeliveryResult
from folio.contact.models import ContactRequest, ContactSubmission, validate_contact_request
from folio.contact.turnstile import TurnstileVerifier

__all__ = [
    "ContactDelivery",
    "ContactDeliveryResult",
    "ContactRequest",
    "ContactSubmission",
    "TurnstileVerifier",
    "validate_contact_request",
]
