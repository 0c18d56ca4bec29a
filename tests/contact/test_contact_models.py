"""Tests for contact form validation."""

import pytest

from folio.contact.models import (
    INVALID_EMAIL_MESSAGE,
    REQUIRED_FIELDS_MESSAGE,
    ContactRequest,
    validate_contact_request,
)
from folio.errors import InvalidRequestError


def _request(**overrides: str) -> ContactRequest:
    fields = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "subject": "Hello",
        "message": "I would like to talk about your work.",
    }
    fields.update(overrides)
    return ContactRequest.model_validate(fields)


class TestContactRequest:
    """Tests for the raw request model."""

    def test_defaults_are_empty(self) -> None:
        body = ContactRequest.model_validate({})
        assert body.name == body.email == body.message == ""
        assert not body.is_bot

    def test_honeypot_flags_bot(self) -> None:
        assert _request(honeypot="http://spam.example").is_bot


class TestValidateContactRequest:
    """Tests for validate_contact_request."""

    def test_valid_submission(self) -> None:
        submission = validate_contact_request(_request())
        assert submission.name == "Ada Lovelace"
        assert submission.email == "ada@example.com"
        assert submission.subject == "Hello"

    @pytest.mark.parametrize("missing", ["name", "email", "message"])
    def test_required_fields(self, missing: str) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            validate_contact_request(_request(**{missing: ""}))
        assert exc_info.value.message == REQUIRED_FIELDS_MESSAGE
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("email", ["ada", "ada@example", "ada @example.com", "@example.com"])
    def test_invalid_email(self, email: str) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            validate_contact_request(_request(email=email))
        assert exc_info.value.message == INVALID_EMAIL_MESSAGE

    def test_fields_are_sanitized(self) -> None:
        submission = validate_contact_request(
            _request(name="<b>Ada</b>", message="Hi <script>onload=x</script> there")
        )
        assert submission.name == "bAda/b"
        assert "<" not in submission.message
        assert "onload=" not in submission.message

    def test_fields_are_bounded(self) -> None:
        submission = validate_contact_request(
            _request(name="n" * 500, subject="s" * 500, message="m" * 10_000)
        )
        assert len(submission.name) == 100
        assert len(submission.subject) == 200
        assert len(submission.message) == 5000

    def test_markup_only_message_is_rejected(self) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            validate_contact_request(_request(message="<>"))
        assert exc_info.value.message == REQUIRED_FIELDS_MESSAGE
