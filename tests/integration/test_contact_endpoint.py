"""End-to-end tests for POST /api/contact."""

from collections.abc import Callable

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from folio.config import AppConfig
from folio.contact.delivery import ContactDelivery, ContactDeliveryResult
from folio.contact.models import (
    CAPTCHA_FAILED_MESSAGE,
    CAPTCHA_REQUIRED_MESSAGE,
    ContactSubmission,
)
from folio.contact.turnstile import TurnstileVerifier
from folio.server import (
    CONTACT_DELIVERY_FAILED_MESSAGE,
    CONTACT_RATE_LIMIT_MESSAGE,
    CONTACT_SUCCESS_MESSAGE,
)

pytestmark = pytest.mark.integration

VALID_CONTACT = {
    "name": "Ada Lovelace",
    "email": "ada@example.com",
    "subject": "Hello",
    "message": "I would like to talk about your work.",
}


class RecordingDelivery(ContactDelivery):
    """Delivery double that records submissions and returns a fixed result."""

    def __init__(self, result: ContactDeliveryResult) -> None:
        super().__init__(AppConfig())
        self.result = result
        self.submissions: list[ContactSubmission] = []

    async def deliver(self, submission: ContactSubmission) -> ContactDeliveryResult:
        self.submissions.append(submission)
        return self.result


class FixedVerifier(TurnstileVerifier):
    """Turnstile double that records tokens and returns a fixed verdict."""

    def __init__(self, accept: bool) -> None:
        super().__init__(AppConfig(turnstile_secret_key="ts_secret"))
        self.accept = accept
        self.calls: list[tuple[str, str]] = []

    async def verify(self, token: str, remote_ip: str) -> bool:
        self.calls.append((token, remote_ip))
        return self.accept


class TestContactEndpoint:
    """Tests for POST /api/contact."""

    def test_success_without_relay(self, client: TestClient) -> None:
        response = client.post("/api/contact", json=VALID_CONTACT)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": CONTACT_SUCCESS_MESSAGE}
        assert response.headers["x-ratelimit-limit"] == "5"

    def test_delivered_submission_is_sanitized(self, app_factory: Callable[..., FastAPI]) -> None:
        delivery = RecordingDelivery(ContactDeliveryResult(attempted=True, delivered=True))
        client = TestClient(app_factory(contact_delivery=delivery))
        response = client.post("/api/contact", json={**VALID_CONTACT, "name": "<i>Ada</i>"})
        assert response.status_code == 200
        assert delivery.submissions[0].name == "iAda/i"

    def test_honeypot_is_silently_accepted(self, app_factory: Callable[..., FastAPI]) -> None:
        delivery = RecordingDelivery(ContactDeliveryResult(attempted=True, delivered=True))
        client = TestClient(app_factory(contact_delivery=delivery))
        response = client.post("/api/contact", json={**VALID_CONTACT, "honeypot": "x"})
        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert delivery.submissions == []

    def test_missing_fields(self, client: TestClient) -> None:
        response = client.post("/api/contact", json={"name": "Ada"})
        assert response.status_code == 400
        assert response.json()["error"] == "Name, email, and message are required."

    def test_invalid_email(self, client: TestClient) -> None:
        response = client.post("/api/contact", json={**VALID_CONTACT, "email": "not-an-email"})
        assert response.status_code == 400
        assert response.json()["error"] == "Please enter a valid email address."

    def test_delivery_failure_is_502(self, app_factory: Callable[..., FastAPI]) -> None:
        delivery = RecordingDelivery(
            ContactDeliveryResult(attempted=True, delivered=False, error="Resend delivery failed (500)")
        )
        client = TestClient(app_factory(contact_delivery=delivery))
        response = client.post("/api/contact", json=VALID_CONTACT)
        assert response.status_code == 502
        assert response.json()["error"] == CONTACT_DELIVERY_FAILED_MESSAGE
        assert "Resend" not in response.text

    def test_sixth_submission_is_rejected(self, client: TestClient) -> None:
        for _ in range(5):
            assert client.post("/api/contact", json=VALID_CONTACT).status_code == 200
        response = client.post("/api/contact", json=VALID_CONTACT)
        assert response.status_code == 429
        assert response.json()["error"] == CONTACT_RATE_LIMIT_MESSAGE
        assert int(response.headers["retry-after"]) >= 1

    def test_contact_and_adaptive_budgets_are_separate(self, client: TestClient) -> None:
        for _ in range(5):
            client.post("/api/contact", json=VALID_CONTACT)
        adaptive = client.post(
            "/api/adaptive", json={"companyId": "anthropic", "personaId": "anthropic-ceo"}
        )
        assert adaptive.status_code == 200

    def test_non_json_content_type_is_415(self, client: TestClient) -> None:
        response = client.post(
            "/api/contact", content=b"name=Ada", headers={"Content-Type": "text/plain"}
        )
        assert response.status_code == 415


class TestContactTurnstile:
    """Tests for the CAPTCHA check on POST /api/contact."""

    def _client(
        self, app_factory: Callable[..., FastAPI], verifier: TurnstileVerifier
    ) -> tuple[TestClient, RecordingDelivery]:
        delivery = RecordingDelivery(ContactDeliveryResult(attempted=True, delivered=True))
        app = app_factory(contact_delivery=delivery, turnstile_verifier=verifier)
        return TestClient(app), delivery

    def test_missing_token_is_400(self, app_factory: Callable[..., FastAPI]) -> None:
        verifier = FixedVerifier(accept=True)
        client, delivery = self._client(app_factory, verifier)
        response = client.post("/api/contact", json=VALID_CONTACT)
        assert response.status_code == 400
        assert response.json()["error"] == CAPTCHA_REQUIRED_MESSAGE
        assert verifier.calls == []
        assert delivery.submissions == []

    def test_token_checked_before_field_validation(
        self, app_factory: Callable[..., FastAPI]
    ) -> None:
        client, _ = self._client(app_factory, FixedVerifier(accept=True))
        response = client.post("/api/contact", json={"name": "Ada"})
        assert response.json()["error"] == CAPTCHA_REQUIRED_MESSAGE

    def test_rejected_token_is_403(self, app_factory: Callable[..., FastAPI]) -> None:
        client, delivery = self._client(app_factory, FixedVerifier(accept=False))
        response = client.post("/api/contact", json={**VALID_CONTACT, "turnstileToken": "bad"})
        assert response.status_code == 403
        assert response.json()["error"] == CAPTCHA_FAILED_MESSAGE
        assert response.json()["requestId"] == response.headers["x-request-id"]
        assert delivery.submissions == []

    def test_accepted_token_is_delivered(self, app_factory: Callable[..., FastAPI]) -> None:
        verifier = FixedVerifier(accept=True)
        client, delivery = self._client(app_factory, verifier)
        response = client.post(
            "/api/contact",
            json={**VALID_CONTACT, "turnstileToken": "tok-1"},
            headers={"X-Forwarded-For": "203.0.113.9"},
        )
        assert response.status_code == 200
        assert verifier.calls == [("tok-1", "203.0.113.9")]
        assert len(delivery.submissions) == 1

    def test_honeypot_skips_captcha(self, app_factory: Callable[..., FastAPI]) -> None:
        verifier = FixedVerifier(accept=False)
        client, _ = self._client(app_factory, verifier)
        response = client.post("/api/contact", json={**VALID_CONTACT, "honeypot": "x"})
        assert response.json() == {"success": True}
        assert verifier.calls == []

    def test_token_ignored_without_secret(self, client: TestClient) -> None:
        response = client.post("/api/contact", json={**VALID_CONTACT, "turnstileToken": "tok-1"})
        assert response.status_code == 200

    def test_siteverify_rejection_end_to_end(self, app_factory: Callable[..., FastAPI]) -> None:
        siteverify = httpx.AsyncClient(
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, json={"success": False})
            )
        )
        config = AppConfig(turnstile_secret_key="ts_secret")
        verifier = TurnstileVerifier(config, client=siteverify)
        client = TestClient(app_factory(config=config, turnstile_verifier=verifier))
        response = client.post("/api/contact", json={**VALID_CONTACT, "turnstileToken": "tok-1"})
        assert response.status_code == 403
