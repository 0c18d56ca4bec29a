"""Tests for contact delivery through the mail relay."""

import json

import httpx
import pytest

from folio.config import AppConfig
from folio.contact.delivery import RESEND_API_URL, ContactDelivery, build_email_text
from folio.contact.models import ContactSubmission

SUBMISSION = ContactSubmission(
    name="Ada Lovelace",
    email="ada@example.com",
    subject="",
    message="I would like to talk.",
)
RELAY_CONFIG = AppConfig(resend_api_key="re_test", contact_email="owner@example.com")


def _delivery(handler) -> tuple[ContactDelivery, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ContactDelivery(RELAY_CONFIG, client=client), client


class TestContactDelivery:
    """Tests for ContactDelivery.deliver."""

    def test_email_text(self) -> None:
        text = build_email_text(SUBMISSION)
        assert "From: Ada Lovelace <ada@example.com>" in text
        assert "Subject: (none)" in text
        assert text.endswith("I would like to talk.")

    @pytest.mark.asyncio
    async def test_log_only_without_relay(self) -> None:
        delivery = ContactDelivery(AppConfig())
        assert not delivery.enabled
        result = await delivery.deliver(SUBMISSION)
        assert result.attempted is False
        assert result.delivered is False

    @pytest.mark.asyncio
    async def test_relay_requires_destination(self) -> None:
        assert not ContactDelivery(AppConfig(resend_api_key="re_test")).enabled

    @pytest.mark.asyncio
    async def test_delivered(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "email-1"})

        delivery, client = _delivery(handler)
        async with client:
            result = await delivery.deliver(SUBMISSION)

        assert result.attempted and result.delivered
        request = seen[0]
        assert str(request.url) == RESEND_API_URL
        assert request.headers["authorization"] == "Bearer re_test"
        body = json.loads(request.content)
        assert body["to"] == ["owner@example.com"]
        assert body["reply_to"] == "ada@example.com"
        assert body["subject"] == "Portfolio Contact: New message"

    @pytest.mark.asyncio
    async def test_relay_rejection(self) -> None:
        delivery, client = _delivery(lambda request: httpx.Response(422, text="bad sender"))
        async with client:
            result = await delivery.deliver(SUBMISSION)
        assert result.attempted and not result.delivered
        assert result.error == "Resend delivery failed (422): bad sender"

    @pytest.mark.asyncio
    async def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        delivery, client = _delivery(handler)
        async with client:
            result = await delivery.deliver(SUBMISSION)
        assert result.attempted and not result.delivered
        assert result.error == "Resend request error: ConnectError"
