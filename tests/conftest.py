"""Shared pytest fixtures for folio tests.

This module provides a controllable clock for the rate limiter, fake text
generators for enrichment, and app/client factories that keep every test
on its own isolated limiter.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from folio.adaptive.models import ProviderName
from folio.config import AppConfig
from folio.contact.delivery import ContactDelivery
from folio.contact.turnstile import TurnstileVerifier
from folio.errors import EnrichmentError
from folio.server import create_app
from folio.transport.rate_limit import FixedWindowRateLimiter
from tests.factories import FakeClock, FakeGenerator


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> FixedWindowRateLimiter:
    """Isolated limiter driven by the fake clock."""
    return FixedWindowRateLimiter(clock=clock)


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def failing_generator() -> FakeGenerator:
    return FakeGenerator(error=EnrichmentError("fake", "HTTP 500", details={"status_code": 500}))


@pytest.fixture
def app_factory(
    limiter: FixedWindowRateLimiter,
) -> Callable[..., FastAPI]:
    """Build apps that share the test's limiter unless one is passed explicitly."""

    def _factory(
        config: AppConfig | None = None,
        generator: FakeGenerator | None = None,
        contact_delivery: ContactDelivery | None = None,
        app_limiter: FixedWindowRateLimiter | None = None,
        turnstile_verifier: TurnstileVerifier | None = None,
    ) -> FastAPI:
        generator_factory: Callable[[ProviderName, AppConfig], FakeGenerator] | None = None
        if generator is not None:

            def _generator_factory(provider: ProviderName, _config: AppConfig) -> FakeGenerator:
                generator.name = provider
                return generator

            generator_factory = _generator_factory

        resolved_config = config or AppConfig()
        return create_app(
            config=resolved_config,
            limiter=app_limiter if app_limiter is not None else limiter,
            generator_factory=generator_factory,
            contact_delivery=contact_delivery or ContactDelivery(resolved_config),
            turnstile_verifier=turnstile_verifier,
        )

    return _factory


@pytest.fixture
def client(app_factory: Callable[..., FastAPI]) -> TestClient:
    """Client for an app with no provider credentials and log-only contact delivery."""
    return TestClient(app_factory())
