"""End-to-end tests for /api/adaptive, /api/adaptive/profiles and /health."""

from collections.abc import Callable

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from folio import __version__
from folio.adaptive.recommendations import get_recommendation_bundle, narrative_from_bundle
from folio.config import AppConfig
from folio.server import INVALID_IDS_MESSAGE
from folio.transport.rate_limit import FixedWindowRateLimiter
from tests.factories import AI_NARRATIVE, KNOWN_COMPANY_ID, KNOWN_PERSONA_ID, FakeClock, FakeGenerator

pytestmark = pytest.mark.integration

VALID_BODY = {"companyId": KNOWN_COMPANY_ID, "personaId": KNOWN_PERSONA_ID}


class TestAdaptiveEndpoint:
    """Tests for POST /api/adaptive."""

    def test_deterministic_response(self, client: TestClient) -> None:
        response = client.post("/api/adaptive", json=VALID_BODY)
        assert response.status_code == 200
        body = response.json()
        bundle = get_recommendation_bundle(KNOWN_COMPANY_ID, KNOWN_PERSONA_ID)
        assert body["mode"] == VALID_BODY
        assert body["companyName"] == "Anthropic"
        assert body["personaName"] == bundle.persona.name
        assert body["narrativeSource"] == "deterministic"
        assert "aiNarrative" not in body
        assert body["deterministicNarrative"] == narrative_from_bundle(bundle)
        assert [item["title"] for item in body["recommendations"]] == [
            entry.asset.title for entry in bundle.top_recommendations
        ]
        assert len(body["supportingRecommendations"]) == len(bundle.supporting_recommendations)
        assert body["highlights"] == list(bundle.highlights)

    def test_response_headers(self, client: TestClient) -> None:
        response = client.post("/api/adaptive", json=VALID_BODY)
        assert response.headers["x-ratelimit-limit"] == "40"
        assert response.headers["x-ratelimit-remaining"] == "39"
        assert response.headers["x-ratelimit-reset"] == "3600"
        assert response.headers["x-request-id"]
        assert response.headers["cache-control"] == "no-store"
        assert response.headers["content-type"] == "application/json; charset=utf-8"
        assert "retry-after" not in response.headers

    def test_ai_enriched_response(
        self, app_factory: Callable[..., FastAPI], fake_generator: FakeGenerator
    ) -> None:
        app = app_factory(config=AppConfig(anthropic_api_key="sk-ant"), generator=fake_generator)
        response = TestClient(app).post("/api/adaptive", json=VALID_BODY)
        body = response.json()
        assert response.status_code == 200
        assert body["narrativeSource"] == "ai"
        assert body["aiNarrative"] == AI_NARRATIVE
        assert body["deterministicNarrative"]
        assert fake_generator.name == "anthropic"

    def test_requested_provider_is_used(
        self, app_factory: Callable[..., FastAPI], fake_generator: FakeGenerator
    ) -> None:
        config = AppConfig(openai_api_key="sk-o", anthropic_api_key="sk-ant")
        app = app_factory(config=config, generator=fake_generator)
        TestClient(app).post("/api/adaptive", json={**VALID_BODY, "provider": "openai"})
        assert fake_generator.name == "openai"

    def test_provider_failure_falls_back(
        self, app_factory: Callable[..., FastAPI], failing_generator: FakeGenerator
    ) -> None:
        app = app_factory(config=AppConfig(openai_api_key="sk-o"), generator=failing_generator)
        response = TestClient(app).post("/api/adaptive", json=VALID_BODY)
        assert response.status_code == 200
        assert response.json()["narrativeSource"] == "deterministic"
        assert "aiNarrative" not in response.json()

    def test_no_generator_call_without_keys(
        self, app_factory: Callable[..., FastAPI], fake_generator: FakeGenerator
    ) -> None:
        app = app_factory(generator=fake_generator)
        TestClient(app).post("/api/adaptive", json=VALID_BODY)
        assert fake_generator.calls == []

    @pytest.mark.parametrize(
        "body",
        [
            {"companyId": "acme", "personaId": KNOWN_PERSONA_ID},
            {"companyId": KNOWN_COMPANY_ID, "personaId": "nobody"},
            {"companyId": "bcg", "personaId": KNOWN_PERSONA_ID},
            {"companyId": KNOWN_COMPANY_ID},
            {"companyId": 1, "personaId": 2},
        ],
    )
    def test_invalid_ids(self, client: TestClient, body: dict[str, object]) -> None:
        response = client.post("/api/adaptive", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == INVALID_IDS_MESSAGE
        assert response.json()["requestId"] == response.headers["x-request-id"]

    def test_unparsable_body(self, client: TestClient) -> None:
        response = client.post(
            "/api/adaptive", content=b"{nope", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid JSON body."

    @pytest.mark.parametrize(
        ("raw", "content_type"),
        [
            (b"companyId=anthropic", "text/plain"),
            (b"garbage", "application/x-www-form-urlencoded"),
        ],
    )
    def test_non_json_content_type_is_invalid_json(
        self, client: TestClient, raw: bytes, content_type: str
    ) -> None:
        response = client.post("/api/adaptive", content=raw, headers={"Content-Type": content_type})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid JSON body."
        assert response.json()["requestId"] == response.headers["x-request-id"]

    def test_oversized_body_is_invalid_json(self, app_factory: Callable[..., FastAPI]) -> None:
        client = TestClient(app_factory(config=AppConfig(max_body_chars=50)))
        response = client.post("/api/adaptive", json={**VALID_BODY, "padding": "x" * 100})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid JSON body."

    def test_get_not_allowed(self, client: TestClient) -> None:
        assert client.get("/api/adaptive").status_code == 405


class TestAdaptiveRateLimit:
    """Tests for the fixed-window limit on /api/adaptive."""

    def test_41st_request_is_rejected(self, client: TestClient) -> None:
        for _ in range(40):
            assert client.post("/api/adaptive", json=VALID_BODY).status_code == 200

        response = client.post("/api/adaptive", json=VALID_BODY)
        assert response.status_code == 429
        assert response.json()["error"] == "Rate limit exceeded. Try again later."
        assert int(response.headers["retry-after"]) >= 1
        assert response.headers["x-ratelimit-remaining"] == "0"
        assert response.json()["requestId"] == response.headers["x-request-id"]

    def test_invalid_requests_consume_budget(self, app_factory: Callable[..., FastAPI]) -> None:
        client = TestClient(app_factory(config=AppConfig(adaptive_rate_limit=2)))
        client.post("/api/adaptive", json={"companyId": "acme", "personaId": "x"})
        client.post("/api/adaptive", content=b"{", headers={"Content-Type": "application/json"})
        assert client.post("/api/adaptive", json=VALID_BODY).status_code == 429

    def test_window_resets(self, app_factory: Callable[..., FastAPI], clock: FakeClock) -> None:
        client = TestClient(app_factory(config=AppConfig(adaptive_rate_limit=1, rate_limit_window_ms=10_000)))
        assert client.post("/api/adaptive", json=VALID_BODY).status_code == 200
        assert client.post("/api/adaptive", json=VALID_BODY).status_code == 429
        clock.advance(10_000)
        assert client.post("/api/adaptive", json=VALID_BODY).status_code == 200

    def test_clients_are_limited_per_ip(self, app_factory: Callable[..., FastAPI]) -> None:
        client = TestClient(app_factory(config=AppConfig(adaptive_rate_limit=1)))
        first = {"X-Forwarded-For": "203.0.113.1"}
        second = {"X-Forwarded-For": "203.0.113.2"}
        assert client.post("/api/adaptive", json=VALID_BODY, headers=first).status_code == 200
        assert client.post("/api/adaptive", json=VALID_BODY, headers=second).status_code == 200
        assert client.post("/api/adaptive", json=VALID_BODY, headers=first).status_code == 429

    def test_apps_do_not_share_counters(
        self, app_factory: Callable[..., FastAPI], clock: FakeClock
    ) -> None:
        config = AppConfig(adaptive_rate_limit=1)
        first = TestClient(app_factory(config=config))
        second = TestClient(
            app_factory(config=config, app_limiter=FixedWindowRateLimiter(clock=clock))
        )
        assert first.post("/api/adaptive", json=VALID_BODY).status_code == 200
        assert second.post("/api/adaptive", json=VALID_BODY).status_code == 200


class TestProfilesAndHealth:
    """Tests for GET /api/adaptive/profiles and GET /health."""

    def test_profiles(self, client: TestClient) -> None:
        response = client.get("/api/adaptive/profiles")
        assert response.status_code == 200
        companies = response.json()["companies"]
        assert [company["id"] for company in companies] == ["kungfu-ai", "anthropic", "bcg"]
        anthropic = companies[1]
        assert anthropic["defaultPersonaId"] == "anthropic-ceo"
        assert set(anthropic["theme"]) == {"light", "dark"}
        persona = anthropic["personas"][0]
        assert set(persona) == {"id", "name", "role", "recommendationGoal", "focusPresets"}

    def test_profiles_do_not_consume_rate_limit(self, app_factory: Callable[..., FastAPI]) -> None:
        client = TestClient(app_factory(config=AppConfig(adaptive_rate_limit=1)))
        client.get("/api/adaptive/profiles")
        assert client.post("/api/adaptive", json=VALID_BODY).status_code == 200

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}
        assert response.headers["x-request-id"]
