"""Tests for enrich_narrative and its deterministic fallback."""

import asyncio

import pytest

from folio.adaptive.catalog import PORTFOLIO_OWNER
from folio.adaptive.recommendations import get_recommendation_bundle, narrative_from_bundle
from folio.enrichment.narrative import (
    NARRATIVE_MAX_TOKENS,
    NarrativeResult,
    build_system_prompt,
    build_user_prompt,
    enrich_narrative,
)
from folio.errors import EnrichmentError
from tests.factories import AI_NARRATIVE, KNOWN_COMPANY_ID, KNOWN_PERSONA_ID, FakeGenerator


@pytest.fixture
def bundle():
    return get_recommendation_bundle(KNOWN_COMPANY_ID, KNOWN_PERSONA_ID)


class TestPrompts:
    """Tests for prompt construction."""

    def test_system_prompt_names_visitor(self, bundle) -> None:
        prompt = build_system_prompt(bundle)
        assert bundle.company.name in prompt
        assert f"{bundle.persona.name} ({bundle.persona.role})" in prompt
        assert PORTFOLIO_OWNER in prompt

    def test_user_prompt_lists_top_four(self, bundle) -> None:
        prompt = build_user_prompt(bundle)
        for entry in bundle.top_recommendations[:4]:
            assert entry.asset.title in prompt
        if len(bundle.top_recommendations) > 4:
            assert bundle.top_recommendations[4].asset.title not in prompt


class TestEnrichNarrative:
    """Tests for the enrichment boundary."""

    @pytest.mark.asyncio
    async def test_no_generator_is_deterministic(self, bundle) -> None:
        result = await enrich_narrative(bundle, "fallback text", None)
        assert result == NarrativeResult("fallback text", "deterministic")
        assert result.ai_narrative is None

    @pytest.mark.asyncio
    async def test_success_returns_stripped_ai_text(self, bundle) -> None:
        generator = FakeGenerator(text=f"  {AI_NARRATIVE}\n")
        result = await enrich_narrative(bundle, narrative_from_bundle(bundle), generator)
        assert result.source == "ai"
        assert result.ai_narrative == AI_NARRATIVE
        assert len(generator.calls) == 1
        assert generator.calls[0][2] == NARRATIVE_MAX_TOKENS

    @pytest.mark.asyncio
    async def test_provider_error_falls_back(self, bundle, failing_generator: FakeGenerator) -> None:
        result = await enrich_narrative(bundle, "fallback text", failing_generator)
        assert result == NarrativeResult("fallback text", "deterministic")

    @pytest.mark.asyncio
    async def test_unexpected_error_falls_back(self, bundle) -> None:
        generator = FakeGenerator(error=KeyError("choices"))
        result = await enrich_narrative(bundle, "fallback text", generator)
        assert result.source == "deterministic"

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self, bundle) -> None:
        generator = FakeGenerator(delay=1.0)
        result = await enrich_narrative(bundle, "fallback text", generator, timeout=0.01)
        assert result == NarrativeResult("fallback text", "deterministic")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "Too short to use.", "x" * 20, f"  {'y' * 20}  "])
    async def test_short_output_falls_back(self, bundle, text: str) -> None:
        result = await enrich_narrative(bundle, "fallback text", FakeGenerator(text=text))
        assert result.source == "deterministic"

    @pytest.mark.asyncio
    async def test_minimum_length_output_accepted(self, bundle) -> None:
        result = await enrich_narrative(bundle, "fallback text", FakeGenerator(text="z" * 21))
        assert result.source == "ai"

    @pytest.mark.asyncio
    async def test_non_string_output_falls_back(self, bundle) -> None:
        generator = FakeGenerator(text=None)  # type: ignore[arg-type]
        result = await enrich_narrative(bundle, "fallback text", generator)
        assert result.source == "deterministic"

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, bundle) -> None:
        """Test that cancelling the caller is not swallowed by the fallback."""
        generator = FakeGenerator(delay=10.0)
        task = asyncio.create_task(enrich_narrative(bundle, "fallback text", generator, timeout=30))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_enrichment_error_attributes(self, bundle) -> None:
        error = EnrichmentError("anthropic", "HTTP 503", details={"status_code": 503})
        result = await enrich_narrative(bundle, "fallback text", FakeGenerator(error=error))
        assert result.source == "deterministic"
        assert error.details == {"provider": "anthropic", "status_code": 503}
