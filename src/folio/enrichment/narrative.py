"""Best-effort AI narrative enrichment with a deterministic fallback.

``enrich_narrative`` is the one place provider failures are caught. It
always returns a ``NarrativeResult``; the deterministic narrative is the
fallback of record and is computed before enrichment is attempted.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from folio.adaptive.catalog import PORTFOLIO_OWNER
from folio.adaptive.models import NarrativeSource, RecommendationBundle
from folio.enrichment.providers import DEFAULT_PROVIDER_TIMEOUT, TextGenerator
from folio.errors import EnrichmentError, serialize_server_error
from folio.observability import get_logger

logger = get_logger(__name__)

NARRATIVE_MAX_TOKENS = 200
MIN_AI_NARRATIVE_CHARS = 21
PROMPT_WORK_ITEMS = 4


@dataclass(frozen=True)
class NarrativeResult:
    """Outcome of enrichment.

    Attributes:
        narrative: Text to show; the AI text when ``source == "ai"``
        source: Which path produced ``narrative``
    """

    narrative: str
    source: NarrativeSource

    @property
    def ai_narrative(self) -> str | None:
        return self.narrative if self.source == "ai" else None


def build_system_prompt(bundle: RecommendationBundle, owner: str = PORTFOLIO_OWNER) -> str:
    return (
        f"You write concise, compelling portfolio narratives for a visitor viewing {owner}'s portfolio.\n"
        f"The visitor is from {bundle.company.name} and has the perspective of "
        f"{bundle.persona.name} ({bundle.persona.role}).\n"
        f"Write 2-3 sentences explaining why {owner}'s background is a strong fit for their priorities.\n"
        f"Be specific about the work, not generic. Do not use bullet points. "
        f'Do not use the word "I"; write in third person about {owner}.'
    )


def build_user_prompt(bundle: RecommendationBundle, owner: str = PORTFOLIO_OWNER) -> str:
    top_work = "\n".join(
        f"- {entry.asset.title} ({entry.asset.kind}): {entry.reason}"
        for entry in bundle.top_recommendations[:PROMPT_WORK_ITEMS]
    )
    return (
        f"Company: {bundle.company.name}\n"
        f"Company focus: {bundle.company.summary}\n"
        f"Visitor perspective: {bundle.persona.name}, {bundle.persona.role}\n"
        f"Goal: {bundle.persona.recommendation_goal}\n\n"
        f"Top relevant work:\n{top_work}\n\n"
        f"Write a brief, compelling narrative about why {owner} is a great fit."
    )


async def enrich_narrative(
    bundle: RecommendationBundle,
    deterministic_narrative: str,
    generator: TextGenerator | None,
    timeout: float = DEFAULT_PROVIDER_TIMEOUT,
) -> NarrativeResult:
    """Try the generator once; fall back to *deterministic_narrative* on any failure.

    Timeouts, provider errors and outputs of 20 characters or fewer all
    yield ``source="deterministic"``. ``asyncio.CancelledError`` propagates
    so an abandoned request stops the provider call.
    """
    fallback = NarrativeResult(narrative=deterministic_narrative, source="deterministic")
    if generator is None:
        return fallback

    provider = getattr(generator, "name", type(generator).__name__)
    try:
        text = await asyncio.wait_for(
            generator.generate(
                build_system_prompt(bundle),
                build_user_prompt(bundle),
                NARRATIVE_MAX_TOKENS,
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning(
            "folio.enrichment.failed",
            provider=provider,
            reason="timeout",
            timeout_seconds=timeout,
        )
        return fallback
    except EnrichmentError as e:
        logger.warning(
            "folio.enrichment.failed",
            provider=e.provider,
            reason=e.reason,
            status_code=e.details.get("status_code"),
        )
        return fallback
    except Exception as e:  # noqa: BLE001
        logger.warning(
            "folio.enrichment.failed",
            provider=provider,
            reason="unexpected_error",
            error=serialize_server_error(e),
        )
        return fallback

    stripped = text.strip() if isinstance(text, str) else ""
    if len(stripped) < MIN_AI_NARRATIVE_CHARS:
        logger.info("folio.enrichment.failed", provider=provider, reason="too_short", chars=len(stripped))
        return fallback

    logger.info("folio.enrichment.succeeded", provider=provider, chars=len(stripped))
    return NarrativeResult(narrative=stripped, source="ai")


__all__ = [
    "NARRATIVE_MAX_TOKENS",
    "NarrativeResult",
    "build_system_prompt",
    "build_user_prompt",
    "enrich_narrative",
]
