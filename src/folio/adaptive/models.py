"""Domain models for adaptive personalization.

This module defines:
- ThemeTokens / CompanyTheme: color tokens used to skin the site per company
- PersonaProfile: a buyer/reviewer archetype inside one company
- CompanyProfile: a target company with priority tags and personas
- ContentAsset: one entry of the static content catalog
- RankedRecommendation / RecommendationBundle: computed ranking output
- AdaptiveRequest / AdaptiveResponse: the /api/adaptive wire payloads
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator, model_validator

from folio.models import FolioBaseModel, FolioRequestModel

AssetKind = Literal["case-study", "project", "writing", "page"]
ProviderName = Literal["openai", "anthropic"]
NarrativeSource = Literal["deterministic", "ai"]

PROVIDER_NAMES: tuple[str, ...] = ("openai", "anthropic")


class ThemeTokens(FolioBaseModel):
    """Color tokens for one color scheme."""

    primary: str
    accent: str
    ring: str
    background: str
    foreground: str
    muted: str
    border: str


class CompanyTheme(FolioBaseModel):
    light: ThemeTokens
    dark: ThemeTokens


class PersonaProfile(FolioBaseModel):
    """A named archetype whose focus tags bias the ranking.

    Attributes:
        id: Stable identifier, unique within its company
        name: Display name
        role: Job title shown in narratives
        focus_tags: Ordered tags this persona cares about most
        recommendation_goal: One sentence describing what to emphasize
        focus_presets: Short prompts offered by the selector UI
    """

    id: str = Field(..., min_length=1)
    name: str
    role: str
    focus_tags: tuple[str, ...] = Field(..., min_length=1)
    recommendation_goal: str
    focus_presets: tuple[str, ...] = ()


class CompanyProfile(FolioBaseModel):
    """A target company with its personas and theme.

    ``default_persona_id`` must name one of ``personas``; when omitted the
    first persona is the default.
    """

    id: str = Field(..., min_length=1)
    name: str
    website: str
    summary: str
    priority_tags: tuple[str, ...]
    personas: tuple[PersonaProfile, ...] = Field(..., min_length=1)
    theme: CompanyTheme
    default_persona_id: str | None = None

    @model_validator(mode="after")
    def _check_default_persona(self) -> CompanyProfile:
        if self.default_persona_id is not None and self.default_persona_id not in {
            persona.id for persona in self.personas
        }:
            raise ValueError(f"default_persona_id {self.default_persona_id!r} is not a persona of {self.id}")
        return self

    @property
    def default_persona(self) -> PersonaProfile:
        for persona in self.personas:
            if persona.id == self.default_persona_id:
                return persona
        return self.personas[0]

    def find_persona(self, persona_id: str) -> PersonaProfile | None:
        return next((p for p in self.personas if p.id == persona_id), None)


class ContentAsset(FolioBaseModel):
    id: str = Field(..., min_length=1)
    title: str
    url: str
    kind: AssetKind
    summary: str
    tags: tuple[str, ...]


class RankedRecommendation(FolioBaseModel):
    """One scored asset.

    Attributes:
        asset: The catalog entry
        score: Sum of matched tag weights (always > 0)
        matched_tags: Matched tags in the asset's declared order
        reason: Deterministic explanation built from ``matched_tags``
    """

    asset: ContentAsset
    score: int = Field(..., gt=0)
    matched_tags: tuple[str, ...] = Field(..., min_length=1)
    reason: str


class RecommendationBundle(FolioBaseModel):
    company: CompanyProfile
    persona: PersonaProfile
    top_recommendations: tuple[RankedRecommendation, ...]
    supporting_recommendations: tuple[RankedRecommendation, ...]
    highlights: tuple[str, ...]


class AdaptiveRequest(FolioRequestModel):
    """Body of POST /api/adaptive.

    Unknown provider names are treated as "no preference".
    """

    company_id: str = Field(..., alias="companyId", min_length=1, max_length=64)
    persona_id: str = Field(..., alias="personaId", min_length=1, max_length=64)
    provider: ProviderName | None = None

    @field_validator("provider", mode="before")
    @classmethod
    def _ignore_unknown_provider(cls, value: object) -> object:
        if isinstance(value, str) and value.strip().lower() in PROVIDER_NAMES:
            return value.strip().lower()
        return None


class RecommendationItem(FolioBaseModel):
    title: str
    url: str
    kind: AssetKind
    reason: str

    @classmethod
    def from_ranked(cls, ranked: RankedRecommendation) -> RecommendationItem:
        return cls(
            title=ranked.asset.title,
            url=ranked.asset.url,
            kind=ranked.asset.kind,
            reason=ranked.reason,
        )


class AdaptiveMode(FolioBaseModel):
    company_id: str = Field(..., alias="companyId")
    persona_id: str = Field(..., alias="personaId")


class AdaptiveResponse(FolioBaseModel):
    """Body of a 200 response from POST /api/adaptive.

    Serialize with ``to_payload()`` so keys are camelCase and
    ``aiNarrative`` is omitted when no AI narrative was produced.
    """

    mode: AdaptiveMode
    company_name: str = Field(..., alias="companyName")
    persona_name: str = Field(..., alias="personaName")
    persona_role: str = Field(..., alias="personaRole")
    deterministic_narrative: str = Field(..., alias="deterministicNarrative", min_length=1)
    ai_narrative: str | None = Field(default=None, alias="aiNarrative")
    narrative_source: NarrativeSource = Field(..., alias="narrativeSource")
    recommendations: tuple[RecommendationItem, ...]
    supporting_recommendations: tuple[RecommendationItem, ...] = Field(
        ..., alias="supportingRecommendations"
    )
    highlights: tuple[str, ...]

    @model_validator(mode="after")
    def _check_source(self) -> AdaptiveResponse:
        if (self.narrative_source == "ai") != (self.ai_narrative is not None):
            raise ValueError("narrativeSource must be 'ai' exactly when aiNarrative is present")
        return self

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "AdaptiveMode",
    "AdaptiveRequest",
    "AdaptiveResponse",
    "AssetKind",
    "CompanyProfile",
    "CompanyTheme",
    "ContentAsset",
    "NarrativeSource",
    "PROVIDER_NAMES",
    "PersonaProfile",
    "ProviderName",
    "RankedRecommendation",
    "RecommendationBundle",
    "RecommendationItem",
    "ThemeTokens",
]
