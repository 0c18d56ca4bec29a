"""Deterministic ranking of the content catalog for a (company, persona) pair.

Scoring:
    Tags are normalized (trimmed, lowercased, ``_`` and whitespace mapped
    to ``-``, then passed through a small alias table). Each persona focus
    tag weighs ``FOCUS_TAG_WEIGHT`` and each company priority tag weighs
    ``PRIORITY_TAG_WEIGHT``; a tag in both weighs their sum. An asset's
    score is the sum of the weights of its matched tags. Zero-score assets
    are dropped.

Ordering:
    Ranked assets are grouped into match tiers: assets matching both a
    focus tag and a priority tag first, then focus-only matches, then
    priority-only matches. Within a tier assets are sorted by descending
    score. The sort is stable, so catalog order breaks ties.

Partition:
    The first ``TOP_RECOMMENDATION_LIMIT`` ranked assets are the top
    recommendations and the next ``SUPPORTING_RECOMMENDATION_LIMIT`` are
    supporting recommendations.

Everything here is a pure function of the static profiles and catalog.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable, Sequence

from folio.adaptive.catalog import get_content_assets
from folio.adaptive.models import (
    CompanyProfile,
    ContentAsset,
    PersonaProfile,
    RankedRecommendation,
    RecommendationBundle,
)
from folio.adaptive.profiles import SUPPORTED_COMPANY_IDS, get_company_profile, get_persona

FOCUS_TAG_WEIGHT = 2
PRIORITY_TAG_WEIGHT = 1
TOP_RECOMMENDATION_LIMIT = 5
SUPPORTING_RECOMMENDATION_LIMIT = 4
MAX_HIGHLIGHTS = 3
MATCH_TIER_BOTH = 2
MATCH_TIER_FOCUS = 1
MATCH_TIER_PRIORITY = 0
MAX_NARRATIVE_TITLES = 3

UNKNOWN_SELECTION_NARRATIVE = (
    "Select a company and persona to generate tailored recommendations."
)

TAG_ALIASES: dict[str, str] = {
    "hitl": "human-in-the-loop",
    "human-in-loop": "human-in-the-loop",
    "ml": "ai-ml",
    "machine-learning": "ai-ml",
    "ai-governance": "governance",
    "change-mgmt": "change-management",
    "data-platforms": "data-platform",
    "safety": "ai-safety",
    "decision-making": "decision-support",
    "program-management": "program-delivery",
}

_KIND_LABELS: dict[str, tuple[str, str]] = {
    "case-study": ("case study", "case studies"),
    "project": ("project", "projects"),
    "writing": ("writing piece", "writing pieces"),
    "page": ("page", "pages"),
}

_TAG_SEPARATORS = re.compile(r"[\s_]+")


def normalize_tag(tag: str) -> str:
    """Map cosmetically different tags onto one canonical form.

    Example:
        >>> normalize_tag("  Human_In the loop ")
        'human-in-the-loop'
        >>> normalize_tag("HITL")
        'human-in-the-loop'
    """
    normalized = _TAG_SEPARATORS.sub("-", tag.strip().lower())
    return TAG_ALIASES.get(normalized, normalized)


def _unique_normalized(tags: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for tag in tags:
        seen.setdefault(normalize_tag(tag), None)
    return list(seen)


def build_weight_map(company: CompanyProfile, persona: PersonaProfile) -> dict[str, int]:
    weights: dict[str, int] = {}
    for tag in _unique_normalized(company.priority_tags):
        weights[tag] = weights.get(tag, 0) + PRIORITY_TAG_WEIGHT
    for tag in _unique_normalized(persona.focus_tags):
        weights[tag] = weights.get(tag, 0) + FOCUS_TAG_WEIGHT
    return weights


def match_tier(
    matched_tags: Sequence[str], focus_tags: frozenset[str], priority_tags: frozenset[str]
) -> int:
    """Return 2 for focus and priority matches, 1 for focus only, 0 for priority only."""
    has_focus = any(tag in focus_tags for tag in matched_tags)
    has_priority = any(tag in priority_tags for tag in matched_tags)
    if has_focus and has_priority:
        return MATCH_TIER_BOTH
    if has_focus:
        return MATCH_TIER_FOCUS
    return MATCH_TIER_PRIORITY


def _join_tags(tags: Sequence[str]) -> str:
    if len(tags) >= 2:
        return f"{tags[0]} and {tags[1]}"
    return tags[0]


def build_reason(
    matched_tags: Sequence[str],
    focus_tags: frozenset[str],
    company: CompanyProfile,
    persona: PersonaProfile,
    summary: str,
) -> str:
    focus_matches = [tag for tag in matched_tags if tag in focus_tags]
    if focus_matches:
        lead = f"Matches {persona.name}'s focus on {_join_tags(focus_matches)}."
    else:
        lead = f"Aligned with {company.name} priorities: {_join_tags(matched_tags)}."
    return f"{lead} {summary}"


def score_asset(asset: ContentAsset, weights: dict[str, int]) -> tuple[int, list[str]]:
    """Return ``(score, matched_tags)`` with tags in the asset's declared order."""
    matched = [tag for tag in _unique_normalized(asset.tags) if tag in weights]
    return sum(weights[tag] for tag in matched), matched


def rank_assets(company: CompanyProfile, persona: PersonaProfile) -> list[RankedRecommendation]:
    weights = build_weight_map(company, persona)
    focus_tags = frozenset(_unique_normalized(persona.focus_tags))
    priority_tags = frozenset(_unique_normalized(company.priority_tags))
    keyed: list[tuple[tuple[int, int], RankedRecommendation]] = []
    for asset in get_content_assets():
        score, matched = score_asset(asset, weights)
        if score <= 0:
            continue
        entry = RankedRecommendation(
            asset=asset,
            score=score,
            matched_tags=tuple(matched),
            reason=build_reason(matched, focus_tags, company, persona, asset.summary),
        )
        keyed.append(((match_tier(matched, focus_tags, priority_tags), score), entry))
    # sort() is stable even with reverse=True: equal keys keep catalog order
    keyed.sort(key=lambda pair: pair[0], reverse=True)
    return [entry for _, entry in keyed]


def _pluralize_kind(kind: str, count: int) -> str:
    singular, plural = _KIND_LABELS.get(kind, (kind, f"{kind}s"))
    return f"{count} {singular if count == 1 else plural}"


def build_highlights(
    persona: PersonaProfile, top: Sequence[RankedRecommendation]
) -> list[str]:
    """Plain statements derived only from static data, at most three."""
    catalog = {normalize_tag(tag) for asset in get_content_assets() for tag in asset.tags}
    focus = _unique_normalized(persona.focus_tags)
    covered = sum(1 for tag in focus if tag in catalog)
    highlights = [
        f"{covered} of {len(focus)} focus areas for {persona.role} are backed by published work."
    ]
    if not top:
        return highlights

    tag_counts = Counter(tag for entry in top for tag in entry.matched_tags)
    # Counter.most_common keeps first-insertion order for ties
    strongest_tag, strongest_count = tag_counts.most_common(1)[0]
    highlights.append(
        f"{strongest_tag} is the strongest overlap, appearing in {strongest_count} of the "
        f"top {len(top)} recommendations."
    )

    kind_counts = Counter(entry.asset.kind for entry in top)
    parts = [_pluralize_kind(kind, count) for kind, count in kind_counts.items()]
    mix = parts[0] if len(parts) == 1 else f"{', '.join(parts[:-1])} and {parts[-1]}"
    highlights.append(f"Top recommendations include {mix}.")
    return highlights[:MAX_HIGHLIGHTS]


def get_recommendation_bundle(company_id: str, persona_id: str) -> RecommendationBundle | None:
    """Rank the catalog for a company/persona pair.

    Returns None when the company is unknown or the persona does not belong
    to it.

    Example:
        >>> bundle = get_recommendation_bundle("anthropic", "anthropic-ceo")
        >>> bundle.top_recommendations[0].asset.id
        'writing-hitl'
    """
    company = get_company_profile(company_id)
    persona = get_persona(company_id, persona_id)
    if company is None or persona is None:
        return None

    ranked = rank_assets(company, persona)
    top = ranked[:TOP_RECOMMENDATION_LIMIT]
    supporting = ranked[
        TOP_RECOMMENDATION_LIMIT : TOP_RECOMMENDATION_LIMIT + SUPPORTING_RECOMMENDATION_LIMIT
    ]
    return RecommendationBundle(
        company=company,
        persona=persona,
        top_recommendations=tuple(top),
        supporting_recommendations=tuple(supporting),
        highlights=tuple(build_highlights(persona, top)),
    )


def narrative_from_bundle(bundle: RecommendationBundle) -> str:
    titles = [entry.asset.title for entry in bundle.top_recommendations[:MAX_NARRATIVE_TITLES]]
    first_pass = "; ".join(titles) if titles else "the full portfolio index"
    return (
        f"{bundle.company.name} priority fit for {bundle.persona.name} "
        f"({bundle.persona.role}): {bundle.persona.recommendation_goal} "
        f"Recommended first pass: {first_pass}."
    )


def build_visitor_narrative(company_id: str, persona_id: str) -> str:
    """Template narrative for a pair; never raises and is never empty.

    Unknown pairs get a fixed guidance sentence.
    """
    bundle = get_recommendation_bundle(company_id, persona_id)
    if bundle is None:
        return UNKNOWN_SELECTION_NARRATIVE
    return narrative_from_bundle(bundle)


__all__ = [
    "FOCUS_TAG_WEIGHT",
    "PRIORITY_TAG_WEIGHT",
    "SUPPORTED_COMPANY_IDS",
    "SUPPORTING_RECOMMENDATION_LIMIT",
    "TOP_RECOMMENDATION_LIMIT",
    "UNKNOWN_SELECTION_NARRATIVE",
    "build_highlights",
    "build_visitor_narrative",
    "get_recommendation_bundle",
    "match_tier",
    "narrative_from_bundle",
    "normalize_tag",
    "rank_assets",
    "score_asset",
]
