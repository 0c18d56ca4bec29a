"""Static company and persona profiles.

Profiles are loaded once at import time and never mutated. Lookups return
None for unknown ids instead of raising.
"""

from __future__ import annotations

from folio.adaptive.models import CompanyProfile, CompanyTheme, PersonaProfile, ThemeTokens

_KUNGFU_AI = CompanyProfile(
    id="kungfu-ai",
    name="KUNGFU.AI",
    website="https://www.kungfu.ai",
    summary=(
        "AI strategy, engineering, and operations consultancy focused on delivering "
        "responsible AI in complex organizations."
    ),
    priority_tags=(
        "strategy",
        "ai-engineering",
        "operations",
        "responsible-ai",
        "governance",
        "enterprise-delivery",
        "change-management",
    ),
    theme=CompanyTheme(
        light=ThemeTokens(
            primary="#E41159",
            accent="#4421D2",
            ring="#C91266",
            background="#FFF8FB",
            foreground="#110A29",
            muted="#FDE7F0",
            border="#F6B3CB",
        ),
        dark=ThemeTokens(
            primary="#F0598D",
            accent="#8D7BFF",
            ring="#F0598D",
            background="#130A22",
            foreground="#F8ECF5",
            muted="#28143D",
            border="#4B285F",
        ),
    ),
    default_persona_id="kungfu-cto",
    personas=(
        PersonaProfile(
            id="kungfu-cto",
            name="Ron Green",
            role="Co-founder & CTO",
            recommendation_goal=(
                "Show production-grade AI architecture, safety controls, and delivery "
                "quality under real constraints."
            ),
            focus_presets=(
                "Emphasize architecture tradeoffs and reliability decisions.",
                "Highlight human-in-the-loop controls and auditability.",
                "Focus on scaling path from pilot to production.",
            ),
            focus_tags=(
                "ai-engineering",
                "ml-experimentation",
                "human-in-the-loop",
                "auditability",
                "enterprise-delivery",
                "security",
            ),
        ),
        PersonaProfile(
            id="kungfu-managing-director",
            name="Stephen Straus",
            role="Co-founder & Managing Director",
            recommendation_goal=(
                "Emphasize client outcomes, strategic narrative, and evidence of scalable "
                "delivery leadership."
            ),
            focus_presets=(
                "Frame outcomes in business value and stakeholder trust.",
                "Show repeatable delivery patterns across organizations.",
                "Lead with strategic decision impact, then implementation depth.",
            ),
            focus_tags=(
                "strategy",
                "leadership",
                "outcomes",
                "enterprise",
                "governance",
                "program-delivery",
            ),
        ),
        PersonaProfile(
            id="kungfu-cso",
            name="Benjamin Herndon",
            role="Chief Strategy Officer",
            recommendation_goal=(
                "Highlight strategic framing, adoption pathways, and governance-first AI "
                "decision support."
            ),
            focus_presets=(
                "Focus on responsible AI operating model and governance.",
                "Emphasize adoption strategy and cross-functional alignment.",
                "Position work as decision-support, not automation theater.",
            ),
            focus_tags=(
                "strategy",
                "decision-support",
                "responsible-ai",
                "governance",
                "stakeholder-alignment",
                "adoption",
            ),
        ),
        PersonaProfile(
            id="kungfu-vp-ai-strategy",
            name="Daniel Bruce",
            role="VP of AI Strategy",
            recommendation_goal=(
                "Show tactical AI execution tied to measurable business decisions and "
                "operating models."
            ),
            focus_presets=(
                "Emphasize roadmap execution over model novelty.",
                "Focus on measurable adoption and operational behavior change.",
                "Highlight delivery governance that avoids slowing teams down.",
            ),
            focus_tags=(
                "ai-engineering",
                "strategy",
                "operations",
                "decision-support",
                "adoption",
                "delivery",
            ),
        ),
        PersonaProfile(
            id="kungfu-engineering-director",
            name="Engineering Leadership",
            role="Director of Engineering",
            recommendation_goal=(
                "Focus on technical depth, model operations, and human-in-the-loop "
                "quality controls."
            ),
            focus_presets=(
                "Detail observability and override telemetry loops.",
                "Emphasize reusable architecture patterns and standards.",
                "Focus on reducing technical risk while shipping quickly.",
            ),
            focus_tags=(
                "ml-experimentation",
                "ai-engineering",
                "clustering",
                "embeddings",
                "governance",
                "delivery",
            ),
        ),
        PersonaProfile(
            id="kungfu-head-of-people",
            name="Meg Marsh",
            role="Head of People",
            recommendation_goal=(
                "Highlight adoption leadership, cross-functional enablement, and evidence "
                "of strengthening team culture through operational and change-management "
                "practices."
            ),
            focus_presets=(
                "Emphasize adoption and enablement across diverse teams.",
                "Focus on stakeholder alignment, communication, and organizational change management.",
                "Show consulting-environment collaboration and leadership that reduces operational friction.",
            ),
            focus_tags=(
                "change-management",
                "adoption",
                "enablement",
                "stakeholder-alignment",
                "leadership",
                "operations",
                "governance",
                "delivery",
            ),
        ),
    ),
)

_ANTHROPIC = CompanyProfile(
    id="anthropic",
    name="Anthropic",
    website="https://www.anthropic.com",
    summary=(
        "AI research and product company focused on safe, steerable, and trustworthy "
        "frontier model deployment."
    ),
    priority_tags=(
        "ai-safety",
        "alignment",
        "responsible-ai",
        "governance",
        "evaluation",
        "trust",
        "enterprise",
    ),
    theme=CompanyTheme(
        light=ThemeTokens(
            primary="#DA7756",
            accent="#6A9BCC",
            ring="#DA7756",
            background="#FAF9F5",
            foreground="#141413",
            muted="#EEECE2",
            border="#E1DDD1",
        ),
        dark=ThemeTokens(
            primary="#E28B6E",
            accent="#9AB9DA",
            ring="#E28B6E",
            background="#1B1916",
            foreground="#F8F3EA",
            muted="#2A2620",
            border="#403A31",
        ),
    ),
    default_persona_id="anthropic-ceo",
    personas=(
        PersonaProfile(
            id="anthropic-ceo",
            name="Dario Amodei",
            role="CEO (scenario)",
            recommendation_goal=(
                "Demonstrate safety-minded delivery, robust human oversight, and "
                "disciplined deployment in regulated environments."
            ),
            focus_presets=(
                "Emphasize safety-by-design and responsible deployment boundaries.",
                "Focus on calibration between capability and governance controls.",
                "Highlight human oversight as a product requirement, not a fallback.",
            ),
            focus_tags=(
                "ai-safety",
                "responsible-ai",
                "human-in-the-loop",
                "governance",
                "evaluation",
                "enterprise-delivery",
                "alignment",
            ),
        ),
    ),
)

_BCG = CompanyProfile(
    id="bcg",
    name="Boston Consulting Group",
    website="https://www.bcg.com",
    summary=(
        "Global management consulting firm advising on strategy, technology "
        "transformation, GenAI adoption, and data-driven operating models."
    ),
    priority_tags=(
        "strategy",
        "enterprise-delivery",
        "governance",
        "ai-engineering",
        "data-platform",
        "operations",
        "leadership",
        "consulting",
    ),
    theme=CompanyTheme(
        light=ThemeTokens(
            primary="#147B58",
            accent="#0D6E4F",
            ring="#147B58",
            background="#F8FAF9",
            foreground="#0F1F18",
            muted="#EEF3F0",
            border="#D1DDD6",
        ),
        dark=ThemeTokens(
            primary="#2EA87A",
            accent="#5CC4A0",
            ring="#2EA87A",
            background="#0A1210",
            foreground="#E8F2EC",
            muted="#16261F",
            border="#1E3A2E",
        ),
    ),
    default_persona_id="bcg-harsh",
    personas=(
        PersonaProfile(
            id="bcg-harsh",
            name="Harsh Vardhan Singh",
            role="Partner, GenAI, Data & Agents",
            recommendation_goal=(
                "Demonstrate production AI delivery, data platform architecture, and "
                "strategic transformation outcomes that translate to enterprise-scale "
                "GenAI impact."
            ),
            focus_presets=(
                "Emphasize AI/ML delivery at scale with measurable business outcomes.",
                "Highlight data platform architecture and analytics that drive strategic decisions.",
                "Focus on governance, adoption, and change management in complex organizations.",
            ),
            focus_tags=(
                "ai-engineering",
                "ai-ml",
                "strategy",
                "enterprise-delivery",
                "data-platform",
                "analytics",
                "adoption",
                "decision-support",
                "governance",
                "automation",
                "leadership",
                "operations",
            ),
        ),
    ),
)

COMPANY_PROFILES: tuple[CompanyProfile, ...] = (_KUNGFU_AI, _ANTHROPIC, _BCG)

SUPPORTED_COMPANY_IDS: tuple[str, ...] = tuple(company.id for company in COMPANY_PROFILES)

_PROFILES_BY_ID = {company.id: company for company in COMPANY_PROFILES}


def get_company_profiles() -> tuple[CompanyProfile, ...]:
    return COMPANY_PROFILES


def get_company_profile(company_id: str) -> CompanyProfile | None:
    return _PROFILES_BY_ID.get(company_id)


def get_persona(company_id: str, persona_id: str) -> PersonaProfile | None:
    """Return the persona only if it belongs to *company_id*."""
    company = get_company_profile(company_id)
    if company is None:
        return None
    return company.find_persona(persona_id)


def get_default_persona(company_id: str) -> PersonaProfile | None:
    company = get_company_profile(company_id)
    return company.default_persona if company is not None else None


__all__ = [
    "COMPANY_PROFILES",
    "SUPPORTED_COMPANY_IDS",
    "get_company_profile",
    "get_company_profiles",
    "get_default_persona",
    "get_persona",
]
