"""Adaptive personalization: profiles, content catalog and ranking."""

from folio.adaptive.models import (
    AdaptiveRequest,
    AdaptiveResponse,
    CompanyProfile,
    ContentAsset,
    PersonaProfile,
    RankedRecommendation,
    RecommendationBundle,
)
from folio.adaptive.profiles import (
    SUPPORTED_COMPANY_IDS,
    get_company_profile,
    get_company_profiles,
    get_default_persona,
    get_persona,
)
from folio.adaptive.recommendations import build_visitor_narrative, get_recommendation_bundle

__all__ = [
    "AdaptiveRequest",
    "AdaptiveResponse",
    "CompanyProfile",
    "ContentAsset",
    "PersonaProfile",
    "RankedRecommendation",
    "RecommendationBundle",
    "SUPPORTED_COMPANY_IDS",
    "build_visitor_narrative",
    "get_company_profile",
    "get_company_profiles",
    "get_default_persona",
    "get_persona",
    "get_recommendation_bundle",
]
