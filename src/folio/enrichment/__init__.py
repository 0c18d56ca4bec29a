"""Optional AI narrative enrichment.

Provider clients live in ``providers``; the fallback boundary lives in
``narrative``.
"""

from folio.enrichment.narrative import NarrativeResult, enrich_narrative
from folio.enrichment.providers import (
    AnthropicGenerator,
    OpenAIGenerator,
    TextGenerator,
    create_generator,
    select_provider,
)

__all__ = [
    "AnthropicGenerator",
    "NarrativeResult",
    "OpenAIGenerator",
    "TextGenerator",
    "create_generator",
    "enrich_narrative",
    "select_provider",
]
