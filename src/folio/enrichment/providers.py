"""Text-generation providers used for optional narrative enrichment.

Both providers speak the vendors' public HTTP APIs through httpx. Any
failure (transport error, non-2xx status, unexpected response shape) is
raised as ``EnrichmentError``; callers convert it to the deterministic
fallback at a single boundary (see ``folio.enrichment.narrative``).
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from folio.adaptive.models import ProviderName
from folio.config import AppConfig
from folio.errors import EnrichmentError
from folio.observability import get_logger

logger = get_logger(__name__)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_API_VERSION = "2023-06-01"
DEFAULT_PROVIDER_TIMEOUT = 10.0


class TextGenerator(Protocol):
    """Opaque text-generation capability."""

    name: str

    async def generate(self, system: str, prompt: str, max_tokens: int) -> str: ...


class _HttpGenerator:
    name = "provider"

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: float = DEFAULT_PROVIDER_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ValueError(f"{self.name} api_key must not be empty")
        self._api_key = api_key
        self._model = model
        self._timeout_seconds = timeout_seconds
        self._external_client = client

    @property
    def model(self) -> str:
        return self._model

    async def _post(self, url: str, payload: dict[str, Any], headers: dict[str, str]) -> Any:
        try:
            if self._external_client is not None:
                response = await self._external_client.post(url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                    response = await client.post(url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise EnrichmentError(self.name, f"timeout after {self._timeout_seconds}s") from e
        except httpx.HTTPError as e:
            raise EnrichmentError(self.name, f"transport error: {type(e).__name__}") from e

        logger.debug(
            "folio.enrichment.provider_response",
            provider=self.name,
            model=self._model,
            status_code=response.status_code,
        )
        if response.status_code >= 400:
            raise EnrichmentError(
                self.name,
                f"HTTP {response.status_code}",
                details={"status_code": response.status_code},
            )
        try:
            return response.json()
        except ValueError as e:
            raise EnrichmentError(self.name, "response is not JSON") from e


class OpenAIGenerator(_HttpGenerator):
    """Chat Completions client.

    Example:
        >>> generator = OpenAIGenerator(api_key="sk-...", model="gpt-4o")
        >>> text = await generator.generate("You are concise.", "Say hi.", 50)
    """

    name = "openai"

    async def generate(self, system: str, prompt: str, max_tokens: int) -> str:
        data = await self._post(
            OPENAI_CHAT_URL,
            {
                "model": self._model,
                "max_tokens": max_tokens,
                "messages": [
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
            },
            {"Authorization": f"Bearer {self._api_key}"},
        )
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise EnrichmentError(self.name, "unexpected response shape") from e
        if not isinstance(content, str):
            raise EnrichmentError(self.name, "unexpected response shape")
        return content


class AnthropicGenerator(_HttpGenerator):
    """Messages API client."""

    name = "anthropic"

    async def generate(self, system: str, prompt: str, max_tokens: int) -> str:
        data = await self._post(
            ANTHROPIC_MESSAGES_URL,
            {
                "model": self._model,
                "max_tokens": max_tokens,
                "system": system,
                "messages": [{"role": "user", "content": prompt}],
            },
            {"x-api-key": self._api_key, "anthropic-version": ANTHROPIC_API_VERSION},
        )
        try:
            blocks = data["content"]
            text = "".join(
                block["text"] for block in blocks if isinstance(block, dict) and block.get("type") == "text"
            )
        except (KeyError, TypeError) as e:
            raise EnrichmentError(self.name, "unexpected response shape") from e
        return text


def select_provider(requested: ProviderName | None, config: AppConfig) -> ProviderName | None:
    """Pick the provider to try, or None when enrichment must be skipped.

    The requested provider wins; otherwise Anthropic when its key is set,
    else OpenAI. The choice is only usable when that provider has a key.

    Example:
        >>> select_provider(None, AppConfig(openai_api_key="sk"))
        'openai'
        >>> select_provider("anthropic", AppConfig(openai_api_key="sk")) is None
        True
    """
    selected: ProviderName = requested or ("anthropic" if config.has_anthropic else "openai")
    if selected == "anthropic" and config.has_anthropic:
        return selected
    if selected == "openai" and config.has_openai:
        return selected
    return None


def create_generator(
    provider: ProviderName,
    config: AppConfig,
    client: httpx.AsyncClient | None = None,
) -> TextGenerator:
    """Build the generator for *provider* from *config*.

    Raises:
        ValueError: If the provider has no configured key
    """
    if provider == "anthropic":
        return AnthropicGenerator(
            api_key=config.anthropic_api_key,
            model=config.anthropic_model,
            timeout_seconds=config.enrichment_timeout_seconds,
            client=client,
        )
    return OpenAIGenerator(
        api_key=config.openai_api_key,
        model=config.openai_model,
        timeout_seconds=config.enrichment_timeout_seconds,
        client=client,
    )


__all__ = [
    "AnthropicGenerator",
    "OpenAIGenerator",
    "TextGenerator",
    "create_generator",
    "select_provider",
]
