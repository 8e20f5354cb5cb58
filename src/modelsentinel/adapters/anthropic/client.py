"""Anthropic discovery adapter."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from modelsentinel.adapters.http_resilience import ResilientClient
from modelsentinel.config.providers import ANTHROPIC_API_VERSION
from modelsentinel.domain.model import SourceType
from modelsentinel.domain.ports.discovery import DiscoveryError

from .schema import AnthropicModelPage
from .translator import translate_models

if TYPE_CHECKING:
    from modelsentinel.adapters.http_resilience import ClientFactory
    from modelsentinel.config.http_resilience import ResilienceConfig
    from modelsentinel.config.providers import ProviderAPIConfig
    from modelsentinel.domain.model import DiscoveredModel
    from modelsentinel.domain.ports.discovery import DiscoverOptions

    from .schema import AnthropicModel

log = getLogger(__name__)

PAGE_SIZE = 1000
HEALTH_CHECK_TIMEOUT_SECONDS = 10.0
MIN_EXPECTED_MODELS = 4


def _should_cache_payload(payload: object) -> bool:
    try:
        return bool(AnthropicModelPage.model_validate(payload).data)
    except ValidationError:
        return False


class AnthropicAdapter:
    """Discovers Claude models from the paginated ``GET /models`` listing."""

    name = "anthropic"
    supported_sources: tuple[SourceType, ...] = (SourceType.API,)
    min_expected_models = MIN_EXPECTED_MODELS

    def __init__(
        self,
        *,
        config: ProviderAPIConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        resilience = config.resilience
        if resilience.cache is not None:
            cache = replace(resilience.cache, should_cache=_should_cache_payload)
            resilience = replace(resilience, cache=cache)
        self._resilience = resilience
        self._client_factory = client_factory or ResilientClient

    def health_check(self) -> None:
        asyncio.run(self._health_check_async())

    def discover(self, options: DiscoverOptions) -> list[DiscoveredModel]:
        models: list[DiscoveredModel] = []
        for source in options.sources or self.supported_sources:
            if source == SourceType.API:
                payloads = asyncio.run(self._list_models_async(no_cache=options.no_cache))
                translated = translate_models(payloads)
                log.info(
                    "anthropic API discovery complete: %s listed, %s catalog candidates",
                    len(payloads),
                    len(translated),
                )
                models.extend(translated)
            else:
                log.warning("anthropic: source %s is not supported, skipping", source)
        return models

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._config.require_api_key(),
            "anthropic-version": ANTHROPIC_API_VERSION,
        }

    async def _health_check_async(self) -> None:
        resilience = replace(
            self._resilience,
            cache=None,
            timeout_seconds=HEALTH_CHECK_TIMEOUT_SECONDS,
        )
        async with self._client_factory(resilience) as client:
            response = await client.get("/models", params={"limit": 1}, headers=self._headers())
            response.raise_for_status()

    async def _list_models_async(self, *, no_cache: bool) -> list[AnthropicModel]:
        headers = self._headers()
        resilience: ResilienceConfig = (
            replace(self._resilience, cache=None) if no_cache else self._resilience
        )
        models: list[AnthropicModel] = []
        after_id: str | None = None
        async with self._client_factory(resilience) as client:
            while True:
                params: dict[str, str | int] = {"limit": PAGE_SIZE}
                if after_id:
                    params["after_id"] = after_id
                page = await self._fetch_page(client, params=params, headers=headers)
                models.extend(page.data)
                if not page.has_more or not page.last_id:
                    break
                after_id = page.last_id
        return models

    async def _fetch_page(
        self,
        client: ResilientClient,
        *,
        params: dict[str, str | int],
        headers: dict[str, str],
    ) -> AnthropicModelPage:
        try:
            response = await client.get("/models", params=params, headers=headers)
            response.raise_for_status()
            return AnthropicModelPage.model_validate(response.json())
        except httpx.HTTPError as exc:
            raise DiscoveryError(f"anthropic: listing models failed: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise DiscoveryError(f"anthropic: unexpected /models payload: {exc}") from exc
