"""OpenAI discovery adapter."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from modelsentinel.adapters.http_resilience import ResilientClient
from modelsentinel.domain.model import SourceType
from modelsentinel.domain.ports.discovery import DiscoveryError

from .schema import OpenAIModelList
from .translator import translate_models

if TYPE_CHECKING:
    from modelsentinel.adapters.http_resilience import ClientFactory
    from modelsentinel.config.http_resilience import ResilienceConfig
    from modelsentinel.config.providers import ProviderAPIConfig
    from modelsentinel.domain.model import DiscoveredModel
    from modelsentinel.domain.ports.discovery import DiscoverOptions

    from .schema import OpenAIModel

log = getLogger(__name__)


def _should_cache_payload(payload: object) -> bool:
    """Only cache listings that actually contain models."""
    try:
        return bool(OpenAIModelList.model_validate(payload).data)
    except ValidationError:
        return False


class OpenAIAdapter:
    """Discovers chat and embedding models from ``GET /models``."""

    name = "openai"
    supported_sources: tuple[SourceType, ...] = (SourceType.API,)

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

    def discover(self, options: DiscoverOptions) -> list[DiscoveredModel]:
        models: list[DiscoveredModel] = []
        for source in options.sources or self.supported_sources:
            if source == SourceType.API:
                models.extend(self._discover_from_api(no_cache=options.no_cache))
            else:
                log.warning("openai: source %s is not supported, skipping", source)
        return models

    def _discover_from_api(self, *, no_cache: bool) -> list[DiscoveredModel]:
        payloads = asyncio.run(self._list_models_async(no_cache=no_cache))
        models = translate_models(payloads)
        log.info(
            "openai API discovery complete: %s listed, %s catalog candidates",
            len(payloads),
            len(models),
        )
        return models

    async def _list_models_async(self, *, no_cache: bool) -> list[OpenAIModel]:
        api_key = self._config.require_api_key()
        resilience: ResilienceConfig = (
            replace(self._resilience, cache=None) if no_cache else self._resilience
        )
        async with self._client_factory(resilience) as client:
            try:
                response = await client.get(
                    "/models",
                    headers={"Authorization": f"Bearer {api_key}"},
                )
                response.raise_for_status()
                listing = OpenAIModelList.model_validate(response.json())
            except httpx.HTTPError as exc:
                raise DiscoveryError(f"openai: listing models failed: {exc}") from exc
            except (ValueError, ValidationError) as exc:
                raise DiscoveryError(f"openai: unexpected /models payload: {exc}") from exc
        return listing.data
