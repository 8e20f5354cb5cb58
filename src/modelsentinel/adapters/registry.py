"""Build the provider -> discovery adapter map from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modelsentinel.domain.ports.discovery import AdapterRegistry

from .anthropic import AnthropicAdapter
from .openai import OpenAIAdapter

if TYPE_CHECKING:
    from modelsentinel.config import Settings

    from .http_resilience import ClientFactory


def build_adapter_registry(
    settings: Settings,
    *,
    client_factory: ClientFactory | None = None,
) -> AdapterRegistry:
    registry = AdapterRegistry()
    registry.register(OpenAIAdapter(config=settings.openai, client_factory=client_factory))
    registry.register(AnthropicAdapter(config=settings.anthropic, client_factory=client_factory))
    return registry
