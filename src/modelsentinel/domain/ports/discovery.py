"""Ports for discovering models from provider sources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from modelsentinel.domain.model import DiscoveredModel, SourceType


class DiscoveryError(RuntimeError):
    """Raised by adapters when a source cannot be queried or parsed."""


class UnknownProviderError(KeyError):
    """Raised when no discovery adapter is registered for a provider."""

    def __init__(self, provider: str) -> None:
        super().__init__(provider)
        self.provider = provider

    def __str__(self) -> str:
        return f"No discovery adapter registered for provider '{self.provider}'"


@dataclass(slots=True, frozen=True)
class DiscoverOptions:
    # Empty means every source the adapter supports.
    sources: tuple[SourceType, ...] = ()
    no_cache: bool = False


@runtime_checkable
class DiscoveryAdapter(Protocol):
    """Source of candidate models for one provider."""

    @property
    def name(self) -> str: ...

    @property
    def supported_sources(self) -> tuple[SourceType, ...]: ...

    def discover(self, options: DiscoverOptions) -> list[DiscoveredModel]: ...


@runtime_checkable
class HealthChecker(Protocol):
    """Optional capability of adapters that can probe their source."""

    @property
    def min_expected_models(self) -> int: ...

    def health_check(self) -> None:
        """Raise when the source is unreachable or unusable."""
        ...


@dataclass(slots=True)
class AdapterRegistry:
    """Explicit provider -> adapter map built once at startup."""

    adapters: dict[str, DiscoveryAdapter] = field(default_factory=dict[str, DiscoveryAdapter])

    @classmethod
    def from_adapters(cls, adapters: Mapping[str, DiscoveryAdapter]) -> AdapterRegistry:
        return cls(adapters=dict(adapters))

    def register(self, adapter: DiscoveryAdapter) -> None:
        self.adapters[adapter.name] = adapter

    def get(self, provider: str) -> DiscoveryAdapter:
        try:
            return self.adapters[provider]
        except KeyError as exc:
            raise UnknownProviderError(provider) from exc

    def names(self) -> list[str]:
        return sorted(self.adapters)

    def __contains__(self, provider: object) -> bool:
        return provider in self.adapters

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())


__all__ = [
    "AdapterRegistry",
    "DiscoverOptions",
    "DiscoveryAdapter",
    "DiscoveryError",
    "HealthChecker",
    "UnknownProviderError",
]
