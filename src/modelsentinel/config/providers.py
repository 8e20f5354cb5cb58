"""Discovery provider API settings."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .errors import MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig

OPENAI_BASE_URL = "https://api.openai.com/v1"
ANTHROPIC_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_API_VERSION = "2023-06-01"
PROVIDER_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class ProviderAPIConfig:
    name: str
    base_url: str
    api_key: str | None
    api_key_env: str
    resilience: ResilienceConfig

    def require_api_key(self) -> str:
        if not self.api_key:
            raise MissingConfigurationError(
                f"Missing API key for {self.name} (set {self.api_key_env})"
            )
        return self.api_key

    def without_cache(self) -> ProviderAPIConfig:
        return replace(self, resilience=replace(self.resilience, cache=None))


def build_provider_config(
    name: str,
    *,
    base_url: str,
    api_key: str | None,
    api_key_env: str,
    cache: CacheConfig | None,
    headers: dict[str, str] | None = None,
) -> ProviderAPIConfig:
    return ProviderAPIConfig(
        name=name,
        base_url=base_url.rstrip("/"),
        api_key=api_key,
        api_key_env=api_key_env,
        resilience=ResilienceConfig(
            name=name,
            base_url=base_url.rstrip("/"),
            timeout_seconds=PROVIDER_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            cache=cache,
            default_headers=headers,
        ),
    )
