"""HTTP behaviour shared by the discovery, review and pull-request clients.

Every outbound call goes through one ``ResilienceConfig``. Discovery GETs are
retried, rate limited and cached; completion and pull-request POSTs are rate
limited but never retried or cached, since replaying them would bill or open a
second time.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

import httpx

if TYPE_CHECKING:
    from collections.abc import Mapping

ShouldCacheHook = Callable[[object], bool]


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Exponential backoff for idempotent requests.

    Provider listings answer 429 under load and 5xx during deploys; both are
    retried, honouring ``Retry-After``. A 4xx other than 429 (bad key, unknown
    model) is returned to the caller on the first attempt.
    """

    total: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    respect_retry_after_header: bool = True
    # POST stays out: completions and pull requests are not idempotent.
    allowed_methods: frozenset[str] = field(
        default_factory=lambda: frozenset({"GET", "HEAD", "OPTIONS"})
    )
    status_forcelist: frozenset[int] = field(
        default_factory=lambda: frozenset({429, 500, 502, 503, 504})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )
    backoff_jitter: float = 1.0


@dataclass(slots=True, frozen=True)
class RateLimit:
    """At most ``max_calls`` requests per ``per_seconds`` window, per client."""

    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """On-disk cache for model listings.

    Only discovery clients carry one; ``--no-cache`` and the review and GitHub
    clients set ``ResilienceConfig.cache`` to ``None``. ``should_cache`` sees
    the decoded JSON body, so an empty or error listing is never stored and
    cannot mask a provider outage on the next run.
    """

    enabled: bool = True
    backend: Literal["sqlite", "memory"] = "sqlite"
    # Defaults to the per-user cache directory.
    sqlite_path: str | None = None
    default_ttl_seconds: float | None = 3600.0
    should_cache: ShouldCacheHook | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    default_headers: Mapping[str, str] | None = None
