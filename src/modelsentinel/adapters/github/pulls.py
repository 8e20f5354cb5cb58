"""Open pull requests through the GitHub REST API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from modelsentinel.adapters.http_resilience import ResilientClient
from modelsentinel.config.errors import MissingConfigurationError
from modelsentinel.config.http_resilience import RateLimit, ResilienceConfig

from .schema import GitHubErrorPayload, PullRequest

if TYPE_CHECKING:
    from modelsentinel.adapters.http_resilience import ClientFactory
    from modelsentinel.config.github import GitHubConfig

log = getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"


class GitHubAPIError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def github_resilience(config: GitHubConfig) -> ResilienceConfig:
    return ResilienceConfig(
        name="github",
        base_url=config.api_url.rstrip("/"),
        timeout_seconds=30.0,
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
        cache=None,
        default_headers={
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        },
    )


class GitHubPullRequests:
    def __init__(
        self,
        config: GitHubConfig,
        *,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._resilience = github_resilience(config)
        self._client_factory = client_factory or ResilientClient

    def create(
        self,
        *,
        title: str,
        body: str,
        head: str,
        base: str | None = None,
        draft: bool = False,
    ) -> PullRequest:
        return asyncio.run(
            self._create_async(
                title=title,
                body=body,
                head=head,
                base=base or self._config.base_branch,
                draft=draft,
            )
        )

    async def _create_async(
        self,
        *,
        title: str,
        body: str,
        head: str,
        base: str,
        draft: bool,
    ) -> PullRequest:
        if not self._config.token:
            raise MissingConfigurationError("Missing GitHub token (set GITHUB_TOKEN)")
        path = f"/repos/{self._config.owner}/{self._config.repo}/pulls"
        payload = {"title": title, "body": body, "head": head, "base": base, "draft": draft}
        async with self._client_factory(self._resilience) as client:
            try:
                response = await client.post(
                    path,
                    json=payload,
                    headers={"Authorization": f"Bearer {self._config.token}"},
                )
            except httpx.HTTPError as exc:
                raise GitHubAPIError(f"creating pull request failed: {exc}") from exc

        if response.status_code != httpx.codes.CREATED:
            raise GitHubAPIError(
                f"creating pull request failed ({response.status_code}): "
                f"{_error_message(response)}",
                status_code=response.status_code,
            )
        try:
            pull = PullRequest.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise GitHubAPIError(f"unexpected pull request payload: {exc}") from exc
        log.info("Opened pull request #%s (%s, draft=%s)", pull.number, pull.html_url, draft)
        return pull


def _error_message(response: httpx.Response) -> str:
    try:
        return GitHubErrorPayload.model_validate(response.json()).message or response.text
    except (ValueError, ValidationError):
        return response.text
