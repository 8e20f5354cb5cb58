"""Chat-completion clients used by the change-set reviewer."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from modelsentinel.adapters.http_resilience import ResilientClient
from modelsentinel.config.errors import ConfigurationError
from modelsentinel.config.providers import ANTHROPIC_API_VERSION
from modelsentinel.domain.review import ReviewError

from .schema import AnthropicMessageResponse, OpenAIChatResponse

if TYPE_CHECKING:
    from modelsentinel.adapters.http_resilience import ClientFactory
    from modelsentinel.config.http_resilience import ResilienceConfig
    from modelsentinel.config.providers import ProviderAPIConfig

log = getLogger(__name__)

COMPLETION_TIMEOUT_SECONDS = 120.0


class LLMClientError(ReviewError):
    """Raised when a completion request fails or returns an unusable payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _completion_resilience(config: ProviderAPIConfig) -> ResilienceConfig:
    return replace(config.resilience, cache=None, timeout_seconds=COMPLETION_TIMEOUT_SECONDS)


class _CompletionClient(ABC):
    provider = ""
    path = ""

    def __init__(
        self,
        *,
        config: ProviderAPIConfig,
        model: str,
        max_tokens: int,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._model = model
        self._max_tokens = max_tokens
        self._resilience = _completion_resilience(config)
        self._client_factory = client_factory or ResilientClient

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        return asyncio.run(self._complete_async(system_prompt, user_prompt))

    async def _complete_async(self, system_prompt: str, user_prompt: str) -> str:
        try:
            headers = self._headers()
        except ConfigurationError as exc:
            raise LLMClientError(f"{self.provider}: {exc}") from exc
        body = self._request_body(system_prompt, user_prompt)
        async with self._client_factory(self._resilience) as client:
            try:
                response = await client.post(self.path, json=body, headers=headers)
            except httpx.HTTPError as exc:
                raise LLMClientError(f"{self.provider}: sending request failed: {exc}") from exc
        if response.status_code != httpx.codes.OK:
            raise LLMClientError(
                f"{self.provider} API error (status {response.status_code}): {response.text}",
                status_code=response.status_code,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise LLMClientError(f"{self.provider}: response is not JSON: {exc}") from exc
        text = self._extract_text(payload)
        log.debug("%s review completion: %s characters", self.provider, len(text))
        return text

    @abstractmethod
    def _headers(self) -> dict[str, str]: ...

    @abstractmethod
    def _request_body(self, system_prompt: str, user_prompt: str) -> dict[str, object]: ...

    @abstractmethod
    def _extract_text(self, payload: object) -> str: ...


class AnthropicMessagesClient(_CompletionClient):
    """``POST /messages`` on the Anthropic API."""

    provider = "anthropic"
    path = "/messages"

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self._config.require_api_key(),
            "anthropic-version": ANTHROPIC_API_VERSION,
        }

    def _request_body(self, system_prompt: str, user_prompt: str) -> dict[str, object]:
        return {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_prompt}],
        }

    def _extract_text(self, payload: object) -> str:
        try:
            response = AnthropicMessageResponse.model_validate(payload)
        except ValidationError as exc:
            raise LLMClientError(f"anthropic: unexpected response: {exc}") from exc
        if response.error is not None:
            raise LLMClientError(
                f"anthropic error: {response.error.type}: {response.error.message}"
            )
        if not response.content:
            raise LLMClientError("empty response from anthropic")
        return "".join(block.text for block in response.content if block.type == "text")


class OpenAIChatClient(_CompletionClient):
    """``POST /chat/completions`` on the OpenAI API, JSON response format."""

    provider = "openai"
    path = "/chat/completions"

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._config.require_api_key()}"}

    def _request_body(self, system_prompt: str, user_prompt: str) -> dict[str, object]:
        return {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "response_format": {"type": "json_object"},
        }

    def _extract_text(self, payload: object) -> str:
        try:
            response = OpenAIChatResponse.model_validate(payload)
        except ValidationError as exc:
            raise LLMClientError(f"openai: unexpected response: {exc}") from exc
        if response.error is not None:
            raise LLMClientError(f"openai error: {response.error.type}: {response.error.message}")
        if not response.choices:
            raise LLMClientError("empty response from openai")
        return response.choices[0].message.content or ""
