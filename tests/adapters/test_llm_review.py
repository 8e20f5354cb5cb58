from __future__ import annotations

import inspect
import json
from collections.abc import Callable

import httpx
import pytest

from modelsentinel.adapters.llm import (
    AnthropicMessagesClient,
    LLMChangeSetReviewer,
    LLMClientError,
    OpenAIChatClient,
    extract_json,
    parse_review_response,
)
from modelsentinel.config.providers import (
    ANTHROPIC_BASE_URL,
    OPENAI_BASE_URL,
    build_provider_config,
)
from modelsentinel.domain.reconciliation import ChangeSet, Disappearance, NewModel
from modelsentinel.domain.review import SYSTEM_PROMPT, ReviewError, Verdict
from tests.helpers.catalog import make_discovered, make_model
from tests.helpers.http import mock_client_factory

type Handler = Callable[[httpx.Request], httpx.Response]

VERDICTS = {
    "verdicts": [
        {
            "model_name": "gpt-5",
            "verdict": "flag",
            "confidence": 1.7,
            "concerns": ["price looks low"],
            "reasoning": "cheaper than gpt-4o",
        },
        {"model_name": "gpt-6", "verdict": "approve", "confidence": 0.9, "concerns": None},
    ]
}


@pytest.mark.parametrize(
    "text",
    [
        '{"verdicts": []}',
        'Here you go:\n```json\n{"verdicts": []}\n```\nThanks',
        '```\n{"verdicts": []}\n```',
        'Sure! {"verdicts": []} Let me know.',
    ],
)
def test_extract_json_variants(text: str) -> None:
    assert json.loads(extract_json(text)) == {"verdicts": []}


def test_extract_json_without_json_fails() -> None:
    with pytest.raises(ReviewError, match="no valid JSON"):
        extract_json("I could not review these models.")


def test_parse_review_response() -> None:
    result = parse_review_response(f"```json\n{json.dumps(VERDICTS)}\n```")

    flagged, approved = result.verdicts
    assert flagged.verdict is Verdict.FLAG
    assert flagged.confidence == 1.0
    assert flagged.concerns == ("price looks low",)
    assert approved.concerns == ()
    assert result.has_flags
    assert not result.has_rejections


def test_parse_review_response_rejects_unknown_verdicts() -> None:
    payload = {"verdicts": [{"model_name": "a", "verdict": "maybe"}]}

    with pytest.raises(ReviewError, match="invalid review response"):
        parse_review_response(json.dumps(payload))


def _anthropic_client(
    handler: Handler, *, api_key: str | None = "ak-test"
) -> AnthropicMessagesClient:
    config = build_provider_config(
        "anthropic",
        base_url=ANTHROPIC_BASE_URL,
        api_key=api_key,
        api_key_env="ANTHROPIC_API_KEY",
        cache=None,
    )
    return AnthropicMessagesClient(
        config=config,
        model="claude-sonnet-4-20250514",
        max_tokens=4096,
        client_factory=mock_client_factory(handler),
    )


def _openai_client(handler: Handler) -> OpenAIChatClient:
    config = build_provider_config(
        "openai",
        base_url=OPENAI_BASE_URL,
        api_key="sk-test",
        api_key_env="OPENAI_API_KEY",
        cache=None,
    )
    return OpenAIChatClient(
        config=config,
        model="gpt-4o",
        max_tokens=2048,
        client_factory=mock_client_factory(handler),
    )


def test_anthropic_client_posts_messages_request() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "content": [
                    {"type": "text", "text": '{"verdicts": '},
                    {"type": "tool_use"},
                    {"type": "text", "text": "[]}"},
                ]
            },
        )

    text = _anthropic_client(handler).complete("system", "user")

    assert text == '{"verdicts": []}'
    (request,) = requests
    assert request.method == "POST"
    assert request.url == httpx.URL("https://api.anthropic.com/v1/messages")
    assert request.headers["x-api-key"] == "ak-test"
    body = json.loads(request.content)
    assert body == {
        "model": "claude-sonnet-4-20250514",
        "max_tokens": 4096,
        "system": "system",
        "messages": [{"role": "user", "content": "user"}],
    }


def test_anthropic_client_reports_status_errors() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(529, text="overloaded")

    expected = r"anthropic API error \(status 529\): overloaded"
    with pytest.raises(LLMClientError, match=expected) as excinfo:
        _anthropic_client(handler).complete("s", "u")

    assert excinfo.value.status_code == 529


def test_anthropic_client_rejects_empty_content() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"content": []})

    with pytest.raises(LLMClientError, match="empty response from anthropic"):
        _anthropic_client(handler).complete("s", "u")


def test_missing_api_key_is_a_review_error_and_sends_nothing() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"content": []})

    with pytest.raises(ReviewError, match="ANTHROPIC_API_KEY") as excinfo:
        _anthropic_client(handler, api_key=None).complete("s", "u")

    assert isinstance(excinfo.value, LLMClientError)
    assert requests == []


def test_completion_clients_share_an_abstract_base() -> None:
    base = AnthropicMessagesClient.__mro__[1]

    assert inspect.isabstract(base)
    assert not inspect.isabstract(AnthropicMessagesClient)
    assert not inspect.isabstract(OpenAIChatClient)


def test_openai_client_uses_json_response_format() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200, json={"choices": [{"message": {"role": "assistant", "content": "{}"}}]}
        )

    assert _openai_client(handler).complete("system", "user") == "{}"

    body = json.loads(requests[0].content)
    assert requests[0].url.path == "/v1/chat/completions"
    assert requests[0].headers["Authorization"] == "Bearer sk-test"
    assert body["response_format"] == {"type": "json_object"}
    assert [message["role"] for message in body["messages"]] == ["system", "user"]


def test_openai_client_rejects_missing_choices() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": []})

    with pytest.raises(LLMClientError, match="empty response from openai"):
        _openai_client(handler).complete("s", "u")


class _StubClient:
    def __init__(self, response: str) -> None:
        self.response = response
        self.prompts: list[tuple[str, str]] = []

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.prompts.append((system_prompt, user_prompt))
        return self.response


def test_reviewer_skips_changesets_without_writes() -> None:
    client = _StubClient("{}")
    changeset = ChangeSet(
        provider="openai",
        disappeared=[Disappearance(name="old", model=make_model("old"))],
    )

    assert LLMChangeSetReviewer(client).evaluate(changeset) is None
    assert client.prompts == []


def test_reviewer_sends_prompts_and_parses_verdicts() -> None:
    client = _StubClient(json.dumps(VERDICTS))
    changeset = ChangeSet(
        provider="openai",
        new=[NewModel(name="gpt-5", model=make_discovered("gpt-5"))],
    )

    result = LLMChangeSetReviewer(client).evaluate(changeset)

    assert result is not None
    assert [verdict.model_name for verdict in result.verdicts] == ["gpt-5", "gpt-6"]
    ((system_prompt, user_prompt),) = client.prompts
    assert system_prompt == SYSTEM_PROMPT
    assert user_prompt.startswith("Provider: openai")


def test_reviewer_propagates_unparseable_responses() -> None:
    changeset = ChangeSet(
        provider="openai",
        new=[NewModel(name="gpt-5", model=make_discovered("gpt-5"))],
    )

    with pytest.raises(ReviewError):
        LLMChangeSetReviewer(_StubClient("no json here")).evaluate(changeset)
