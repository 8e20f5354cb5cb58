"""LLM completion clients and the change-set reviewer built on them."""

from __future__ import annotations

from .client import AnthropicMessagesClient, LLMClientError, OpenAIChatClient
from .parsing import extract_json, parse_review_response
from .reviewer import LLMChangeSetReviewer

__all__ = [
    "AnthropicMessagesClient",
    "LLMChangeSetReviewer",
    "LLMClientError",
    "OpenAIChatClient",
    "extract_json",
    "parse_review_response",
]
