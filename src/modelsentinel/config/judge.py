"""LLM reviewer settings."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_JUDGE_PROVIDER = "anthropic"
DEFAULT_JUDGE_MODEL = "claude-sonnet-4-20250514"
DEFAULT_JUDGE_MAX_TOKENS = 4096
SUPPORTED_JUDGE_PROVIDERS = frozenset({"anthropic", "openai"})


@dataclass(frozen=True, slots=True)
class JudgeConfig:
    enabled: bool = False
    provider: str = DEFAULT_JUDGE_PROVIDER
    model: str = DEFAULT_JUDGE_MODEL
    # "draft" or "exclude"
    on_reject: str = "draft"
    max_tokens: int = DEFAULT_JUDGE_MAX_TOKENS
