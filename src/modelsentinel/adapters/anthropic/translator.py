"""Translate Anthropic model listings into discovered catalog candidates."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from modelsentinel.domain.model import (
    DiscoveredModel,
    Limits,
    Modalities,
    ModelStatus,
    SourceType,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import AnthropicModel

# ``claude-sonnet-4-20250514`` is a snapshot; ``claude-sonnet-4-0`` is an alias.
DATED_SNAPSHOT = re.compile(r"-\d{8}$")

_BASE_CAPABILITIES = ("chat", "function_calling", "vision", "streaming", "extended_thinking")
_ADAPTIVE_THINKING_MARKERS = ("opus-4-6", "sonnet-4-6")

# Checked in order; first matching marker wins.
_LIMITS_BY_MARKER: tuple[tuple[tuple[str, ...], Limits], ...] = (
    (("opus-4-6",), Limits(max_tokens=200_000, max_completion_tokens=128_000)),
    (("sonnet-4-6",), Limits(max_tokens=200_000, max_completion_tokens=64_000)),
    (
        ("sonnet-4-5", "sonnet-4-0", "3-7-sonnet"),
        Limits(max_tokens=200_000, max_completion_tokens=64_000),
    ),
    (
        ("opus-4-5", "opus-4-1", "opus-4-0"),
        Limits(max_tokens=200_000, max_completion_tokens=32_000),
    ),
    (("haiku-4-5",), Limits(max_tokens=200_000, max_completion_tokens=64_000)),
)
_HAIKU_LIMITS = Limits(max_tokens=200_000, max_completion_tokens=4_096)
_DEFAULT_LIMITS = Limits(max_tokens=200_000, max_completion_tokens=8_192)


def should_skip(model_id: str) -> bool:
    return DATED_SNAPSHOT.search(model_id) is not None


def infer_family(model_id: str) -> str:
    for tier in ("opus", "sonnet", "haiku"):
        if tier in model_id:
            return f"claude-{tier}"
    return "claude"


def infer_display_name(model_id: str) -> str:
    return " ".join(part[:1].upper() + part[1:] for part in model_id.split("-"))


def infer_capabilities(model_id: str) -> tuple[str, ...]:
    if any(marker in model_id for marker in _ADAPTIVE_THINKING_MARKERS):
        return (*_BASE_CAPABILITIES, "adaptive_thinking")
    return _BASE_CAPABILITIES


def infer_limits(model_id: str, family: str) -> Limits:
    for markers, limits in _LIMITS_BY_MARKER:
        if any(marker in model_id for marker in markers):
            return limits
    if family == "claude-haiku":
        return _HAIKU_LIMITS
    return _DEFAULT_LIMITS


def translate_model(payload: AnthropicModel) -> DiscoveredModel | None:
    model_id = payload.id
    if should_skip(model_id):
        return None
    family = infer_family(model_id)
    return DiscoveredModel(
        name=model_id,
        display_name=payload.display_name or infer_display_name(model_id),
        family=family,
        status=ModelStatus.STABLE,
        limits=infer_limits(model_id, family),
        capabilities=infer_capabilities(model_id),
        modalities=Modalities(input=("text", "image"), output=("text",)),
        discovered_by=SourceType.API,
    )


def translate_models(payloads: Iterable[AnthropicModel]) -> list[DiscoveredModel]:
    models: list[DiscoveredModel] = []
    for payload in payloads:
        model = translate_model(payload)
        if model is not None:
            models.append(model)
    return models
