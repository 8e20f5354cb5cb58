"""Translate OpenAI model listings into discovered catalog candidates.

The listing only carries identifiers, so family, display name, capabilities,
modalities and limits are inferred from the id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modelsentinel.domain.model import (
    DiscoveredModel,
    Limits,
    Modalities,
    ModelStatus,
    SourceType,
)
from modelsentinel.domain.reconciliation import looks_like_dated_snapshot

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import OpenAIModel

SKIPPED_PREFIXES = (
    "dall-e",
    "tts-",
    "whisper",
    "text-moderation",
    "babbage",
    "davinci",
    "curie",
    "ada-",
)

# Checked in order; first matching prefix wins.
_FAMILY_PREFIXES: tuple[tuple[str, str], ...] = (
    ("gpt-5", "gpt-5"),
    ("gpt-4o", "gpt-4"),
    ("gpt-4.1", "gpt-4"),
    ("gpt-4", "gpt-4"),
    ("gpt-3.5", "gpt-3.5"),
    ("o4", "o-series"),
    ("o3", "o-series"),
    ("o1", "o-series"),
    ("text-embedding", "embedding"),
)

DISPLAY_NAMES: dict[str, str] = {
    "gpt-4o": "GPT-4o",
    "gpt-4o-mini": "GPT-4o Mini",
    "gpt-4-turbo": "GPT-4 Turbo",
    "gpt-4": "GPT-4",
    "gpt-3.5-turbo": "GPT-3.5 Turbo",
    "gpt-3.5-turbo-instruct": "GPT-3.5 Turbo Instruct",
    "gpt-3.5-turbo-16k": "GPT-3.5 Turbo 16K",
    "gpt-5": "GPT-5",
    "gpt-5-mini": "GPT-5 Mini",
    "gpt-5-nano": "GPT-5 Nano",
    "gpt-5-pro": "GPT-5 Pro",
    "gpt-5-codex": "GPT-5 Codex",
    "gpt-5.1": "GPT-5.1",
    "gpt-5.1-codex": "GPT-5.1 Codex",
    "gpt-5.1-codex-mini": "GPT-5.1 Codex Mini",
    "gpt-5.1-codex-max": "GPT-5.1 Codex Max",
    "gpt-5.2": "GPT-5.2",
    "gpt-5.2-codex": "GPT-5.2 Codex",
    "gpt-5.2-pro": "GPT-5.2 Pro",
    "gpt-5.3-codex": "GPT-5.3 Codex",
    "gpt-5.3-codex-spark": "GPT-5.3 Codex Spark",
    "gpt-4.1": "GPT-4.1",
    "gpt-4.1-mini": "GPT-4.1 Mini",
    "gpt-4.1-nano": "GPT-4.1 Nano",
    "o1": "O1",
    "o1-mini": "O1 Mini",
    "o1-pro": "O1 Pro",
    "o3": "O3",
    "o3-mini": "O3 Mini",
    "o4-mini": "O4 Mini",
    "text-embedding-3-small": "Text Embedding 3 Small",
    "text-embedding-3-large": "Text Embedding 3 Large",
    "text-embedding-ada-002": "Text Embedding Ada 002",
}

_FAMILY_LIMITS: dict[str, Limits] = {
    "gpt-5": Limits(max_tokens=128_000, max_completion_tokens=16_384),
    "gpt-4": Limits(max_tokens=128_000, max_completion_tokens=16_384),
    "gpt-3.5": Limits(max_tokens=16_385, max_completion_tokens=4_096),
    "o-series": Limits(max_tokens=200_000, max_completion_tokens=100_000),
    "embedding": Limits(max_tokens=8_191),
}
_DEFAULT_LIMITS = Limits(max_tokens=128_000)


def should_skip(model_id: str) -> bool:
    """Fine-tunes, dated snapshots and non-chat legacy families stay out of the catalog."""

    if model_id.startswith("ft:"):
        return True
    if looks_like_dated_snapshot(model_id):
        return True
    return model_id.startswith(SKIPPED_PREFIXES)


def infer_family(model_id: str) -> str:
    for prefix, family in _FAMILY_PREFIXES:
        if model_id.startswith(prefix):
            return family
    return "other"


def infer_display_name(model_id: str) -> str:
    known = DISPLAY_NAMES.get(model_id)
    if known is not None:
        return known
    return " ".join(part[:1].upper() + part[1:] for part in model_id.split("-"))


def infer_capabilities(model_id: str) -> tuple[str, ...]:
    if "embedding" in model_id:
        return ("embeddings",)
    capabilities = ["chat"]
    if "instruct" not in model_id:
        capabilities.append("function_calling")
    if (
        "gpt-4o" in model_id
        or "gpt-4-turbo" in model_id
        or model_id.startswith(("gpt-5", "gpt-4.1"))
    ):
        capabilities.append("vision")
    return tuple(capabilities)


def infer_modalities(capabilities: tuple[str, ...]) -> Modalities:
    if "embeddings" in capabilities:
        return Modalities(input=("text",), output=("embedding",))
    if "vision" in capabilities:
        return Modalities(input=("text", "image"), output=("text",))
    return Modalities(input=("text",), output=("text",))


def infer_limits(family: str) -> Limits:
    return _FAMILY_LIMITS.get(family, _DEFAULT_LIMITS)


def translate_model(payload: OpenAIModel) -> DiscoveredModel | None:
    model_id = payload.id
    if should_skip(model_id):
        return None
    family = infer_family(model_id)
    capabilities = infer_capabilities(model_id)
    return DiscoveredModel(
        name=model_id,
        display_name=infer_display_name(model_id),
        family=family,
        status=ModelStatus.STABLE,
        limits=infer_limits(family),
        capabilities=capabilities,
        modalities=infer_modalities(capabilities),
        discovered_by=SourceType.API,
    )


def translate_models(payloads: Iterable[OpenAIModel]) -> list[DiscoveredModel]:
    models: list[DiscoveredModel] = []
    for payload in payloads:
        model = translate_model(payload)
        if model is not None:
            models.append(model)
    return models
