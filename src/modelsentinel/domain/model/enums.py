"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ModelStatus(StrEnum):
    STABLE = "stable"
    BETA = "beta"
    PREVIEW = "preview"
    DEPRECATED = "deprecated"


class ProviderType(StrEnum):
    STATIC = "static"
    META = "meta"


class SourceType(StrEnum):
    """How a model was discovered."""

    API = "api"
    DOCS = "docs"
    LLM = "llm"
