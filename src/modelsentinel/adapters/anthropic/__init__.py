"""Anthropic discovery adapter package."""

from __future__ import annotations

from .client import AnthropicAdapter
from .schema import AnthropicModel, AnthropicModelPage
from .translator import translate_model, translate_models

__all__ = [
    "AnthropicAdapter",
    "AnthropicModel",
    "AnthropicModelPage",
    "translate_model",
    "translate_models",
]
