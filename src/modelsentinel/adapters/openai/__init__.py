"""OpenAI discovery adapter package."""

from __future__ import annotations

from .client import OpenAIAdapter
from .schema import OpenAIModel, OpenAIModelList
from .translator import translate_model, translate_models

__all__ = [
    "OpenAIAdapter",
    "OpenAIModel",
    "OpenAIModelList",
    "translate_model",
    "translate_models",
]
