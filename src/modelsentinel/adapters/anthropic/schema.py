"""Minimal Pydantic models for the Anthropic ``/models`` endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AnthropicBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class AnthropicModel(AnthropicBaseModel):
    id: str
    display_name: str = ""
    created_at: str | None = None
    type: str = "model"


class AnthropicModelPage(AnthropicBaseModel):
    data: list[AnthropicModel] = Field(default_factory=list["AnthropicModel"])
    has_more: bool = False
    first_id: str | None = None
    last_id: str | None = None
