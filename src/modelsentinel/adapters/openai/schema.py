"""Minimal Pydantic models for the OpenAI ``/models`` endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OpenAIBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class OpenAIModel(OpenAIBaseModel):
    id: str
    object: str = "model"
    created: int | None = None
    owned_by: str | None = None


class OpenAIModelList(OpenAIBaseModel):
    object: str = "list"
    data: list[OpenAIModel] = Field(default_factory=list["OpenAIModel"])
