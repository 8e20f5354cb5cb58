"""Pydantic models for LLM request/response payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modelsentinel.domain.review import Verdict


class LLMBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class VerdictPayload(LLMBaseModel):
    model_name: str
    verdict: Verdict
    confidence: float = 0.0
    concerns: list[str] | None = None
    reasoning: str = ""

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, value: float) -> float:
        return min(max(value, 0.0), 1.0)


class ReviewResponse(LLMBaseModel):
    verdicts: list[VerdictPayload] = Field(default_factory=list["VerdictPayload"])


class AnthropicContentBlock(LLMBaseModel):
    type: str
    text: str = ""


class ProviderErrorPayload(LLMBaseModel):
    type: str = ""
    message: str = ""


class AnthropicMessageResponse(LLMBaseModel):
    content: list[AnthropicContentBlock] = Field(default_factory=list["AnthropicContentBlock"])
    error: ProviderErrorPayload | None = None


class OpenAIChatMessage(LLMBaseModel):
    content: str | None = None


class OpenAIChatChoice(LLMBaseModel):
    message: OpenAIChatMessage


class OpenAIChatResponse(LLMBaseModel):
    choices: list[OpenAIChatChoice] = Field(default_factory=list["OpenAIChatChoice"])
    error: ProviderErrorPayload | None = None
