"""Advisory LLM review of change sets."""

from __future__ import annotations

from .prompt import SYSTEM_PROMPT, build_user_prompt, model_summary
from .render import render_review_section
from .verdicts import (
    ModelVerdict,
    OnRejectBehavior,
    ReviewError,
    ReviewResult,
    Verdict,
    apply_review,
)

__all__ = [
    "SYSTEM_PROMPT",
    "ModelVerdict",
    "OnRejectBehavior",
    "ReviewError",
    "ReviewResult",
    "Verdict",
    "apply_review",
    "build_user_prompt",
    "model_summary",
    "render_review_section",
]
