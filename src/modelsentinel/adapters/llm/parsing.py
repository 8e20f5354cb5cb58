"""Extract and validate the reviewer's JSON verdicts from free-form LLM text."""

from __future__ import annotations

import json

from pydantic import ValidationError

from modelsentinel.domain.review import ModelVerdict, ReviewError, ReviewResult

from .schema import ReviewResponse

_FENCES = ("```json", "```")


def _is_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def extract_json(text: str) -> str:
    """Return the JSON object embedded in ``text``.

    Tries the whole text, then the first fenced block, then the span between
    the first ``{`` and the last ``}``.
    """

    stripped = text.strip()
    if _is_json(stripped):
        return stripped

    for fence in _FENCES:
        start = stripped.find(fence)
        if start == -1:
            continue
        start += len(fence)
        end = stripped.find("```", start)
        if end == -1:
            continue
        candidate = stripped[start:end].strip()
        if _is_json(candidate):
            return candidate

    first = stripped.find("{")
    last = stripped.rfind("}")
    if first != -1 and last > first:
        candidate = stripped[first : last + 1]
        if _is_json(candidate):
            return candidate

    raise ReviewError("no valid JSON found in review response")


def parse_review_response(text: str) -> ReviewResult:
    payload = extract_json(text)
    try:
        response = ReviewResponse.model_validate_json(payload)
    except ValidationError as exc:
        raise ReviewError(f"invalid review response: {exc}") from exc
    return ReviewResult(
        verdicts=[
            ModelVerdict(
                model_name=item.model_name,
                verdict=item.verdict,
                confidence=item.confidence,
                concerns=tuple(item.concerns or ()),
                reasoning=item.reasoning,
            )
            for item in response.verdicts
        ]
    )
