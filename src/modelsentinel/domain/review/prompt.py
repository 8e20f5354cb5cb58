"""Prompt construction for change-set review.

The reviewer sees compact summaries of new and updated entries, never the
raw YAML merge tree.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modelsentinel.domain.model import DiscoveredModel, Model
    from modelsentinel.domain.reconciliation.changeset import ChangeSet

SYSTEM_PROMPT = """\
You are a model catalog reviewer for an AI gateway. Your job is to evaluate proposed \
changes to a model catalog and identify issues.

For each model in the changeset, evaluate:

1. **Capabilities**: Are the inferred capabilities reasonable for this model type? \
(e.g., an embedding model should NOT have "chat" or "function_calling")
2. **Pricing**: Is the pricing plausible? Flag suspiciously high or low prices.
3. **Limits**: Are the token limits reasonable? (max_completion_tokens should not \
exceed max_tokens, context windows should match known specs)
4. **Status**: Is the status appropriate? (a brand-new model shouldn't be "deprecated")
5. **Changes**: For updated models, are the field changes plausible? \
(a price dropping 90% is suspicious)

Respond with a JSON object containing a "verdicts" array. Each verdict must have:
- "model_name": the model identifier
- "verdict": one of "approve", "flag", or "reject"
- "confidence": a float between 0 and 1
- "concerns": an array of strings describing specific issues (empty if approved)
- "reasoning": a brief explanation of your assessment

Prefer "flag" over "reject" unless the data is clearly incorrect.

Respond ONLY with the JSON object, no other text."""


def model_summary(model: DiscoveredModel | Model) -> dict[str, object]:
    limits = model.limits
    modalities = model.modalities
    summary: dict[str, object] = {
        "name": model.name,
        "family": model.family or "",
        "status": model.status or "",
        "capabilities": list(model.capabilities or ()),
        "modalities": {
            "input": list(modalities.input or ()) if modalities else [],
            "output": list(modalities.output or ()) if modalities else [],
        },
        "limits": {"max_tokens": (limits.max_tokens or 0) if limits else 0},
    }
    if limits is not None and limits.max_completion_tokens:
        summary["limits"] = {
            "max_tokens": limits.max_tokens or 0,
            "max_completion_tokens": limits.max_completion_tokens,
        }
    cost = model.cost
    if cost is not None and not cost.is_zero:
        summary["cost"] = cost.as_dict()
    return summary


def build_user_prompt(changeset: ChangeSet) -> str:
    sections: list[str] = [f"Provider: {changeset.provider}\n"]

    if changeset.new:
        sections.append("## New Models\n")
        sections.extend(_fenced(model_summary(entry.model)) for entry in changeset.new)

    if changeset.updated:
        sections.append("## Updated Models\n")
        for update in changeset.updated:
            payload = {
                "name": update.name,
                "changes": [
                    {"field": change.field, "old_value": change.old, "new_value": change.new}
                    for change in update.changes
                ],
                "current_state": model_summary(
                    update.model.apply_to(update.existing, include_display_name=True)
                ),
            }
            sections.append(_fenced(payload))

    return "\n".join(sections)


def _fenced(payload: dict[str, object]) -> str:
    return f"```json\n{json.dumps(payload, indent=2)}\n```\n"
