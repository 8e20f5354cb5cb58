"""Markdown rendering of review verdicts for pull-request bodies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .verdicts import Verdict

if TYPE_CHECKING:
    from .verdicts import ModelVerdict, ReviewResult


def render_review_section(result: ReviewResult | None) -> str:
    """Return an empty string when nothing was flagged or rejected."""

    if result is None:
        return ""
    flagged = result.with_verdict(Verdict.FLAG)
    rejected = result.with_verdict(Verdict.REJECT)
    if not flagged and not rejected:
        return ""

    approved = len(result.verdicts) - len(flagged) - len(rejected)
    lines = [
        "### LLM Review",
        "",
        f"**{approved}** approved, **{len(flagged)}** flagged, **{len(rejected)}** rejected",
        "",
    ]
    if rejected:
        lines.extend(_details("Rejected Models", rejected))
    if flagged:
        lines.extend(_details("Flagged Models", flagged))
    return "\n".join(lines)


def _details(title: str, verdicts: list[ModelVerdict]) -> list[str]:
    lines = [
        "<details>",
        f"<summary>{title}</summary>",
        "",
        "| Model | Confidence | Concerns | Reasoning |",
        "|-------|-----------|----------|----------|",
    ]
    for verdict in verdicts:
        concerns = "; ".join(verdict.concerns)
        lines.append(
            f"| `{verdict.model_name}` | {verdict.confidence * 100:.0f}% "
            f"| {concerns} | {verdict.reasoning} |"
        )
    lines.extend(["", "</details>", ""])
    return lines
