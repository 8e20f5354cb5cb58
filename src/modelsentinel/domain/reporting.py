"""Human-readable renderings of change sets and sync reports.

``render_diff_summary`` is plain text for terminals; ``render_pr_body`` is the
Markdown body used when changes are submitted as a pull request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modelsentinel.domain.review import render_review_section

if TYPE_CHECKING:
    from modelsentinel.domain.reconciliation.changeset import ChangeSet
    from modelsentinel.domain.reconciliation.outcome import GroupOutcome, SyncReport


def render_diff_summary(changeset: ChangeSet) -> str:
    lines = [
        f"Provider: {changeset.provider}",
        f"  new: {len(changeset.new)}  updated: {len(changeset.updated)}  "
        f"unchanged: {changeset.unchanged}  disappeared: {len(changeset.disappeared)}  "
        f"renamed: {len(changeset.renames)}",
    ]
    for entry in changeset.new:
        lines.append(f"  + {entry.name}")
    for update in changeset.updated:
        lines.append(f"  ~ {update.name}")
        lines.extend(
            f"      {change.field}: {_format_value(change.old)} -> {_format_value(change.new)}"
            for change in update.changes
        )
    for gone in changeset.disappeared:
        lines.append(f"  - {gone.name} (disappearance candidate)")
    for pair in changeset.renames:
        lines.append(f"  > {pair.old_name} -> {pair.new_name} ({pair.reason})")
    return "\n".join(lines)


def render_pr_title(report: SyncReport) -> str:
    providers = [outcome.provider for outcome in report.outcomes if outcome.wrote_changes]
    return f"chore(catalog): update {', '.join(providers) or 'catalog'} models"


def render_pr_body(report: SyncReport) -> str:
    sections: list[str] = ["## Model catalog update", ""]
    if report.previous_version is not None and report.version is not None:
        sections.extend([f"Version: `{report.previous_version}` -> `{report.version}`", ""])

    for outcome in report.outcomes:
        if outcome.changeset is None or not outcome.wrote_changes:
            continue
        sections.append(render_outcome_section(outcome))

    return "\n".join(sections).rstrip() + "\n"


def render_outcome_section(outcome: GroupOutcome) -> str:
    changeset = outcome.changeset
    if changeset is None:
        return ""
    counts = outcome.counts
    lines = [
        f"### {outcome.provider}",
        "",
        "| New | Updated | Unchanged | Disappeared | Renamed |",
        "|-----|---------|-----------|-------------|---------|",
        f"| {counts.new} | {counts.updated} | {counts.unchanged} "
        f"| {counts.disappeared} | {counts.renamed} |",
        "",
    ]

    if changeset.new:
        lines.extend(["#### New models", ""])
        lines.extend(f"- `{entry.name}`" for entry in changeset.new)
        lines.append("")

    if changeset.updated:
        lines.extend(
            [
                "#### Updated models",
                "",
                "| Model | Field | Old | New |",
                "|-------|-------|-----|-----|",
            ]
        )
        for update in changeset.updated:
            lines.extend(
                f"| `{update.name}` | {change.field} | {_format_value(change.old)} "
                f"| {_format_value(change.new)} |"
                for change in update.changes
            )
        lines.append("")

    if changeset.disappeared:
        lines.extend(["#### Disappearance candidates (not removed)", ""])
        lines.extend(f"- `{gone.name}`" for gone in changeset.disappeared)
        lines.append("")

    if changeset.renames:
        lines.extend(["#### Possible renames", ""])
        lines.extend(
            f"- `{pair.old_name}` -> `{pair.new_name}` ({pair.reason})"
            for pair in changeset.renames
        )
        lines.append("")

    if outcome.risk is not None and outcome.risk.reasons:
        lines.extend(["#### Needs review", ""])
        lines.extend(f"- {reason}" for reason in outcome.risk.reasons)
        lines.append("")

    review = render_review_section(outcome.review)
    if review:
        lines.extend([review, ""])

    return "\n".join(lines)


def _format_value(value: object) -> str:
    if value is None:
        return "-"
    if isinstance(value, list | tuple):
        return "[" + ", ".join(str(item) for item in value) + "]"
    if isinstance(value, dict):
        return ", ".join(f"{key}={item}" for key, item in value.items())
    return str(value)
