"""Risk gates for change sets.

The assessor classifies only. It never removes or mutates entries, and it
never blocks: ``RiskAssessment.blocked`` is reserved for callers that turn a
review signal into a hard stop via policy configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeGuard

if TYPE_CHECKING:
    from .changeset import ChangeSet, FieldChange

COST_FIELDS = frozenset({"cost.input_per_1k", "cost.output_per_1k"})


@dataclass(slots=True, frozen=True)
class RiskThresholds:
    max_changed: int = 25
    max_disappeared: int = 3
    max_price_delta: float = 0.35
    max_price_factor: float = 2.0


@dataclass(slots=True)
class RiskAssessment:
    needs_review: bool = False
    blocked: bool = False
    reasons: list[str] = field(default_factory=list[str])


def assess_risk(changeset: ChangeSet, thresholds: RiskThresholds | None = None) -> RiskAssessment:
    limits = thresholds or RiskThresholds()
    reasons: list[str] = []

    if changeset.total_changed > limits.max_changed:
        reasons.append(
            f"{changeset.total_changed} new/updated models exceeds {limits.max_changed}"
        )
    if len(changeset.disappeared) > limits.max_disappeared:
        reasons.append(
            f"{len(changeset.disappeared)} disappearance candidates exceeds "
            f"{limits.max_disappeared}"
        )
    for update in changeset.updated:
        for change in update.changes:
            if _is_large_price_move(change, limits):
                reasons.append(
                    f"{update.name}: {change.field} moved from {change.old} to {change.new}"
                )

    return RiskAssessment(needs_review=bool(reasons), reasons=reasons)


def _is_large_price_move(change: FieldChange, limits: RiskThresholds) -> bool:
    if change.field not in COST_FIELDS:
        return False
    old, new = change.old, change.new
    if _is_number(old) and _is_number(new) and old > 0:
        delta = (new - old) / old
        return abs(delta) > limits.max_price_delta or new > old * limits.max_price_factor
    return False


def _is_number(value: object) -> TypeGuard[float]:
    return isinstance(value, int | float) and not isinstance(value, bool)
