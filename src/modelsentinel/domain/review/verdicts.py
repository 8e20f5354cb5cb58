"""Verdict types for the optional LLM review of a change set.

The reviewer is advisory. Its verdicts can force a draft or exclude entries,
but a failed review never blocks a sync.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modelsentinel.domain.reconciliation.changeset import ChangeSet

log = getLogger(__name__)


class ReviewError(RuntimeError):
    """Raised when a review could not be produced (transport or response errors)."""


class Verdict(StrEnum):
    APPROVE = "approve"
    FLAG = "flag"
    REJECT = "reject"


class OnRejectBehavior(StrEnum):
    DRAFT = "draft"
    EXCLUDE = "exclude"


@dataclass(slots=True, frozen=True)
class ModelVerdict:
    model_name: str
    verdict: Verdict
    confidence: float = 0.0
    concerns: tuple[str, ...] = ()
    reasoning: str = ""


@dataclass(slots=True)
class ReviewResult:
    verdicts: list[ModelVerdict] = field(default_factory=list[ModelVerdict])

    def with_verdict(self, verdict: Verdict) -> list[ModelVerdict]:
        return [item for item in self.verdicts if item.verdict is verdict]

    @property
    def has_rejections(self) -> bool:
        return bool(self.with_verdict(Verdict.REJECT))

    @property
    def has_flags(self) -> bool:
        return bool(self.with_verdict(Verdict.FLAG))

    def rejected_names(self) -> set[str]:
        return {item.model_name for item in self.with_verdict(Verdict.REJECT)}


def apply_review(
    changeset: ChangeSet,
    result: ReviewResult | None,
    behavior: OnRejectBehavior = OnRejectBehavior.DRAFT,
) -> bool:
    """Apply review verdicts to ``changeset``; return whether a draft is forced.

    Flags always force a draft. Rejections either force a draft or, with
    ``OnRejectBehavior.EXCLUDE``, remove the rejected entries in place.
    """

    if result is None:
        return False

    force_draft = result.has_flags
    if not result.has_rejections:
        return force_draft

    if behavior is OnRejectBehavior.EXCLUDE:
        removed = changeset.exclude(result.rejected_names())
        log.info("Review excluded %s models from %s", removed, changeset.provider)
        return force_draft
    return True
