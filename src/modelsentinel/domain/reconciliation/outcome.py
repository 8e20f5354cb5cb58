"""Per-provider outcomes and the aggregate report of one reconciliation pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from modelsentinel.domain.model import CatalogVersion
    from modelsentinel.domain.ports.catalog import WriteResult
    from modelsentinel.domain.ports.submission import SubmissionResult
    from modelsentinel.domain.review import ReviewResult
    from modelsentinel.domain.validation import ValidationResult

    from .changeset import ChangeSet
    from .risk import RiskAssessment


class ExitCode(IntEnum):
    SUCCESS = 0
    FAILURE = 1
    CHANGES = 2
    POLICY_BLOCK = 3
    SOURCE_HEALTH = 4


@dataclass(slots=True, frozen=True)
class OutcomeCounts:
    new: int = 0
    updated: int = 0
    unchanged: int = 0
    disappeared: int = 0
    renamed: int = 0


@dataclass(slots=True, kw_only=True)
class GroupOutcome:
    provider: str
    changeset: ChangeSet | None = None
    risk: RiskAssessment | None = None
    validation: ValidationResult | None = None
    review: ReviewResult | None = None
    written: list[WriteResult] = field(default_factory=list["WriteResult"])
    draft: bool = False
    blocked: bool = False
    skipped: bool = False
    skip_reason: str = ""
    error: str | None = None
    health_failed: bool = False

    @property
    def counts(self) -> OutcomeCounts:
        changeset = self.changeset
        if changeset is None:
            return OutcomeCounts()
        return OutcomeCounts(
            new=len(changeset.new),
            updated=len(changeset.updated),
            unchanged=changeset.unchanged,
            disappeared=len(changeset.disappeared),
            renamed=len(changeset.renames),
        )

    @property
    def has_changes(self) -> bool:
        return self.changeset is not None and self.changeset.has_changes

    @property
    def wrote_changes(self) -> bool:
        return any(result.written for result in self.written)

    @property
    def wrote_new(self) -> bool:
        return any(result.is_new for result in self.written)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def skip(self, reason: str) -> None:
        self.skipped = True
        self.skip_reason = reason


@dataclass(slots=True, kw_only=True)
class SyncReport:
    outcomes: list[GroupOutcome] = field(default_factory=list[GroupOutcome])
    diff_only: bool = False
    dry_run: bool = False
    previous_version: CatalogVersion | None = None
    version: CatalogVersion | None = None
    manifest_path: Path | None = None
    submission: SubmissionResult | None = None
    error: str | None = None

    @property
    def wrote_changes(self) -> bool:
        return any(outcome.wrote_changes for outcome in self.outcomes)

    @property
    def draft(self) -> bool:
        return any(outcome.draft for outcome in self.outcomes if outcome.wrote_changes)

    @property
    def exit_code(self) -> ExitCode:
        """Most severe signal wins: health, policy block, failure, diff changes."""

        if any(outcome.health_failed for outcome in self.outcomes):
            return ExitCode.SOURCE_HEALTH
        if any(outcome.blocked for outcome in self.outcomes):
            return ExitCode.POLICY_BLOCK
        if self.error is not None or any(outcome.failed for outcome in self.outcomes):
            return ExitCode.FAILURE
        if self.diff_only and any(outcome.has_changes for outcome in self.outcomes):
            return ExitCode.CHANGES
        return ExitCode.SUCCESS
