"""Port for publishing catalog changes for human review."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from modelsentinel.domain.reconciliation.outcome import SyncReport


@dataclass(slots=True, frozen=True)
class SubmissionResult:
    branch: str
    url: str
    draft: bool


@runtime_checkable
class ChangeSubmitter(Protocol):
    def submit(self, report: SyncReport) -> SubmissionResult: ...


__all__ = ["ChangeSubmitter", "SubmissionResult"]
