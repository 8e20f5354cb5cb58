"""Ports for the advisory LLM review stage."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from modelsentinel.domain.reconciliation.changeset import ChangeSet
    from modelsentinel.domain.review import ReviewResult


@runtime_checkable
class LLMClient(Protocol):
    """Single-shot text completion."""

    def complete(self, system_prompt: str, user_prompt: str) -> str: ...


@runtime_checkable
class ChangeSetReviewer(Protocol):
    """Judge a change set; return ``None`` when there is nothing to judge.

    Implementations raise ``ReviewError`` on failure; callers fail open.
    """

    def evaluate(self, changeset: ChangeSet) -> ReviewResult | None: ...


__all__ = ["ChangeSetReviewer", "LLMClient"]
