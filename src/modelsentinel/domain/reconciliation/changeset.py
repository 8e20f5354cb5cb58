"""Change-set types shared by diff, risk, review and write stages.

The change set is the contract between:
- the diff engine (produces it from discovery + catalog state)
- policy stages (risk gates, validation, LLM review)
- the smart-merge writer (consumes ``new`` and ``updated``)

Instances are ephemeral: built once per reconciliation pass and discarded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modelsentinel.domain.model import DiscoveredModel, Model


@dataclass(slots=True, frozen=True)
class FieldChange:
    """One authoritative field whose discovered value differs from the stored one.

    ``old`` and ``new`` hold plain data (scalars, lists, dicts) so change lists
    can be rendered or serialised without knowing the domain types.
    """

    field: str
    old: object
    new: object


@dataclass(slots=True, frozen=True)
class NewModel:
    name: str
    model: DiscoveredModel


@dataclass(slots=True, frozen=True)
class ModelUpdate:
    name: str
    existing: Model
    model: DiscoveredModel
    changes: tuple[FieldChange, ...]


@dataclass(slots=True, frozen=True)
class Disappearance:
    """A stored model that discovery no longer reports."""

    name: str
    model: Model


@dataclass(slots=True, frozen=True)
class RenamePair:
    old_name: str
    new_name: str
    reason: str


@dataclass(slots=True)
class ChangeSet:
    provider: str
    new: list[NewModel] = field(default_factory=list["NewModel"])
    updated: list[ModelUpdate] = field(default_factory=list["ModelUpdate"])
    disappeared: list[Disappearance] = field(default_factory=list["Disappearance"])
    renames: list[RenamePair] = field(default_factory=list["RenamePair"])
    unchanged: int = 0

    @property
    def has_changes(self) -> bool:
        return bool(self.new or self.updated or self.disappeared)

    @property
    def total_changed(self) -> int:
        return len(self.new) + len(self.updated)

    def exclude(self, names: set[str]) -> int:
        """Drop new/updated entries by name, returning how many were removed."""

        before = self.total_changed
        self.new = [entry for entry in self.new if entry.name not in names]
        self.updated = [entry for entry in self.updated if entry.name not in names]
        return before - self.total_changed
