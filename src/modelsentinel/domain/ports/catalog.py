"""Ports for reading and writing the on-disk model catalog."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path

    from modelsentinel.domain.model import (
        CatalogVersion,
        DiscoveredModel,
        Model,
        UpdaterMetadata,
    )
    from modelsentinel.domain.reconciliation.changeset import FieldChange


@dataclass(slots=True, frozen=True)
class WriteResult:
    path: Path
    is_new: bool
    changes: tuple[FieldChange, ...] = ()

    @property
    def written(self) -> bool:
        return self.is_new or bool(self.changes)


@runtime_checkable
class CatalogStore(Protocol):
    """Read access to models plus the catalog-wide version and manifest."""

    def load_models(self, provider: str) -> dict[str, Model]: ...

    def read_version(self) -> CatalogVersion: ...

    def write_version(self, version: CatalogVersion) -> None: ...

    def write_manifest(self) -> Path: ...


@runtime_checkable
class ModelWriter(Protocol):
    """Writes one discovered model into the catalog, merging with stored data."""

    def write_model(
        self,
        provider: str,
        model: DiscoveredModel,
        *,
        metadata: UpdaterMetadata | None = None,
    ) -> WriteResult: ...


__all__ = ["CatalogStore", "ModelWriter", "WriteResult"]
