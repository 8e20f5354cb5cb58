"""Catalog read/write errors."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class CatalogError(RuntimeError):
    """Base class for catalog read/write failures."""


class CatalogLoadError(CatalogError):
    """Raised when catalog-level files (version, providers directory) cannot be read."""


class CatalogFormatError(CatalogError):
    """Raised when a provider or model file is malformed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
