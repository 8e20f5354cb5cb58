"""Catalog directory layout and the ``version.txt`` file."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modelsentinel.domain.model import CatalogVersion, InvalidVersionError

from .errors import CatalogLoadError

if TYPE_CHECKING:
    from pathlib import Path

VERSION_FILENAME = "version.txt"
MANIFEST_FILENAME = "manifest.yaml"
PROVIDERS_DIRNAME = "providers"
MODELS_DIRNAME = "models"
PROVIDER_FILENAME = "provider.yaml"
# Provider-level files listed in the manifest when present.
STANDARD_PROVIDER_FILES = (PROVIDER_FILENAME, "categories.yaml", "templates.yaml")


def providers_dir(root: Path) -> Path:
    return root / PROVIDERS_DIRNAME


def models_dir(root: Path, provider: str) -> Path:
    return root / PROVIDERS_DIRNAME / provider / MODELS_DIRNAME


def read_version(root: Path) -> CatalogVersion:
    path = root / VERSION_FILENAME
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogLoadError(f"Reading {path}: {exc}") from exc
    try:
        return CatalogVersion.parse(text)
    except InvalidVersionError as exc:
        raise CatalogLoadError(f"{path}: {exc}") from exc


def write_version(root: Path, version: CatalogVersion) -> Path:
    path = root / VERSION_FILENAME
    path.write_text(f"{version}\n", encoding="utf-8")
    return path
