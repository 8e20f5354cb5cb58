"""YAML file-tree adapter for the model catalog."""

from __future__ import annotations

from .errors import CatalogError, CatalogFormatError, CatalogLoadError
from .layout import read_version, write_version
from .manifest import generate_manifest, write_manifest
from .store import YamlCatalogStore, load_catalog, load_model_file, load_provider
from .writer import SmartMergeWriter

__all__ = [
    "CatalogError",
    "CatalogFormatError",
    "CatalogLoadError",
    "SmartMergeWriter",
    "YamlCatalogStore",
    "generate_manifest",
    "load_catalog",
    "load_model_file",
    "load_provider",
    "read_version",
    "write_manifest",
    "write_version",
]
