"""Domain model for the model catalog."""

from __future__ import annotations

from .catalog import (
    MODEL_FILE_EXTENSION,
    Catalog,
    Cost,
    Limits,
    Modalities,
    Model,
    ProviderCatalog,
    ProviderDescriptor,
    UpdaterMetadata,
    model_filename,
)
from .discovered import DiscoveredModel
from .enums import ModelStatus, ProviderType, SourceType
from .version import CatalogVersion, InvalidVersionError

__all__ = [
    "MODEL_FILE_EXTENSION",
    "Catalog",
    "CatalogVersion",
    "Cost",
    "DiscoveredModel",
    "InvalidVersionError",
    "Limits",
    "Modalities",
    "Model",
    "ModelStatus",
    "ProviderCatalog",
    "ProviderDescriptor",
    "ProviderType",
    "SourceType",
    "UpdaterMetadata",
    "model_filename",
]
