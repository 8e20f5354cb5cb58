"""Pydantic schemas for catalog YAML documents.

Unknown keys are allowed everywhere; top-level ones are carried into
``Model.extra``. The writer never round-trips through these models, it merges
the raw mapping, so nested unknown keys survive as well.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CatalogDocument(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class CostDocument(CatalogDocument):
    input_per_1k: float = 0.0
    output_per_1k: float = 0.0


class LimitsDocument(CatalogDocument):
    max_tokens: int | None = None
    max_completion_tokens: int | None = None


class ModalitiesDocument(CatalogDocument):
    input: list[str] | None = None
    output: list[str] | None = None


class UpdaterDocument(CatalogDocument):
    last_verified_at: str = ""
    sources: list[str] | None = None


class ModelDocument(CatalogDocument):
    name: str
    display_name: str = ""
    family: str = ""
    status: str = ""
    cost: CostDocument | None = None
    limits: LimitsDocument | None = None
    capabilities: list[str] | None = None
    modalities: ModalitiesDocument | None = None
    x_updater: UpdaterDocument | None = None


class ProviderDocument(CatalogDocument):
    name: str = ""
    display_name: str = ""
    provider_type: str = "static"
    supports_model_discovery: bool = False
