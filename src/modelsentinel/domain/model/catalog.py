"""Catalog entities as persisted in the model catalog tree.

A ``Model`` mirrors one ``models/<name>.yaml`` file. Keys the engine does not
recognise are carried verbatim in ``Model.extra`` so they can be written back
untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .enums import ProviderType

if TYPE_CHECKING:
    from pathlib import Path

    from .version import CatalogVersion

MODEL_FILE_EXTENSION = ".yaml"


@dataclass(slots=True, frozen=True)
class Cost:
    input_per_1k: float
    output_per_1k: float

    @property
    def is_zero(self) -> bool:
        """Zero pricing on both sides means "unknown", never "free"."""
        return self.input_per_1k == 0 and self.output_per_1k == 0

    def as_dict(self) -> dict[str, float]:
        return {"input_per_1k": self.input_per_1k, "output_per_1k": self.output_per_1k}


@dataclass(slots=True, frozen=True)
class Limits:
    max_tokens: int | None = None
    max_completion_tokens: int | None = None


@dataclass(slots=True, frozen=True)
class Modalities:
    input: tuple[str, ...] | None = None
    output: tuple[str, ...] | None = None


@dataclass(slots=True, frozen=True)
class UpdaterMetadata:
    """Bookkeeping appended to model files under ``x_updater``."""

    last_verified_at: str
    sources: tuple[str, ...] = ()


@dataclass(slots=True, kw_only=True)
class Model:
    name: str
    display_name: str = ""
    family: str = ""
    status: str = ""
    cost: Cost | None = None
    limits: Limits = field(default_factory=Limits)
    capabilities: tuple[str, ...] = ()
    modalities: Modalities = field(default_factory=Modalities)
    x_updater: UpdaterMetadata | None = None
    extra: dict[str, object] = field(default_factory=dict[str, object])

    def filename(self, extension: str = MODEL_FILE_EXTENSION) -> str:
        return model_filename(self.name, extension)

    @property
    def is_embedding(self) -> bool:
        return "embeddings" in self.capabilities


def model_filename(name: str, extension: str = MODEL_FILE_EXTENSION) -> str:
    """Return the storage filename for a model name.

    Namespaced names (``huggingface/gpt-4o``) store under their last segment.
    """

    return name.rsplit("/", 1)[-1].lower() + extension


@dataclass(slots=True, kw_only=True)
class ProviderDescriptor:
    name: str
    display_name: str = ""
    provider_type: ProviderType | str = ProviderType.STATIC
    supports_model_discovery: bool = False

    @property
    def is_meta(self) -> bool:
        return self.provider_type == ProviderType.META


@dataclass(slots=True, kw_only=True)
class ProviderCatalog:
    descriptor: ProviderDescriptor
    models: dict[str, Model] = field(default_factory=dict[str, Model])
    # model name -> file name the model was loaded from
    files: dict[str, str] = field(default_factory=dict[str, str])

    def model_names(self) -> list[str]:
        return sorted(self.models)

    def filename_for(self, name: str) -> str:
        return self.files.get(name) or model_filename(name)


@dataclass(slots=True, kw_only=True)
class Catalog:
    base_path: Path
    version: CatalogVersion
    providers: dict[str, ProviderCatalog] = field(default_factory=dict[str, ProviderCatalog])
