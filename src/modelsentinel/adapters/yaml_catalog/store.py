"""Filesystem catalog store.

Layout::

    <root>/version.txt
    <root>/manifest.yaml
    <root>/providers/<provider>/provider.yaml
    <root>/providers/<provider>/models/<model>.yaml
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

import yaml
from pydantic import ValidationError

from modelsentinel.domain.model import (
    MODEL_FILE_EXTENSION,
    Catalog,
    ProviderCatalog,
    ProviderDescriptor,
)

from .errors import CatalogFormatError, CatalogLoadError
from .layout import (
    PROVIDER_FILENAME,
    models_dir,
    providers_dir,
    read_version,
    write_version,
)
from .manifest import write_manifest
from .translator import parse_model, parse_provider
from .yaml_io import read_yaml_file

if TYPE_CHECKING:
    from pathlib import Path

    from modelsentinel.domain.model import CatalogVersion, Model

log = getLogger(__name__)


def load_catalog(root: Path) -> Catalog:
    """Load the version and every provider under ``root``."""

    version = read_version(root)
    directory = providers_dir(root)
    if not directory.is_dir():
        raise CatalogLoadError(f"Providers directory not found: {directory}")

    catalog = Catalog(base_path=root, version=version)
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            catalog.providers[entry.name] = load_provider(root, entry.name)
    log.info(
        "Loaded catalog %s: %s providers, %s models",
        version,
        len(catalog.providers),
        sum(len(provider.models) for provider in catalog.providers.values()),
    )
    return catalog


def load_provider(root: Path, name: str) -> ProviderCatalog:
    """Load one provider; a provider without ``models/`` (meta provider) has no models."""

    provider_dir = providers_dir(root) / name
    descriptor_path = provider_dir / PROVIDER_FILENAME
    if descriptor_path.is_file():
        descriptor = parse_provider(name, _read_mapping(descriptor_path))
    else:
        log.debug("No %s for provider %s", PROVIDER_FILENAME, name)
        descriptor = ProviderDescriptor(name=name)

    provider = ProviderCatalog(descriptor=descriptor)
    directory = models_dir(root, name)
    if not directory.is_dir():
        return provider

    for path in sorted(directory.glob(f"*{MODEL_FILE_EXTENSION}")):
        if not path.is_file():
            continue
        model = load_model_file(path)
        if model.name in provider.models:
            log.warning(
                "Duplicate model %s in %s (also in %s); keeping the latter",
                model.name,
                path.name,
                provider.files[model.name],
            )
        provider.models[model.name] = model
        provider.files[model.name] = path.name
    return provider


def load_model_file(path: Path) -> Model:
    data = _read_mapping(path)
    try:
        return parse_model(data)
    except ValidationError as exc:
        raise CatalogFormatError(path, f"invalid model document: {exc}") from exc


def _read_mapping(path: Path) -> Mapping[str, object]:
    try:
        data = read_yaml_file(path)
    except OSError as exc:
        raise CatalogFormatError(path, f"unreadable: {exc}") from exc
    except yaml.YAMLError as exc:
        raise CatalogFormatError(path, f"invalid YAML: {exc}") from exc
    if not isinstance(data, Mapping):
        raise CatalogFormatError(path, "expected a mapping at the top level")
    return data  # pyright: ignore[reportUnknownVariableType]


@dataclass(slots=True)
class YamlCatalogStore:
    """``CatalogStore`` over a catalog directory."""

    root: Path

    def load_models(self, provider: str) -> dict[str, Model]:
        if not (providers_dir(self.root) / provider).is_dir():
            log.info("Provider %s has no catalog directory yet", provider)
            return {}
        return load_provider(self.root, provider).models

    def load_catalog(self) -> Catalog:
        return load_catalog(self.root)

    def read_version(self) -> CatalogVersion:
        return read_version(self.root)

    def write_version(self, version: CatalogVersion) -> None:
        write_version(self.root, version)

    def write_manifest(self) -> Path:
        return write_manifest(self.root)
