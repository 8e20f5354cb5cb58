"""Aggregate ``manifest.yaml`` generation.

The manifest is derived entirely from what is on disk; it is regenerated
after every sync that changed a model file.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

import yaml

from modelsentinel.domain.model import MODEL_FILE_EXTENSION, ProviderType

from .errors import CatalogLoadError
from .layout import (
    MANIFEST_FILENAME,
    MODELS_DIRNAME,
    PROVIDER_FILENAME,
    PROVIDERS_DIRNAME,
    STANDARD_PROVIDER_FILES,
    providers_dir,
    read_version,
)
from .yaml_io import read_yaml_file, write_yaml_file

if TYPE_CHECKING:
    from pathlib import Path

    from modelsentinel.domain.reconciliation import Tree

log = getLogger(__name__)

SCHEMA_VERSION = "1.0"
MANIFEST_HEADER = (
    "# Model Catalog Manifest\n"
    "# Auto-generated - DO NOT EDIT MANUALLY\n"
    "# Run: modelsentinel sync or modelsentinel manifest to regenerate\n"
    "\n"
)


def generate_manifest(root: Path, *, now: datetime | None = None) -> Tree:
    version = read_version(root)
    directory = providers_dir(root)
    if not directory.is_dir():
        raise CatalogLoadError(f"Providers directory not found: {directory}")

    providers: list[Tree] = []
    total_models = 0
    static_count = 0
    meta_count = 0

    for provider_dir in sorted(path for path in directory.iterdir() if path.is_dir()):
        name = provider_dir.name
        entry: Tree = {
            "name": name,
            "files": [
                f"{PROVIDERS_DIRNAME}/{name}/{filename}"
                for filename in STANDARD_PROVIDER_FILES
                if (provider_dir / filename).is_file()
            ],
        }

        provider_type = _provider_type(provider_dir / PROVIDER_FILENAME)
        if provider_type is ProviderType.META:
            meta_count += 1
        elif provider_type is ProviderType.STATIC:
            static_count += 1

        model_dir = provider_dir / MODELS_DIRNAME
        if model_dir.is_dir():
            model_files = sorted(
                f"{PROVIDERS_DIRNAME}/{name}/{MODELS_DIRNAME}/{path.name}"
                for path in model_dir.glob(f"*{MODEL_FILE_EXTENSION}")
                if path.is_file()
            )
            if model_files:
                entry["models"] = model_files
            total_models += len(model_files)

        providers.append(entry)

    generated_at = (now or datetime.now(UTC)).astimezone(UTC)
    return {
        "version": str(version),
        "generated_at": generated_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
        "schema_version": SCHEMA_VERSION,
        "providers": providers,
        "stats": {
            "total_providers": len(providers),
            "total_models": total_models,
            "static_providers": static_count,
            "meta_providers": meta_count,
        },
    }


def write_manifest(root: Path, *, now: datetime | None = None) -> Path:
    manifest = generate_manifest(root, now=now)
    path = root / MANIFEST_FILENAME
    write_yaml_file(path, manifest, header=MANIFEST_HEADER)
    stats = manifest["stats"]
    log.info("Wrote manifest %s (%s)", path, stats)
    return path


def _provider_type(path: Path) -> ProviderType | None:
    """``None`` when the descriptor is missing or unreadable (counted as neither)."""

    if not path.is_file():
        return None
    try:
        data = read_yaml_file(path)
    except (OSError, yaml.YAMLError):
        log.warning("Unreadable provider descriptor %s; not counted by type", path)
        return None
    if isinstance(data, Mapping) and data.get("provider_type") == ProviderType.META:  # pyright: ignore[reportUnknownMemberType]
        return ProviderType.META
    return ProviderType.STATIC
