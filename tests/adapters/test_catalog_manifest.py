from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from modelsentinel.adapters.yaml_catalog import CatalogLoadError, generate_manifest, write_manifest
from modelsentinel.adapters.yaml_catalog.yaml_io import read_yaml_file

if TYPE_CHECKING:
    from pathlib import Path

NOW = datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)


def test_generate_manifest(catalog_root: Path) -> None:
    (catalog_root / "providers/openai/templates.yaml").write_text("{}\n", encoding="utf-8")

    manifest = generate_manifest(catalog_root, now=NOW)

    assert manifest == {
        "version": "1.2.3",
        "generated_at": "2025-01-02T03:04:05Z",
        "schema_version": "1.0",
        "providers": [
            {
                "name": "openai",
                "files": [
                    "providers/openai/provider.yaml",
                    "providers/openai/templates.yaml",
                ],
                "models": [
                    "providers/openai/models/gpt-3.5-turbo.yaml",
                    "providers/openai/models/gpt-4o.yaml",
                ],
            },
            {"name": "openrouter", "files": ["providers/openrouter/provider.yaml"]},
        ],
        "stats": {
            "total_providers": 2,
            "total_models": 2,
            "static_providers": 1,
            "meta_providers": 1,
        },
    }


def test_provider_without_descriptor_is_counted_as_neither(catalog_root: Path) -> None:
    (catalog_root / "providers/scratch").mkdir()

    stats = generate_manifest(catalog_root, now=NOW)["stats"]

    assert stats == {
        "total_providers": 3,
        "total_models": 2,
        "static_providers": 1,
        "meta_providers": 1,
    }


def test_write_manifest_adds_header(catalog_root: Path) -> None:
    path = write_manifest(catalog_root, now=NOW)

    text = path.read_text(encoding="utf-8")
    assert path == catalog_root / "manifest.yaml"
    assert text.startswith("# Model Catalog Manifest\n# Auto-generated - DO NOT EDIT MANUALLY\n")
    assert read_yaml_file(path) == generate_manifest(catalog_root, now=NOW)


def test_missing_providers_directory(tmp_path: Path) -> None:
    (tmp_path / "version.txt").write_text("0.1.0\n", encoding="utf-8")

    with pytest.raises(CatalogLoadError):
        generate_manifest(tmp_path)
