from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from modelsentinel.adapters.yaml_catalog import CatalogFormatError, SmartMergeWriter
from modelsentinel.domain.model import Cost, Modalities, ModelStatus, UpdaterMetadata
from tests.helpers.catalog import make_discovered

if TYPE_CHECKING:
    from pathlib import Path

METADATA = UpdaterMetadata(last_verified_at="2025-01-02T03:04:05Z", sources=("api",))


def test_new_model_gets_a_complete_document(catalog_root: Path) -> None:
    writer = SmartMergeWriter(catalog_root)

    result = writer.write_model(
        "openai",
        make_discovered("gpt-5", family="gpt-5", cost=Cost(0.00125, 0.01)),
        metadata=METADATA,
    )

    assert result.is_new
    assert result.written
    assert result.path == catalog_root / "providers/openai/models/gpt-5.yaml"
    assert result.path.read_text(encoding="utf-8") == (
        "name: gpt-5\n"
        "display_name: GPT-5\n"
        "family: gpt-5\n"
        "status: stable\n"
        "cost:\n"
        "  input_per_1k: 0.00125\n"
        "  output_per_1k: 0.01\n"
        "limits:\n"
        "  max_tokens: 128000\n"
        "  max_completion_tokens: 16384\n"
        "capabilities:\n"
        "  - chat\n"
        "  - function_calling\n"
        "modalities:\n"
        "  input:\n"
        "    - text\n"
        "  output:\n"
        "    - text\n"
        "x_updater:\n"
        "  last_verified_at: 2025-01-02T03:04:05Z\n"
        "  sources:\n"
        "    - api\n"
    )


def test_unchanged_model_is_not_rewritten(catalog_root: Path) -> None:
    path = catalog_root / "providers/openai/models/gpt-4o.yaml"
    before = path.read_text(encoding="utf-8")

    result = SmartMergeWriter(catalog_root).write_model(
        "openai",
        make_discovered("gpt-4o", capabilities=("chat", "vision", "function_calling")),
        metadata=METADATA,
    )

    assert not result.written
    assert path.read_text(encoding="utf-8") == before


def test_update_preserves_unknown_keys_and_display_name(catalog_root: Path) -> None:
    path = catalog_root / "providers/openai/models/gpt-3.5-turbo.yaml"
    path.write_text(
        "name: gpt-3.5-turbo\n"
        "display_name: GPT-3.5 Turbo\n"
        "family: gpt-3.5\n"
        "status: stable\n"
        "notes: keep me\n"
        "cost:\n"
        "  input_per_1k: 0.0005\n"
        "  output_per_1k: 0.0015\n"
        "  currency: usd\n"
        "limits:\n"
        "  max_tokens: 16385\n"
        "  max_completion_tokens: 4096\n"
        "capabilities:\n"
        "  - chat\n"
        "modalities:\n"
        "  input:\n"
        "    - text\n"
        "  output:\n"
        "    - text\n"
        "tags:\n"
        "  - legacy\n",
        encoding="utf-8",
    )

    result = SmartMergeWriter(catalog_root).write_model(
        "openai",
        make_discovered(
            "gpt-3.5-turbo",
            family="gpt-3.5",
            display_name="Something Else",
            max_tokens=16_385,
            max_completion_tokens=8_192,
            capabilities=("chat", "function_calling"),
            cost=Cost(0.0, 0.0),
        ),
        metadata=METADATA,
    )

    assert [change.field for change in result.changes] == [
        "limits.max_completion_tokens",
        "capabilities",
    ]
    assert path.read_text(encoding="utf-8") == (
        "name: gpt-3.5-turbo\n"
        "display_name: GPT-3.5 Turbo\n"
        "family: gpt-3.5\n"
        "status: stable\n"
        "notes: keep me\n"
        "cost:\n"
        "  input_per_1k: 0.0005\n"
        "  output_per_1k: 0.0015\n"
        "  currency: usd\n"
        "limits:\n"
        "  max_tokens: 16385\n"
        "  max_completion_tokens: 8192\n"
        "capabilities:\n"
        "  - chat\n"
        "  - function_calling\n"
        "modalities:\n"
        "  input:\n"
        "    - text\n"
        "  output:\n"
        "    - text\n"
        "tags:\n"
        "  - legacy\n"
        "x_updater:\n"
        "  last_verified_at: 2025-01-02T03:04:05Z\n"
        "  sources:\n"
        "    - api\n"
    )


def test_display_name_written_when_tracked(catalog_root: Path) -> None:
    writer = SmartMergeWriter(catalog_root, track_display_name=True)

    result = writer.write_model("openai", make_discovered("gpt-4o", display_name="GPT-4o"))

    assert [change.field for change in result.changes] == ["display_name", "capabilities"]
    assert "display_name: GPT-4o\n" in result.path.read_text(encoding="utf-8")


def test_namespaced_names_store_under_last_segment(catalog_root: Path) -> None:
    writer = SmartMergeWriter(catalog_root)

    path = writer.path_for("huggingface", "meta-llama/Llama-3-8B")

    assert path == catalog_root / "providers/huggingface/models/llama-3-8b.yaml"


def test_corrupt_existing_file_is_reported(catalog_root: Path) -> None:
    path = catalog_root / "providers/openai/models/gpt-4o.yaml"
    path.write_text("display_name: nameless\n", encoding="utf-8")

    with pytest.raises(CatalogFormatError, match="invalid model document"):
        SmartMergeWriter(catalog_root).write_model("openai", make_discovered("gpt-4o"))


def test_update_keeps_comments_flow_lists_and_quotes(catalog_root: Path) -> None:
    path = catalog_root / "providers/openai/models/gpt-4o.yaml"
    path.write_text(
        "# Maintained by hand; see CONTRIBUTING.\n"
        "name: gpt-4o\n"
        'display_name: "GPT-4o"\n'
        "family: gpt-4  # tier\n"
        "status: stable\n"
        "limits:\n"
        "  max_tokens: 128000\n"
        "  max_completion_tokens: 16384\n"
        "capabilities: [chat, function_calling, vision]\n"
        "modalities:\n"
        "  input: [text, image]\n"
        "  output: [text]\n"
        "release_date: 2024-05-13\n",
        encoding="utf-8",
    )
    discovered = make_discovered(
        "gpt-4o",
        max_completion_tokens=32_768,
        capabilities=("chat", "function_calling", "vision"),
    )
    discovered.modalities = Modalities(input=("text", "image"), output=("text",))

    result = SmartMergeWriter(catalog_root).write_model("openai", discovered, metadata=METADATA)

    assert [change.field for change in result.changes] == ["limits.max_completion_tokens"]
    assert path.read_text(encoding="utf-8") == (
        "# Maintained by hand; see CONTRIBUTING.\n"
        "name: gpt-4o\n"
        'display_name: "GPT-4o"\n'
        "family: gpt-4  # tier\n"
        "status: stable\n"
        "limits:\n"
        "  max_tokens: 128000\n"
        "  max_completion_tokens: 32768\n"
        "capabilities: [chat, function_calling, vision]\n"
        "modalities:\n"
        "  input: [text, image]\n"
        "  output: [text]\n"
        "release_date: 2024-05-13\n"
        "x_updater:\n"
        "  last_verified_at: 2025-01-02T03:04:05Z\n"
        "  sources:\n"
        "    - api\n"
    )


def test_status_change_with_zero_cost_keeps_stored_cost(catalog_root: Path) -> None:
    path = catalog_root / "providers/openai/models/gpt-4o-mini.yaml"
    path.write_text(
        "name: gpt-4o-mini\n"
        "display_name: GPT-4o mini\n"
        "family: gpt-4\n"
        "status: stable\n"
        "cost:\n"
        "  input_per_1k: 0.00015\n"
        "  output_per_1k: 0.0006\n"
        "limits:\n"
        "  max_tokens: 128000\n"
        "  max_completion_tokens: 16384\n"
        "capabilities:\n"
        "  - chat\n"
        "  - function_calling\n"
        "modalities:\n"
        "  input:\n"
        "    - text\n"
        "  output:\n"
        "    - text\n",
        encoding="utf-8",
    )

    result = SmartMergeWriter(catalog_root).write_model(
        "openai",
        make_discovered("gpt-4o-mini", status=ModelStatus.BETA, cost=Cost(0.0, 0.0)),
    )

    assert [(change.field, change.old, change.new) for change in result.changes] == [
        ("status", "stable", "beta")
    ]
    text = path.read_text(encoding="utf-8")
    assert "status: beta\n" in text
    assert "ModelStatus" not in text
    assert "  input_per_1k: 0.00015\n  output_per_1k: 0.0006\n" in text


def test_new_model_status_is_written_as_plain_text(catalog_root: Path) -> None:
    result = SmartMergeWriter(catalog_root).write_model(
        "openai", make_discovered("o3", status=ModelStatus.PREVIEW)
    )

    text = result.path.read_text(encoding="utf-8")
    assert "status: preview\n" in text
    assert "!!python" not in text
