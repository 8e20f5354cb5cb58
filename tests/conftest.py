from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.helpers.catalog import model_document, write_catalog

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def catalog_root(tmp_path: Path) -> Path:
    """Catalog at version 1.2.3 with two OpenAI models and one meta provider."""

    return write_catalog(
        tmp_path / "catalog",
        {
            "openai": [
                model_document("gpt-4o", capabilities=["chat", "function_calling", "vision"]),
                model_document(
                    "gpt-3.5-turbo",
                    family="gpt-3.5",
                    limits={"max_tokens": 16_385, "max_completion_tokens": 4_096},
                    cost={"input_per_1k": 0.0005, "output_per_1k": 0.0015},
                    tags=["legacy"],
                ),
            ],
        },
        meta_providers=("openrouter",),
    )


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GITHUB_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SENTINEL_CACHE_DIR", str(tmp_path / "cache"))
