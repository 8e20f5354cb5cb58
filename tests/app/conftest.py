from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from modelsentinel.config import load_settings

if TYPE_CHECKING:
    from pathlib import Path

    from modelsentinel.config import Settings


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, catalog_root: Path) -> Settings:
    """Defaults only (no config file), pointed at the test catalog."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    return load_settings(environ={}).with_overrides(catalog_path=catalog_root)
