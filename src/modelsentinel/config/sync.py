"""Reconciliation defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CATALOG_PATH = "../model-catalog"
DEFAULT_PROVIDERS = ("openai",)
DEFAULT_SOURCES = ("api",)
DEFAULT_HEALTH_THRESHOLD = 0.5


@dataclass(frozen=True, slots=True)
class SyncConfig:
    catalog_path: Path = field(default_factory=lambda: Path(DEFAULT_CATALOG_PATH).resolve())
    providers: tuple[str, ...] = DEFAULT_PROVIDERS
    sources: tuple[str, ...] = DEFAULT_SOURCES
    dry_run: bool = False
    no_cache: bool = False
    max_workers: int = 1
    track_display_name: bool = False
    health_enabled: bool = True
    health_threshold: float = DEFAULT_HEALTH_THRESHOLD
    block_on_review: bool = False
