"""Local storage locations (HTTP cache)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "modelsentinel"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    cache_dir: Path
    http_cache_filename: str = HTTP_CACHE_FILENAME

    def resolve_cache_dir(self) -> Path:
        return self.cache_dir.expanduser().resolve()

    def ensure_cache_dir(self) -> Path:
        cache_dir = self.resolve_cache_dir()
        cache_dir.mkdir(parents=True, exist_ok=True)
        return cache_dir

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_cache_dir() if ensure else self.resolve_cache_dir()
        return base / self.http_cache_filename


def _default_cache_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_CACHE_HOME")
        base_path = Path(base) if base else (Path.home() / ".cache")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config(cache_dir: str | Path | None = None) -> StorageConfig:
    """Explicit ``cache_dir`` wins over ``SENTINEL_CACHE_DIR`` and the platform default."""

    if cache_dir:
        return StorageConfig(cache_dir=Path(cache_dir))
    env_dir = os.getenv("SENTINEL_CACHE_DIR")
    return StorageConfig(cache_dir=Path(env_dir) if env_dir else _default_cache_dir())


def get_http_cache_path() -> Path:
    return get_storage_config().http_cache_path()
