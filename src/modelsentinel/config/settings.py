"""Load application settings from an optional YAML file plus the environment.

Precedence, highest first: ``SENTINEL_*`` variables (and the credential
variables ``OPENAI_API_KEY``, ``ANTHROPIC_API_KEY``, ``GITHUB_TOKEN``), the
config file, built-in defaults.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from .env import get_env, parse_bool, parse_float, parse_int, parse_list
from .errors import ConfigurationError
from .github import GitHubConfig
from .http_resilience import CacheConfig
from .judge import SUPPORTED_JUDGE_PROVIDERS, JudgeConfig
from .providers import (
    ANTHROPIC_API_VERSION,
    ANTHROPIC_BASE_URL,
    OPENAI_BASE_URL,
    ProviderAPIConfig,
    build_provider_config,
)
from .storage import StorageConfig, get_storage_config
from .sync import (
    DEFAULT_CATALOG_PATH,
    DEFAULT_HEALTH_THRESHOLD,
    DEFAULT_PROVIDERS,
    DEFAULT_SOURCES,
    SyncConfig,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

log = getLogger(__name__)

CONFIG_FILENAME = "config.yaml"
DEFAULT_CACHE_TTL_SECONDS = 3600.0
_ON_REJECT_VALUES = frozenset({"draft", "exclude"})


def default_config_paths() -> tuple[Path, ...]:
    return (Path(CONFIG_FILENAME), Path.home() / ".config" / "modelsentinel" / CONFIG_FILENAME)


@dataclass(frozen=True, slots=True)
class Settings:
    sync: SyncConfig
    storage: StorageConfig
    openai: ProviderAPIConfig
    anthropic: ProviderAPIConfig
    judge: JudgeConfig
    github: GitHubConfig
    log_level: str = "info"
    config_path: Path | None = None

    def with_overrides(
        self,
        *,
        catalog_path: str | Path | None = None,
        providers: Sequence[str] | None = None,
        dry_run: bool | None = None,
        no_cache: bool | None = None,
    ) -> Settings:
        """Apply CLI flags on top of the loaded settings."""

        sync = self.sync
        if catalog_path is not None:
            sync = replace(sync, catalog_path=Path(catalog_path).resolve())
        if providers:
            sync = replace(sync, providers=tuple(providers))
        if dry_run:
            sync = replace(sync, dry_run=True)
        if no_cache:
            return replace(
                self,
                sync=replace(sync, no_cache=True),
                openai=self.openai.without_cache(),
                anthropic=self.anthropic.without_cache(),
            )
        return replace(self, sync=sync)


class _SettingsSource:
    """Resolve dotted keys against the environment first, then the file."""

    def __init__(self, data: Mapping[str, object], environ: Mapping[str, str]) -> None:
        self._data = data
        self._environ = environ

    def get(self, key: str, *, env_var: str | None = None) -> object | None:
        if env_var is not None:
            value = self._environ.get(env_var)
            if value is not None and value.strip():
                return value.strip()
        env_value = get_env(key, self._environ)
        if env_value is not None:
            return env_value

        node: object = self._data
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return None
            node = node[part]  # pyright: ignore[reportUnknownVariableType]
        return node

    def text(self, key: str, default: str, *, env_var: str | None = None) -> str:
        value = self.get(key, env_var=env_var)
        return default if value is None else str(value)

    def optional_text(self, key: str, *, env_var: str | None = None) -> str | None:
        value = self.get(key, env_var=env_var)
        return None if value is None or not str(value).strip() else str(value)

    def flag(self, key: str, default: bool) -> bool:
        value = self.get(key)
        return default if value is None else parse_bool(value, key=key)

    def integer(self, key: str, default: int) -> int:
        value = self.get(key)
        return default if value is None else parse_int(value, key=key)

    def number(self, key: str, default: float) -> float:
        value = self.get(key)
        return default if value is None else parse_float(value, key=key)

    def items(self, key: str, default: tuple[str, ...]) -> tuple[str, ...]:
        value = self.get(key)
        return default if value is None else parse_list(value, key=key)


def read_config_file(path: Path) -> dict[str, object]:
    try:
        with path.open(encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Reading config file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return {str(key): value for key, value in data.items()}  # pyright: ignore[reportUnknownVariableType, reportUnknownArgumentType]


def _find_config_file(path: str | Path | None) -> Path | None:
    if path is not None:
        explicit = Path(path)
        if not explicit.is_file():
            raise ConfigurationError(f"Config file not found: {explicit}")
        return explicit
    for candidate in default_config_paths():
        if candidate.is_file():
            return candidate
    return None


def load_settings(
    path: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    env = os.environ if environ is None else environ
    config_path = _find_config_file(path)
    data = read_config_file(config_path) if config_path is not None else {}
    if config_path is not None:
        log.debug("Loaded settings from %s", config_path)
    source = _SettingsSource(data, env)

    sync = _load_sync(source)
    storage = get_storage_config(source.optional_text("cache_dir"))
    cache = _cache_config(source, storage, no_cache=sync.no_cache)

    return Settings(
        sync=sync,
        storage=storage,
        openai=build_provider_config(
            "openai",
            base_url=source.text("openai.base_url", OPENAI_BASE_URL),
            api_key=source.optional_text("openai.api_key", env_var="OPENAI_API_KEY"),
            api_key_env="OPENAI_API_KEY",
            cache=cache,
        ),
        anthropic=build_provider_config(
            "anthropic",
            base_url=source.text("anthropic.base_url", ANTHROPIC_BASE_URL),
            api_key=source.optional_text("anthropic.api_key", env_var="ANTHROPIC_API_KEY"),
            api_key_env="ANTHROPIC_API_KEY",
            cache=cache,
            headers={"anthropic-version": ANTHROPIC_API_VERSION},
        ),
        judge=_load_judge(source),
        github=GitHubConfig(
            token=source.optional_text("github.token", env_var="GITHUB_TOKEN"),
            owner=source.text("github.owner", ""),
            repo=source.text("github.repo", ""),
            base_branch=source.text("github.base_branch", "main"),
        ),
        log_level=source.text("log_level", "info"),
        config_path=config_path,
    )


def _load_sync(source: _SettingsSource) -> SyncConfig:
    threshold = source.number("health.threshold", DEFAULT_HEALTH_THRESHOLD)
    if not 0 <= threshold <= 1:
        raise ConfigurationError(f"health.threshold must be within [0, 1], got {threshold}")
    max_workers = source.integer("max_workers", 1)
    if max_workers < 1:
        raise ConfigurationError(f"max_workers must be at least 1, got {max_workers}")
    return SyncConfig(
        catalog_path=Path(source.text("catalog_path", DEFAULT_CATALOG_PATH))
        .expanduser()
        .resolve(),
        providers=source.items("providers", DEFAULT_PROVIDERS),
        sources=source.items("sources", DEFAULT_SOURCES),
        dry_run=source.flag("dry_run", False),
        no_cache=source.flag("no_cache", False),
        max_workers=max_workers,
        track_display_name=source.flag("diff.track_display_name", False),
        health_enabled=source.flag("health.enabled", True),
        health_threshold=threshold,
        block_on_review=source.flag("risk.block_on_review", False),
    )


def _load_judge(source: _SettingsSource) -> JudgeConfig:
    defaults = JudgeConfig()
    judge = JudgeConfig(
        enabled=source.flag("judge.enabled", defaults.enabled),
        provider=source.text("judge.provider", defaults.provider).lower(),
        model=source.text("judge.model", defaults.model),
        on_reject=source.text("judge.on_reject", defaults.on_reject).lower(),
        max_tokens=source.integer("judge.max_tokens", defaults.max_tokens),
    )
    if judge.provider not in SUPPORTED_JUDGE_PROVIDERS:
        raise ConfigurationError(f"Unsupported judge provider: {judge.provider}")
    if judge.on_reject not in _ON_REJECT_VALUES:
        raise ConfigurationError(f"judge.on_reject must be 'draft' or 'exclude': {judge.on_reject}")
    return judge


def _cache_config(
    source: _SettingsSource,
    storage: StorageConfig,
    *,
    no_cache: bool,
) -> CacheConfig | None:
    if no_cache:
        return None
    return CacheConfig(
        backend="sqlite",
        sqlite_path=str(storage.http_cache_path(ensure=False)),
        default_ttl_seconds=source.number("cache_ttl", DEFAULT_CACHE_TTL_SECONDS),
    )
