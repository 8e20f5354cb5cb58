"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError, MissingConfigurationError
from .github import GitHubConfig
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .judge import JudgeConfig
from .logging import configure_logging, resolve_log_level
from .providers import ProviderAPIConfig
from .settings import Settings, load_settings
from .storage import StorageConfig, get_storage_config
from .sync import SyncConfig

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "GitHubConfig",
    "JudgeConfig",
    "MissingConfigurationError",
    "ProviderAPIConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "Settings",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "get_storage_config",
    "load_settings",
    "resolve_log_level",
]
