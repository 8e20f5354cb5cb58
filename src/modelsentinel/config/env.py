"""Environment variable loaders for configuration.

Every setting can be overridden with a ``SENTINEL_``-prefixed variable; nested
keys use an underscore (``judge.model`` -> ``SENTINEL_JUDGE_MODEL``).
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_PREFIX = "SENTINEL_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def env_name(key: str) -> str:
    """``health.threshold`` -> ``SENTINEL_HEALTH_THRESHOLD``."""
    return ENV_PREFIX + key.replace(".", "_").upper()


def get_env(key: str, environ: Mapping[str, str] | None = None) -> str | None:
    env = os.environ if environ is None else environ
    value = env.get(env_name(key))
    if value is None or not value.strip():
        return None
    return value.strip()


def parse_bool(value: object, *, key: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {key}: {value!r}")


def parse_int(value: object, *, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid integer for {key}: {value!r}")
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ConfigurationError(f"Invalid integer for {key}: {value!r}") from exc


def parse_float(value: object, *, key: str) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid number for {key}: {value!r}")
    try:
        return float(str(value).strip())
    except ValueError as exc:
        raise ConfigurationError(f"Invalid number for {key}: {value!r}") from exc


def parse_list(value: object, *, key: str) -> tuple[str, ...]:
    """Accept a YAML sequence or a comma-separated string."""

    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, list | tuple):
        items = [str(item) for item in value]  # pyright: ignore[reportUnknownVariableType, reportUnknownArgumentType]
    else:
        raise ConfigurationError(f"Invalid list for {key}: {value!r}")
    return tuple(item.strip() for item in items if item.strip())
