"""Logging setup shared by the CLI entry points."""

from __future__ import annotations

import logging

from .errors import ConfigurationError


def resolve_log_level(name: str | int | None) -> int:
    if name is None:
        return logging.INFO
    if isinstance(name, int):
        return name
    level = logging.getLevelNamesMapping().get(name.strip().upper())
    if level is None:
        raise ConfigurationError(f"Unknown log level: {name!r}")
    return level


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with a terse CLI format.

    Pass ``force=True`` to reconfigure during tests or when the level is only
    known after the config file was read.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
