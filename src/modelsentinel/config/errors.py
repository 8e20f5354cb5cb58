"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid or the config file is unreadable."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration values (usually credentials) are absent or blank."""
