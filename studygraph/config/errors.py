"""Configuration error classes.

All config-related exceptions for fast-fail behavior.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class MissingKeyError(ConfigError):
    """Raised when a required config key has no value and no default."""

    pass


class ValidationError(ConfigError):
    """Raised when a config value fails type conversion or validation."""

    pass


class UnknownKeyError(ConfigError):
    """Raised when an unknown config key is requested."""

    pass
