"""
Unified configuration management for the recommendation engine.

This module provides a fast-fail configuration system backed by a schema
registry with defaults.

Usage:
    from studygraph.config import ConfigLoader, ConfigError

    # Optional explicit initialization at application startup
    ConfigLoader.initialize(overrides={"hybrid.content_weight": 0.7})

    # Get singleton instance
    config = ConfigLoader.get_instance()

    # Typed accessors
    window = config.get_int("diversity.lookahead_window")
    weight = config.get_float("hybrid.content_weight")
"""

from __future__ import annotations

from .errors import (
    ConfigError,
    MissingKeyError,
    UnknownKeyError,
    ValidationError,
)
from .loader import ConfigLoader
from .schema import CONFIG_SCHEMA
from .types import ConfigKey, ConfigType

__all__ = [
    # Main loader
    "ConfigLoader",
    # Error classes
    "ConfigError",
    "MissingKeyError",
    "ValidationError",
    "UnknownKeyError",
    # Schema
    "CONFIG_SCHEMA",
    "ConfigKey",
    "ConfigType",
]
