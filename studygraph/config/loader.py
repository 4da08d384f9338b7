"""
ConfigLoader - Unified fast-fail configuration management.

Resolves engine tuning values from environment variables, an explicit
overrides mapping, and schema defaults (in that order). Unknown keys and
out-of-range values fail immediately.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, cast

from .errors import ConfigError, MissingKeyError, UnknownKeyError, ValidationError
from .schema import CONFIG_SCHEMA

logger = logging.getLogger(__name__)

ENV_PREFIX = "CONFIG_"


class ConfigLoader:
    """
    Unified configuration loader with fast-fail behavior.

    Usage:
        # Initialize at application startup (validates all keys)
        ConfigLoader.initialize(overrides={"hybrid.content_weight": 0.7})

        # Get singleton instance
        loader = ConfigLoader.get_instance()

        # Typed accessors
        half_life = loader.get_float("similarity.time_decay.half_life_days")
        window = loader.get_int("diversity.lookahead_window")

        # Test substitution
        with ConfigLoader.use(mock_loader):
            # Tests run with mock
            pass
    """

    _instance: ConfigLoader | None = None
    _initialized: bool = False

    def __init__(self, overrides: Mapping[str, Any] | None = None):
        """
        Initialize the config loader.

        Args:
            overrides: Explicit values keyed by dot-notation config key.
                Environment variables still take precedence over these.

        Raises:
            UnknownKeyError: If an override names a key outside the schema
        """
        self._overrides: dict[str, Any] = {}
        for key, value in (overrides or {}).items():
            self.set_override(key, value)
        self._validated = False

    @classmethod
    def initialize(
        cls,
        overrides: Mapping[str, Any] | None = None,
        validate_on_init: bool = True,
    ) -> ConfigLoader:
        """
        Initialize the singleton ConfigLoader.

        Args:
            overrides: Explicit config values
            validate_on_init: If True, resolves and validates every key

        Returns:
            The initialized ConfigLoader instance

        Raises:
            ConfigError: If any key resolves to a missing or invalid value
        """
        if cls._initialized:
            logger.debug("ConfigLoader already initialized, returning existing instance")
            return cls._instance  # type: ignore

        instance = cls(overrides=overrides)

        if validate_on_init:
            instance.validate_all()

        cls._instance = instance
        cls._initialized = True
        logger.info("ConfigLoader initialized successfully")
        return instance

    @classmethod
    def get_instance(cls) -> ConfigLoader:
        """
        Get the singleton instance.

        Auto-initializes with schema defaults when no explicit initialize()
        call happened, which is the normal case for library callers.
        """
        if not cls._initialized or cls._instance is None:
            logger.debug("ConfigLoader auto-initializing (no explicit initialize() call)")
            return cls.initialize(validate_on_init=False)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset singleton state. For testing only."""
        cls._instance = None
        cls._initialized = False

    @classmethod
    @contextmanager
    def use(cls, loader: ConfigLoader) -> Iterator[None]:
        """
        Temporarily replace the singleton with a custom loader.

        Args:
            loader: The loader to use temporarily.
        """
        original = cls._instance
        original_initialized = cls._initialized
        cls._instance = loader
        cls._initialized = True
        try:
            yield
        finally:
            cls._instance = original
            cls._initialized = original_initialized

    def validate_all(self) -> None:
        """
        Resolve every schema key and validate its value.

        Raises:
            ConfigError: If any key has no value or any value is invalid
        """
        missing_keys: list[str] = []
        invalid_values: list[str] = []

        for key in CONFIG_SCHEMA:
            try:
                self.get(key)
            except MissingKeyError:
                missing_keys.append(key)
            except ValidationError as e:
                invalid_values.append(f"{key}: {e}")

        if missing_keys or invalid_values:
            error_parts = []
            if missing_keys:
                error_parts.append(f"Missing keys ({len(missing_keys)}): {missing_keys}")
            if invalid_values:
                error_parts.append(f"Invalid values ({len(invalid_values)}): {invalid_values}")

            raise ConfigError("Configuration validation failed.\n" + "\n".join(error_parts))

        self._validated = True
        logger.info(f"Validated {len(CONFIG_SCHEMA)} config keys")

    def _get_env_key(self, key: str) -> str:
        """Convert dot notation to environment variable name."""
        # hybrid.content_weight -> CONFIG_HYBRID_CONTENT_WEIGHT
        return ENV_PREFIX + key.upper().replace(".", "_")

    def get(self, key: str) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key (e.g., "hybrid.content_weight")

        Returns:
            The typed configuration value

        Raises:
            UnknownKeyError: If key is not in schema
            MissingKeyError: If no source provides a value
            ValidationError: If value fails conversion or validation
        """
        if key not in CONFIG_SCHEMA:
            raise UnknownKeyError(f"Unknown config key: '{key}'")

        schema = CONFIG_SCHEMA[key]

        env_key = self._get_env_key(key)
        env_value = os.environ.get(env_key)
        if env_value is not None:
            source = f"environment variable {env_key}"
            raw_value: Any = env_value
        elif key in self._overrides:
            source = "overrides"
            raw_value = self._overrides[key]
        elif schema.default is not None:
            source = "schema default"
            raw_value = schema.default
        else:
            raise MissingKeyError(f"Required config key '{key}' has no value and no default")

        try:
            typed_value = schema.config_type.convert(raw_value)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Config key '{key}' from {source} has invalid type: {e}") from e

        error = schema.validate(typed_value)
        if error:
            raise ValidationError(f"Config key '{key}' from {source}: {error}")

        return typed_value

    def get_int(self, key: str, default: int | None = None) -> int:
        """Get an integer config value."""
        try:
            return cast(int, self.get(key))
        except (MissingKeyError, UnknownKeyError):
            if default is not None:
                return default
            raise

    def get_float(self, key: str, default: float | None = None) -> float:
        """Get a float config value."""
        try:
            return cast(float, self.get(key))
        except (MissingKeyError, UnknownKeyError):
            if default is not None:
                return default
            raise

    def set_override(self, key: str, value: Any) -> None:
        """
        Set an explicit value for a key.

        Raises:
            UnknownKeyError: If key is not in schema
            ValidationError: If value fails validation
        """
        if key not in CONFIG_SCHEMA:
            raise UnknownKeyError(f"Unknown config key: '{key}'")

        schema = CONFIG_SCHEMA[key]
        try:
            typed_value = schema.config_type.convert(value)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"Cannot set '{key}': invalid type: {e}") from e

        error = schema.validate(typed_value)
        if error:
            raise ValidationError(f"Cannot set '{key}': {error}")

        self._overrides[key] = typed_value
        logger.debug(f"Config override '{key}' = {typed_value!r}")

    def clear_overrides(self) -> None:
        """Drop every explicit override, falling back to env and defaults."""
        self._overrides.clear()

    def as_dict(self) -> dict[str, Any]:
        """Resolve every key that has a value."""
        result: dict[str, Any] = {}
        for key in CONFIG_SCHEMA:
            try:
                result[key] = self.get(key)
            except MissingKeyError:
                continue
        return result
