"""Schema entry types for the engine's tuning registry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ConfigType(Enum):
    """Numeric kinds a tunable can have."""

    INT = "int"
    FLOAT = "float"

    def convert(self, raw: object) -> int | float:
        """Coerce an override or env string. Raises ValueError/TypeError on junk."""
        if self is ConfigType.INT:
            return int(raw)  # type: ignore[call-overload]
        return float(raw)  # type: ignore[arg-type]


@dataclass(frozen=True)
class ConfigKey:
    """One tunable: its dot-notation name, numeric kind, default and bounds.

    A key without a default must be supplied through an override or the
    environment.
    """

    key: str
    config_type: ConfigType
    default: int | float | None = None
    description: str = ""
    min_value: float | None = None
    max_value: float | None = None

    def validate(self, value: int | float) -> str | None:
        """Return an error message when ``value`` is out of bounds, else None."""
        if self.min_value is not None and value < self.min_value:
            return f"Value {value} below minimum {self.min_value}"
        if self.max_value is not None and value > self.max_value:
            return f"Value {value} above maximum {self.max_value}"
        return None
