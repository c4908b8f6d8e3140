"""Typed schema entries for search tunables."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ConfigType(Enum):
    """Value types a tunable can take."""

    INT = "int"
    FLOAT = "float"
    STRING = "string"


@dataclass
class ConfigKey:
    """
    One tunable: its type, default and accepted range.

    Raw values from the environment or the config collection arrive as
    strings or loosely typed JSON; `coerce` turns them into the declared
    type and `validate` checks the result.
    """

    key: str
    config_type: ConfigType
    default: Any = None
    required: bool = True
    description: str = ""
    min_value: float | None = None
    max_value: float | None = None
    validator: Callable[[Any], bool] | None = None

    def coerce(self, raw: Any) -> Any:
        """
        Convert a raw value to this key's type.

        Raises:
            ValueError: If the value cannot be converted
        """
        if self.config_type is ConfigType.INT:
            if isinstance(raw, float) and not raw.is_integer():
                raise ValueError(f"{raw!r} is not a whole number")
            return int(raw)
        if self.config_type is ConfigType.FLOAT:
            return float(raw)
        return str(raw)

    def validate(self, value: Any) -> str | None:
        """Describe why a typed value is out of bounds, or None if it is acceptable."""
        numeric = self.config_type in (ConfigType.INT, ConfigType.FLOAT)
        if numeric and self.min_value is not None and value < self.min_value:
            return f"{self.key}={value} is below {self.min_value}"
        if numeric and self.max_value is not None and value > self.max_value:
            return f"{self.key}={value} is above {self.max_value}"
        if self.validator is not None and not self.validator(value):
            return f"{self.key}={value!r} was rejected by its validator"
        return None
