"""
Search tunables, resolved from overrides, CONFIG_* environment variables,
an optional PocketBase config collection, and schema defaults.

    from warmpath.config import ConfigLoader

    ttl_hours = ConfigLoader.get_instance().get_float("cache.ttl_hours")
"""

from __future__ import annotations

from .errors import (
    ConfigError,
    DatabaseUnavailableError,
    MissingKeyError,
    UnknownKeyError,
    ValidationError,
)
from .loader import ConfigLoader, env_var_for
from .schema import CONFIG_SCHEMA, get_all_required_keys, get_schema_key, validate_key
from .types import ConfigKey, ConfigType

__all__ = [
    "CONFIG_SCHEMA",
    "ConfigError",
    "ConfigKey",
    "ConfigLoader",
    "ConfigType",
    "DatabaseUnavailableError",
    "MissingKeyError",
    "UnknownKeyError",
    "ValidationError",
    "env_var_for",
    "get_all_required_keys",
    "get_schema_key",
    "validate_key",
]
