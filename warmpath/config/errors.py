"""Errors raised while resolving search tunables.

They share the WarmPathError root, so a misconfigured deployment surfaces
with a user_message like any other pathfinding failure.
"""

from __future__ import annotations

from ..errors import WarmPathError


class ConfigError(WarmPathError):
    """A tunable could not be resolved to a usable value."""

    user_message = "Connection search is misconfigured. Check the CONFIG_* settings and try again."


class MissingKeyError(ConfigError):
    """Required key with no value in any source and no default."""


class ValidationError(ConfigError):
    """Value could not be coerced to its type or falls outside its range."""


class DatabaseUnavailableError(ConfigError):
    user_message = "Could not reach the settings database. Try again in a moment."


class UnknownKeyError(ConfigError):
    """Key is not declared in CONFIG_SCHEMA."""
