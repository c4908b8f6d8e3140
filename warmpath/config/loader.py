"""
ConfigLoader - schema-validated search tunables.

Each key resolves from the first source that has a value:

    1. explicit overrides (tests, embedding applications)
    2. CONFIG_* environment variables (pathfinding.max_hops -> CONFIG_PATHFINDING_MAX_HOPS)
    3. the PocketBase "config" collection, when a client is attached
    4. the schema default

Values from sources 2 and 3 are coerced and validated against CONFIG_SCHEMA;
database values are cached for a few minutes.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from pocketbase.client import ClientResponseError  # type: ignore[attr-defined]

from .errors import (
    ConfigError,
    DatabaseUnavailableError,
    MissingKeyError,
    UnknownKeyError,
    ValidationError,
)
from .schema import CONFIG_SCHEMA, get_all_required_keys
from .types import ConfigKey

if TYPE_CHECKING:
    from pocketbase import PocketBase

logger = logging.getLogger(__name__)

CONFIG_COLLECTION = "config"
ENV_PREFIX = "CONFIG_"


def env_var_for(key: str) -> str:
    return ENV_PREFIX + key.upper().replace(".", "_")


class ConfigLoader:
    """
    Process-wide tunables with fast-fail validation.

    Usage:
        loader = ConfigLoader.get_instance()
        max_hops = loader.get_int("pathfinding.max_hops")

        # Swap in a loader for a test
        with ConfigLoader.use(ConfigLoader(overrides={"pathfinding.max_hops": 2})):
            ...
    """

    _instance: ConfigLoader | None = None
    _initialized: bool = False

    def __init__(
        self,
        pb_client: PocketBase | None = None,
        cache_ttl_seconds: int = 300,
        overrides: dict[str, Any] | None = None,
    ):
        """
        Args:
            pb_client: Optional PocketBase client holding a "config" collection
            cache_ttl_seconds: How long database values are reused
            overrides: Values that win over every other source
        """
        self._pb = pb_client
        self._cache_ttl = cache_ttl_seconds
        self._db_cache: dict[str, tuple[Any, float]] = {}
        self._overrides: dict[str, Any] = {}
        self._validated = False

        for key, value in (overrides or {}).items():
            self.set_override(key, value)

    @classmethod
    def initialize(
        cls,
        pb_client: PocketBase | None = None,
        validate_on_init: bool = True,
        overrides: dict[str, Any] | None = None,
    ) -> ConfigLoader:
        """
        Create the process-wide loader, once.

        Raises:
            ConfigError: If validate_on_init and any required key fails to resolve
        """
        if cls._initialized and cls._instance is not None:
            logger.debug("ConfigLoader already initialized")
            return cls._instance

        loader = cls(pb_client=pb_client, overrides=overrides)
        if validate_on_init:
            loader._validate_all_required_keys()

        cls._instance = loader
        cls._initialized = True
        logger.info(f"ConfigLoader ready (database={'yes' if pb_client is not None else 'no'})")
        return loader

    @classmethod
    def get_instance(cls) -> ConfigLoader:
        """The process-wide loader, created from environment and defaults on first use."""
        if cls._initialized and cls._instance is not None:
            return cls._instance
        return cls.initialize(validate_on_init=False)

    @classmethod
    def reset(cls) -> None:
        """Forget the process-wide loader. For tests."""
        cls._instance = None
        cls._initialized = False

    @classmethod
    @contextmanager
    def use(cls, loader: ConfigLoader) -> Iterator[None]:
        """Make `loader` the process-wide loader inside the block."""
        saved = (cls._instance, cls._initialized)
        cls._instance, cls._initialized = loader, True
        try:
            yield
        finally:
            cls._instance, cls._initialized = saved

    def _validate_all_required_keys(self) -> None:
        """
        Raises:
            ConfigError: Listing every required key that is missing or invalid
        """
        problems: list[str] = []
        required = get_all_required_keys()
        for key in required:
            try:
                self.get(key)
            except MissingKeyError:
                problems.append(f"{key}: missing")
            except ValidationError as e:
                problems.append(f"{key}: {e}")

        if problems:
            raise ConfigError(f"{len(problems)} config keys failed validation: " + "; ".join(problems))

        self._validated = True
        logger.info(f"Validated {len(required)} required config keys")

    def _schema_for(self, key: str) -> ConfigKey:
        schema = CONFIG_SCHEMA.get(key)
        if schema is None:
            raise UnknownKeyError(f"Unknown config key: '{key}'")
        return schema

    def _typed(self, schema: ConfigKey, raw: Any, origin: str) -> Any:
        try:
            value = schema.coerce(raw)
        except (ValueError, TypeError) as e:
            raise ValidationError(f"{origin}: cannot read {raw!r} as {schema.config_type.value} ({e})") from e
        problem = schema.validate(value)
        if problem:
            raise ValidationError(f"{origin}: {problem}")
        return value

    def get(self, key: str) -> Any:
        """
        Resolve a key to its typed value.

        Raises:
            UnknownKeyError: If the key is not in the schema
            MissingKeyError: If a required key without default resolves to nothing
            ValidationError: If the resolved value is malformed or out of range
            DatabaseUnavailableError: If the config collection cannot be read
        """
        schema = self._schema_for(key)

        if key in self._overrides:
            return self._overrides[key]

        env_var = env_var_for(key)
        env_raw = os.environ.get(env_var)
        if env_raw is not None:
            return self._typed(schema, env_raw, f"Environment variable {env_var}")

        cached = self._db_cache.get(key)
        if cached is not None and time.time() - cached[1] < self._cache_ttl:
            return cached[0]

        db_raw = self._read_database(key) if self._pb is not None else None
        if db_raw is not None:
            value = self._typed(schema, db_raw, f"Config record {key}")
            self._db_cache[key] = (value, time.time())
            return value

        if schema.default is not None:
            return schema.default
        if schema.required:
            raise MissingKeyError(f"Required config key '{key}' has no value and no default")
        return None

    def _read_database(self, key: str) -> Any | None:
        """Raw value of a config record, None when no record exists."""
        assert self._pb is not None
        category, _, config_key = key.partition(".")
        try:
            record = self._pb.collection(CONFIG_COLLECTION).get_first_list_item(
                f'category = "{category}" && config_key = "{config_key}"'
            )
        except ClientResponseError as e:
            if getattr(e, "status", None) == 404:
                return None
            raise DatabaseUnavailableError(f"Could not read config key '{key}': {e}") from e
        return record.value

    def _get_or_default(self, key: str, default: Any) -> Any:
        try:
            return self.get(key)
        except (MissingKeyError, UnknownKeyError):
            if default is None:
                raise
            return default

    def get_int(self, key: str, default: int | None = None) -> int:
        return int(self._get_or_default(key, default))

    def get_float(self, key: str, default: float | None = None) -> float:
        return float(self._get_or_default(key, default))

    def get_str(self, key: str, default: str | None = None) -> str:
        return str(self._get_or_default(key, default))

    def set_override(self, key: str, value: Any) -> None:
        """
        Pin a value on this loader, ahead of environment and database.

        Raises:
            UnknownKeyError: If the key is not in the schema
            ValidationError: If the value is out of range
        """
        schema = self._schema_for(key)
        problem = schema.validate(value)
        if problem:
            raise ValidationError(f"Override rejected: {problem}")
        self._overrides[key] = value

    def invalidate_cache(self, key: str | None = None) -> None:
        """Drop cached database values (all of them when key is None)."""
        if key is None:
            self._db_cache.clear()
        else:
            self._db_cache.pop(key, None)

    def health_check(self) -> dict[str, Any]:
        """Resolve every key and report which ones fail."""
        issues: list[str] = []
        for key in CONFIG_SCHEMA:
            try:
                self.get(key)
            except ConfigError as e:
                issues.append(str(e))

        return {
            "status": "unhealthy" if issues else "healthy",
            "database_configured": self._pb is not None,
            "validated": self._validated,
            "cached_keys": len(self._db_cache),
            "overrides": sorted(self._overrides),
            "issues": issues,
        }
