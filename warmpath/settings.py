"""
Engine settings using pydantic-settings for type-safe configuration.

Environment-level concerns (which storage backend, where PocketBase lives,
log verbosity) are centralized here. Tunables of the search itself live in
warmpath.config.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings loaded from WARMPATH_* environment variables or a .env file.

    Defaults run the engine fully in memory.
    """

    model_config = SettingsConfigDict(
        env_prefix="WARMPATH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    storage_backend: str = Field(
        default="memory",
        description="Key-value backend for graph snapshots and the strategy cache: 'memory' or 'pocketbase'",
    )
    pocketbase_url: str = Field(
        default="http://127.0.0.1:8090",
        description="PocketBase server URL (pocketbase backend only)",
    )
    pocketbase_admin_email: str = Field(default="", description="PocketBase superuser email")
    pocketbase_admin_password: str = Field(default="", description="PocketBase superuser password")
    kv_collection: str = Field(
        default="kv_store",
        description="PocketBase collection holding key/value records",
    )
    config_from_pocketbase: bool = Field(
        default=False,
        description="Read search tunables from the PocketBase config collection",
    )
    log_level: str = Field(default="INFO", description="INFO, DEBUG or TRACE")

    @field_validator("storage_backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("memory", "pocketbase"):
            raise ValueError(f"Unknown storage backend '{v}', expected 'memory' or 'pocketbase'")
        return v

    @property
    def uses_pocketbase(self) -> bool:
        return self.storage_backend == "pocketbase"


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()
