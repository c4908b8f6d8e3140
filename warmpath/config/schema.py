"""Configuration schema registry.

Defines all valid configuration keys with their types, defaults and
validation rules. This is the single source of truth for configuration
structure.
"""

from __future__ import annotations

from .types import ConfigKey, ConfigType

# =============================================================================
# CONFIGURATION SCHEMA REGISTRY
#
# All configuration keys must be defined here. Unknown keys will be rejected.
# =============================================================================

CONFIG_SCHEMA: dict[str, ConfigKey] = {
    # =========================================================================
    # PATHFINDING
    # =========================================================================
    "pathfinding.max_hops": ConfigKey(
        key="pathfinding.max_hops",
        config_type=ConfigType.INT,
        default=3,
        description="Maximum number of hops the weighted search may traverse",
        min_value=1,
        max_value=6,
    ),
    # =========================================================================
    # STRATEGY CACHE
    # =========================================================================
    "cache.ttl_hours": ConfigKey(
        key="cache.ttl_hours",
        config_type=ConfigType.FLOAT,
        default=24.0,
        description="Hours a cached connection strategy stays valid",
        min_value=0,
        max_value=24 * 30,
    ),
    "cache.storage_key": ConfigKey(
        key="cache.storage_key",
        config_type=ConfigType.STRING,
        default="connection_path_cache",
        description="Key-value storage key holding the strategy cache dictionary",
        validator=lambda v: bool(v.strip()),
    ),
    # =========================================================================
    # GRAPH SNAPSHOT
    # =========================================================================
    "graph.storage_key": ConfigKey(
        key="graph.storage_key",
        config_type=ConfigType.STRING,
        default="network_graph",
        description="Key-value storage key holding the serialized graph snapshot",
        validator=lambda v: bool(v.strip()),
    ),
    # =========================================================================
    # STRATEGY SELECTION
    # =========================================================================
    "strategy.intermediary_min_score": ConfigKey(
        key="strategy.intermediary_min_score",
        config_type=ConfigType.INT,
        default=20,
        description="Minimum match score (0-100) for a node to be suggested as intermediary",
        min_value=0,
        max_value=100,
    ),
    "strategy.low_confidence_score": ConfigKey(
        key="strategy.low_confidence_score",
        config_type=ConfigType.INT,
        default=35,
        description="Intermediary scores at or below this are flagged low confidence",
        min_value=0,
        max_value=100,
    ),
    "strategy.min_snapshot_nodes": ConfigKey(
        key="strategy.min_snapshot_nodes",
        config_type=ConfigType.INT,
        default=1,
        description="Minimum nodes the stored snapshot must hold before a search runs",
        min_value=0,
    ),
}


def get_schema_key(key: str) -> ConfigKey | None:
    """Get schema definition for a key, or None if unknown."""
    return CONFIG_SCHEMA.get(key)


def get_all_required_keys() -> list[str]:
    """Get all keys marked as required."""
    return [key for key, schema in CONFIG_SCHEMA.items() if schema.required]


def validate_key(key: str) -> bool:
    """Check whether a key is defined in the schema."""
    return key in CONFIG_SCHEMA
