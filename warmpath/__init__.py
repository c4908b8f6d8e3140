"""Warm-introduction pathfinding over an accumulated acquaintance graph."""

from __future__ import annotations

from .errors import (
    EmptyGraphError,
    InternalInvariantError,
    InvalidCacheEntryError,
    SelfTargetError,
    SnapshotFormatError,
    UserDetectionError,
    WarmPathError,
)
from .graph import GraphStore, find_shortest_path, find_weighted_path
from .models import ActorNode, ActorProfile, ConnectionStatus, Edge, GraphSnapshot, Route
from .scoring import EdgeWeightModel
from .service import PathfindingOutcome, PathfindingService, PathfindingState, build_service
from .strategy import ConnectionStrategy, StrategyCache, StrategySelector

__version__ = "0.1.0"

__all__ = [
    "ActorNode",
    "ActorProfile",
    "ConnectionStatus",
    "ConnectionStrategy",
    "Edge",
    "EdgeWeightModel",
    "EmptyGraphError",
    "GraphSnapshot",
    "GraphStore",
    "InternalInvariantError",
    "InvalidCacheEntryError",
    "PathfindingOutcome",
    "PathfindingService",
    "PathfindingState",
    "Route",
    "SelfTargetError",
    "SnapshotFormatError",
    "StrategyCache",
    "StrategySelector",
    "UserDetectionError",
    "WarmPathError",
    "build_service",
    "find_shortest_path",
    "find_weighted_path",
]
