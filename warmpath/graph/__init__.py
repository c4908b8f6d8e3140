"""Graph storage and path search"""

from __future__ import annotations

from .bfs import find_shortest_path, path_exists
from .dijkstra import PathSearchResult, calculate_success_probability, find_weighted_path
from .graph_store import GraphStore

__all__ = [
    "GraphStore",
    "PathSearchResult",
    "calculate_success_probability",
    "find_shortest_path",
    "find_weighted_path",
    "path_exists",
]
