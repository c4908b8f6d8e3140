"""Unweighted shortest path via bidirectional breadth-first search.

A cheap reachability check run before the weighted search, and the backing for
quick path previews. No weights or probabilities are computed here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from .graph_store import GraphStore

logger = logging.getLogger(__name__)


def find_shortest_path(store: GraphStore, source_id: str, target_id: str) -> list[str] | None:
    """Shortest unweighted path of node ids, source and target inclusive.

    Returns:
        Ordered id list, or None when either node is unknown or no path exists
    """
    try:
        return list(nx.bidirectional_shortest_path(store.graph, source_id, target_id))
    except nx.NodeNotFound as e:
        logger.debug(f"Shortest path skipped: {e}")
        return None
    except nx.NetworkXNoPath:
        logger.debug(f"No unweighted path from {source_id} to {target_id}")
        return None


def path_exists(store: GraphStore, source_id: str, target_id: str, max_hops: int | None = None) -> bool:
    """Whether target is reachable from source, optionally within a hop budget."""
    path = find_shortest_path(store, source_id, target_id)
    if path is None:
        return False
    return max_hops is None or len(path) - 1 <= max_hops
