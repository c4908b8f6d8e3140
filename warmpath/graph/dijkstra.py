"""Weighted shortest path with a hard hop budget.

Dijkstra over edge weights (lower = stronger connection). A neighbor is only
relaxed when reaching it stays within max_hops, so the hop cap prunes the
search space instead of filtering finished paths. Equal distances are popped
in discovery order.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..logging_config import TRACE
from ..models import Edge, Route

if TYPE_CHECKING:
    from .graph_store import GraphStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_HOPS = 3

# Hop count -> success probability (0-100), calibrated against observed
# connection-request acceptance rates
HOP_SUCCESS_PROBABILITY = {
    1: 85,  # Direct connection
    2: 65,  # One mutual
    3: 45,  # Two mutuals
}

# Bounds for paths longer than the calibrated table
FALLBACK_PROBABILITY_MIN = 20.0
FALLBACK_PROBABILITY_MAX = 30.0


@dataclass
class PathSearchResult:
    """Outcome of a weighted path search; not finding a path is not an error"""

    route: Route | None = None
    explored: int = 0  # Nodes settled during the search

    @property
    def found(self) -> bool:
        return self.route is not None


def calculate_success_probability(edges: list[Edge]) -> float:
    """Success probability (0-100) for a path, indexed by hop count.

    Paths beyond the calibrated table cannot come out of a search capped at
    three hops; they get a weight-based estimate clamped to [20, 30].
    """
    hop_count = len(edges)
    if hop_count == 0:
        return 100.0

    if hop_count in HOP_SUCCESS_PROBABILITY:
        return float(HOP_SUCCESS_PROBABILITY[hop_count])

    # TODO: calibrate against tracked outcomes once max_hops above 3 is enabled anywhere
    logger.warning(f"Unexpected path length: {hop_count} hops (outside calibrated table)")
    avg_weight = sum(edge.weight for edge in edges) / hop_count
    weight_based = 100 - avg_weight * 80
    return max(FALLBACK_PROBABILITY_MIN, min(FALLBACK_PROBABILITY_MAX, weight_based))


def find_weighted_path(
    store: GraphStore,
    source_id: str,
    target_id: str,
    max_hops: int = DEFAULT_MAX_HOPS,
) -> PathSearchResult:
    """Find the lowest-weight route from source to target within max_hops.

    Args:
        store: Graph to search
        source_id: Starting actor id
        target_id: Destination actor id
        max_hops: Maximum number of edges in the route

    Returns:
        PathSearchResult whose route is None when no path exists within the cap
    """
    graph = store.graph
    if source_id == target_id or source_id not in graph or target_id not in graph:
        logger.debug(f"Weighted search skipped for {source_id} -> {target_id}")
        return PathSearchResult()

    distances: dict[str, float] = {source_id: 0.0}
    hop_counts: dict[str, int] = {source_id: 0}
    previous: dict[str, str] = {}
    visited: set[str] = set()

    counter = itertools.count()
    queue: list[tuple[float, int, str]] = [(0.0, next(counter), source_id)]

    while queue:
        distance, _, current = heapq.heappop(queue)

        if current in visited:
            continue
        visited.add(current)

        if current == target_id:
            break

        current_hops = hop_counts[current]
        if current_hops >= max_hops:
            continue

        for neighbor in graph.successors(current):
            if neighbor in visited:
                continue

            edge: Edge = graph.edges[current, neighbor]["edge"]
            new_distance = distance + edge.weight
            new_hops = current_hops + 1

            if new_hops <= max_hops and new_distance < distances.get(neighbor, math.inf):
                distances[neighbor] = new_distance
                hop_counts[neighbor] = new_hops
                previous[neighbor] = current
                heapq.heappush(queue, (new_distance, next(counter), neighbor))
                logger.log(TRACE, f"Relaxed {neighbor}: distance={new_distance:.3f} hops={new_hops}")

    if target_id not in previous:
        logger.debug(f"No path from {source_id} to {target_id} within {max_hops} hops")
        return PathSearchResult(explored=len(visited))

    path = [target_id]
    while path[-1] != source_id:
        path.append(previous[path[-1]])
    path.reverse()

    nodes = [graph.nodes[node_id]["actor"] for node_id in path]
    edges = [graph.edges[u, v]["edge"] for u, v in itertools.pairwise(path)]

    route = Route(
        target_id=target_id,
        nodes=nodes,
        edges=edges,
        total_weight=distances[target_id],
        success_probability=calculate_success_probability(edges),
    )
    logger.debug(
        f"Found {route.hop_count}-hop route {source_id} -> {target_id} "
        f"(weight={route.total_weight:.2f}, probability={route.success_probability:.0f})"
    )
    return PathSearchResult(route=route, explored=len(visited))
