"""Tests for the hop-capped weighted path search."""

from __future__ import annotations

import logging
import random

import pytest

from tests.fixtures.builders import make_graph
from warmpath.graph import calculate_success_probability, find_weighted_path
from warmpath.models import Edge


class TestWeightedPath:
    """Route construction and success probabilities."""

    def test_single_hop_route(self):
        """A direct edge yields a 1-hop route at 85%."""
        store = make_graph(["A", "B"], [("A", "B", 0.3)])

        result = find_weighted_path(store, "A", "B")

        assert result.found
        route = result.route
        assert route is not None
        assert route.hop_count == 1
        assert route.node_ids == ["A", "B"]
        assert route.success_probability == 85
        assert route.total_weight == pytest.approx(0.3)

    def test_two_hop_route_via_mutual(self):
        """No direct edge: the route goes through the mutual at 65%."""
        store = make_graph(["A", "B", "C"], [("A", "C", 0.4), ("C", "B", 0.5)])

        route = find_weighted_path(store, "A", "B").route

        assert route is not None
        assert route.node_ids == ["A", "C", "B"]
        assert route.success_probability == 65
        assert route.total_weight == pytest.approx(0.9)
        assert [n.id for n in route.intermediaries] == ["C"]

    def test_three_hop_route(self):
        store = make_graph(["A", "B", "C", "D"], [("A", "C", 0.2), ("C", "D", 0.2), ("D", "B", 0.2)])

        route = find_weighted_path(store, "A", "B").route

        assert route is not None
        assert route.hop_count == 3
        assert route.success_probability == 45

    def test_prefers_lower_total_weight(self):
        store = make_graph(
            ["A", "B", "C", "D"],
            [("A", "C", 0.9), ("C", "B", 0.9), ("A", "D", 0.2), ("D", "B", 0.2)],
        )

        route = find_weighted_path(store, "A", "B").route

        assert route is not None
        assert route.node_ids == ["A", "D", "B"]

    def test_hop_cap_prunes_long_paths(self):
        store = make_graph(
            ["A", "B", "C", "D", "E"],
            [("A", "C", 0.1), ("C", "D", 0.1), ("D", "E", 0.1), ("E", "B", 0.1)],
        )

        result = find_weighted_path(store, "A", "B", max_hops=3)

        assert not result.found
        assert result.explored > 0

    def test_source_equals_target(self):
        store = make_graph(["A"])
        assert find_weighted_path(store, "A", "A").route is None

    def test_unknown_target(self):
        store = make_graph(["A"])
        result = find_weighted_path(store, "A", "B")
        assert result.route is None
        assert result.explored == 0

    def test_ties_resolve_in_discovery_order(self):
        """Equal-weight alternatives pick the neighbor inserted first."""
        store = make_graph(
            ["A", "B", "C", "D"],
            [("A", "C", 0.5), ("A", "D", 0.5), ("C", "B", 0.5), ("D", "B", 0.5)],
        )

        route = find_weighted_path(store, "A", "B").route

        assert route is not None
        assert route.node_ids == ["A", "C", "B"]


class TestSuccessProbability:
    def test_calibrated_table(self):
        edges = [Edge(from_id=str(i), to_id=str(i + 1), weight=0.5) for i in range(3)]
        assert calculate_success_probability(edges[:1]) == 85
        assert calculate_success_probability(edges[:2]) == 65
        assert calculate_success_probability(edges) == 45

    def test_long_paths_are_clamped_and_logged(self, caplog):
        edges = [Edge(from_id=str(i), to_id=str(i + 1), weight=0.1) for i in range(4)]

        with caplog.at_level(logging.WARNING, logger="warmpath.graph.dijkstra"):
            probability = calculate_success_probability(edges)

        assert 20 <= probability <= 30
        assert "Unexpected path length" in caplog.text

    def test_heavy_long_path_hits_floor(self):
        edges = [Edge(from_id=str(i), to_id=str(i + 1), weight=1.0) for i in range(5)]
        assert calculate_success_probability(edges) == 20


@pytest.mark.slow
class TestRandomGraphProperties:
    """Randomized graphs: every route respects the hop cap and is a real path."""

    @pytest.mark.parametrize("seed", range(25))
    def test_routes_respect_hop_cap(self, seed):
        rng = random.Random(seed)
        node_ids = [f"n{i}" for i in range(rng.randint(2, 15))]
        edges = []
        for _ in range(rng.randint(0, 40)):
            from_id, to_id = rng.sample(node_ids, 2)
            edges.append((from_id, to_id, round(rng.uniform(0.1, 1.0), 2)))
        store = make_graph(node_ids, edges)
        max_hops = rng.randint(1, 4)

        for target in node_ids[1:]:
            route = find_weighted_path(store, node_ids[0], target, max_hops=max_hops).route
            if route is None:
                continue
            assert route.hop_count <= max_hops
            assert route.node_ids[0] == node_ids[0]
            assert route.node_ids[-1] == target
            assert len(route.nodes) == route.hop_count + 1
            for edge, (u, v) in zip(route.edges, zip(route.node_ids, route.node_ids[1:]), strict=True):
                assert edge.pair == (u, v)
                assert store.get_edge(u, v) is not None
            assert route.total_weight == pytest.approx(sum(e.weight for e in route.edges))
