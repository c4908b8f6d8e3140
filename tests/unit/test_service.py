"""Tests for pathfinding request orchestration."""

from __future__ import annotations

import logging
import threading
from unittest.mock import patch

import pytest

from tests.fixtures.builders import lean_record, make_graph, scraped_record
from warmpath.errors import EmptyGraphError, SelfTargetError, UserDetectionError
from warmpath.models import Edge
from warmpath.service import (
    PathfindingService,
    PathfindingState,
    RequestTokenIssuer,
    build_service,
)
from warmpath.settings import Settings
from warmpath.storage import GraphSnapshotRepository, InMemoryKeyValueStore, PocketBaseKeyValueStore
from warmpath.strategy import SelectorSettings, StrategyCache, StrategySelector

ME = "https://example.com/in/me"
BOB = "https://example.com/in/bob"
CAROL = "https://example.com/in/carol"


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def service(store):
    return PathfindingService(
        snapshots=GraphSnapshotRepository(store),
        cache=StrategyCache(store, ttl_hours=24, storage_key="connection_path_cache"),
        selector=StrategySelector(settings=SelectorSettings()),
    )


def _seed_graph(store, edges):
    graph = make_graph([ME, BOB, CAROL])
    for from_id, to_id in edges:
        graph.add_edge(Edge(from_id=from_id, to_id=to_id, weight=0.5))
    GraphSnapshotRepository(store).save(graph)


class TestRequestTokens:
    def test_tokens_increase(self):
        issuer = RequestTokenIssuer()
        first = issuer.issue("a")
        second = issuer.issue("b")

        assert second.request_id > first.request_id
        assert not issuer.is_current(first)
        assert issuer.is_current(second)


class TestFindConnection:
    def test_path_is_found_and_cached(self, service, store):
        _seed_graph(store, [(ME, CAROL), (CAROL, BOB)])

        outcome = service.find_connection(lean_record(ME), scraped_record(BOB, "Bob"))

        assert outcome.state is PathfindingState.STRATEGY_READY
        assert outcome.strategy.type == "mutual-path"
        assert not outcome.from_cache
        assert BOB in store.get("connection_path_cache")

    def test_second_request_hits_cache(self, service, store):
        _seed_graph(store, [(ME, BOB)])
        service.find_connection(lean_record(ME), scraped_record(BOB, "Bob"))

        with patch.object(service.snapshots, "load") as load:
            outcome = service.find_connection(lean_record(ME), scraped_record(BOB, "Bob"))

        assert outcome.from_cache
        assert outcome.strategy.type == "direct-path"
        load.assert_not_called()

    def test_snapshot_is_saved_with_upserted_actors(self, service, store):
        _seed_graph(store, [])

        service.find_connection(lean_record(ME), scraped_record("https://example.com/in/dana", "Dana"))

        saved = GraphSnapshotRepository(store).load()
        assert saved.get_node("https://example.com/in/dana") is not None
        source = saved.get_node(ME)
        assert source is not None
        assert source.degree == 0

    def test_failure_moves_to_failed_state(self, service, store):
        _seed_graph(store, [])

        with pytest.raises(SelfTargetError):
            service.find_connection(lean_record(ME), scraped_record(ME, "Me"))

        assert service.state is PathfindingState.FAILED

    def test_empty_graph_propagates(self, service):
        with pytest.raises(EmptyGraphError):
            service.find_connection(lean_record(ME), scraped_record(BOB, "Bob"))
        assert service.state is PathfindingState.FAILED

    def test_missing_user_propagates(self, service):
        with pytest.raises(UserDetectionError):
            service.find_connection(None, scraped_record(BOB, "Bob"))

    def test_missing_target_record_fails_cleanly(self, service):
        with pytest.raises(ValueError):
            service.find_connection(lean_record(ME), None)
        assert service.state is PathfindingState.FAILED

    def test_listed_mutual_links_source_to_target(self, service, store):
        _seed_graph(store, [])

        target = scraped_record(BOB, "Bob", mutualConnections=[{"profileUrl": CAROL}])

        outcome = service.find_connection(lean_record(ME), target)

        assert outcome.strategy.type == "mutual-path"
        assert outcome.strategy.route.node_ids == [ME, CAROL, BOB]
        saved = GraphSnapshotRepository(store).load()
        assert saved.get_edge(CAROL, BOB) is not None

    def test_stale_outcome_is_discarded(self, service, store):
        """A result superseded by a newer request is never surfaced."""
        _seed_graph(store, [(ME, BOB), (ME, CAROL)])

        stale = service.find_connection(lean_record(ME), scraped_record(BOB, "Bob"))
        latest = service.find_connection(lean_record(ME), scraped_record(CAROL, "Carol"))

        assert service.accept(stale) is None
        accepted = service.accept(latest)
        assert accepted is not None
        assert accepted.route is not None
        assert accepted.route.target_id == CAROL


class TestBuildService:
    def test_memory_backend(self):
        service = build_service(Settings(storage_backend="memory"))
        assert isinstance(service.snapshots.store, InMemoryKeyValueStore)
        assert service.snapshots.storage_key == "network_graph"

    def test_pocketbase_backend(self, mock_pocketbase):
        settings = Settings(
            storage_backend="pocketbase",
            pocketbase_url="http://pb.test:8090",
            pocketbase_admin_email="admin@example.com",
            pocketbase_admin_password="secret",
        )

        with patch("warmpath.service.PocketBase", return_value=mock_pocketbase) as pb_class:
            service = build_service(settings)

        pb_class.assert_called_once_with("http://pb.test:8090")
        mock_pocketbase.collection.return_value.auth_with_password.assert_called_once_with(
            "admin@example.com", "secret"
        )
        assert isinstance(service.snapshots.store, PocketBaseKeyValueStore)

    def test_configure_logs_uses_settings_level(self):
        with patch("warmpath.service.configure_logging") as configure:
            build_service(Settings(storage_backend="memory", log_level="debug"), configure_logs=True)

        configure.assert_called_once_with(source="warmpath", level=logging.DEBUG)


class TestConcurrentRequests:
    def test_each_outcome_keeps_its_own_state(self, service, store):
        """A request finishing while a newer one searches reports its own state."""
        _seed_graph(store, [(ME, BOB), (ME, CAROL)])
        bob_searching = threading.Event()
        carol_searching = threading.Event()
        bob_finished = threading.Event()
        select = service.selector.select

        def gated_select(source, target, graph):
            if target.id == BOB:
                bob_searching.set()
                carol_searching.wait(5)
            else:
                carol_searching.set()
                bob_finished.wait(5)
            return select(source, target, graph)

        outcomes = {}

        def request(url, name):
            outcomes[url] = service.find_connection(lean_record(ME), scraped_record(url, name))

        with patch.object(service.selector, "select", side_effect=gated_select):
            bob = threading.Thread(target=request, args=(BOB, "Bob"))
            bob.start()
            assert bob_searching.wait(5)
            carol = threading.Thread(target=request, args=(CAROL, "Carol"))
            carol.start()
            bob.join(5)

            assert outcomes[BOB].state is PathfindingState.STRATEGY_READY
            assert service.state is PathfindingState.SEARCHING

            bob_finished.set()
            carol.join(5)

        assert outcomes[CAROL].state is PathfindingState.STRATEGY_READY
        assert service.state is PathfindingState.STRATEGY_READY
        assert service.accept(outcomes[BOB]) is None
        assert service.accept(outcomes[CAROL]) is not None
