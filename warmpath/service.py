"""Pathfinding request orchestration.

A request resolves the source and target actors, consults the strategy
cache, searches a freshly loaded graph snapshot and caches the result.
Each request carries a monotonic token; a result whose token has been
superseded by a newer request is discarded by `accept`.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pocketbase import PocketBase

from .config import ConfigLoader
from .logging_config import configure_logging, resolve_level
from .models import ActorNode
from .profiles import ScrapedProfileView, resolve_source_actor, resolve_target_actor
from .settings import Settings, get_settings
from .storage import GraphSnapshotRepository, InMemoryKeyValueStore, KeyValueStore, PocketBaseKeyValueStore
from .strategy.cache import StrategyCache
from .strategy.models import ConnectionStrategy
from .strategy.selector import SelectorSettings, StrategySelector

logger = logging.getLogger(__name__)


class PathfindingState(Enum):
    """Lifecycle of a single pathfinding request"""

    IDLE = "idle"
    RESOLVING_ACTORS = "resolving_actors"
    GRAPH_READY = "graph_ready"
    SEARCHING = "searching"
    STRATEGY_READY = "strategy_ready"
    FAILED = "failed"


@dataclass(frozen=True)
class RequestToken:
    """Identifies one request; higher ids are newer"""

    request_id: int
    target_id: str


class RequestTokenIssuer:
    """Issues monotonically increasing request tokens"""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last_id = 0

    def issue(self, target_id: str) -> RequestToken:
        with self._lock:
            self._last_id += 1
            return RequestToken(request_id=self._last_id, target_id=target_id)

    def is_current(self, token: RequestToken) -> bool:
        """True if no newer request has been issued since this token."""
        with self._lock:
            return token.request_id == self._last_id


@dataclass(frozen=True)
class PathfindingOutcome:
    token: RequestToken
    strategy: ConnectionStrategy
    state: PathfindingState
    from_cache: bool = False


@dataclass
class RequestRun:
    """State of one in-flight request, never shared between requests"""

    token: RequestToken
    state: PathfindingState = PathfindingState.IDLE


class PathfindingService:
    """Finds a connection strategy from the viewing user to a viewed profile.

    Concurrent requests each carry their own RequestRun; `state` mirrors
    only the most recently issued request.
    """

    def __init__(
        self,
        snapshots: GraphSnapshotRepository,
        cache: StrategyCache,
        selector: StrategySelector | None = None,
        tokens: RequestTokenIssuer | None = None,
    ):
        self.snapshots = snapshots
        self.cache = cache
        self.selector = selector or StrategySelector()
        self.tokens = tokens or RequestTokenIssuer()
        self._state_lock = threading.Lock()
        self._current_state = PathfindingState.IDLE

    @property
    def state(self) -> PathfindingState:
        """State of the latest request; superseded requests never change it."""
        with self._state_lock:
            return self._current_state

    def _transition(self, run: RequestRun, state: PathfindingState) -> None:
        logger.debug(f"Request {run.token.request_id}: {run.state.value} -> {state.value}")
        run.state = state
        with self._state_lock:
            if self.tokens.is_current(run.token):
                self._current_state = state

    def find_connection(
        self, source_record: dict[str, Any] | None, target_record: dict[str, Any] | None
    ) -> PathfindingOutcome:
        """Run one pathfinding request.

        Raises:
            UserDetectionError: If the viewing user cannot be resolved
            ValueError: If the viewed profile record is missing or has no id
            SelfTargetError: If the viewed profile is the user's own
            EmptyGraphError: If there is no accumulated graph to search
            InternalInvariantError: If no strategy could be produced
        """
        run = RequestRun(self.tokens.issue(ScrapedProfileView(target_record or {}).actor_id() or ""))
        self._transition(run, PathfindingState.RESOLVING_ACTORS)

        try:
            source = resolve_source_actor(source_record)
            target = resolve_target_actor(target_record)
            self._transition(run, PathfindingState.GRAPH_READY)

            if source.id != target.id:
                cached = self.cache.get(target.id)
                if cached is not None:
                    logger.info(f"Request {run.token.request_id}: using cached {cached.type} strategy for {target.id}")
                    self._transition(run, PathfindingState.STRATEGY_READY)
                    return PathfindingOutcome(run.token, cached, run.state, from_cache=True)

            strategy = self._search(source, target, run)
        except Exception as e:
            logger.warning(f"Request {run.token.request_id} failed: {e}")
            self._transition(run, PathfindingState.FAILED)
            raise

        self._transition(run, PathfindingState.STRATEGY_READY)
        return PathfindingOutcome(run.token, strategy, run.state)

    def _search(self, source: ActorNode, target: ActorNode, run: RequestRun) -> ConnectionStrategy:
        graph = self.snapshots.load()
        self._transition(run, PathfindingState.SEARCHING)

        strategy = self.selector.select(source, target, graph)
        self.snapshots.save(graph)
        self.cache.set(target.id, strategy)
        return strategy

    def accept(self, outcome: PathfindingOutcome) -> ConnectionStrategy | None:
        """The outcome's strategy, or None if a newer request has superseded it."""
        if not self.tokens.is_current(outcome.token):
            logger.debug(f"Discarding stale result for request {outcome.token.request_id}")
            return None
        return outcome.strategy


def create_pocketbase_client(settings: Settings) -> PocketBase:
    """Create and authenticate a PocketBase client."""
    pb = PocketBase(settings.pocketbase_url)
    if settings.pocketbase_admin_email:
        try:
            pb.collection("_superusers").auth_with_password(
                settings.pocketbase_admin_email, settings.pocketbase_admin_password
            )
        except Exception as e:
            # Reads fail later with a clearer error if auth was actually required
            logger.warning(f"Failed to authenticate with PocketBase: {e}")
    return pb


def build_service(settings: Settings | None = None, configure_logs: bool = False) -> PathfindingService:
    """Wire storage, config and selector from environment settings.

    Args:
        settings: Environment settings (loaded from WARMPATH_* variables when omitted)
        configure_logs: Also install the standard log handler at settings.log_level
    """
    settings = settings or get_settings()
    if configure_logs:
        configure_logging(source="warmpath", level=resolve_level(settings.log_level))

    store: KeyValueStore
    if settings.uses_pocketbase:
        pb = create_pocketbase_client(settings)
        store = PocketBaseKeyValueStore(pb, collection=settings.kv_collection)
        if settings.config_from_pocketbase:
            ConfigLoader.initialize(pb_client=pb)
        logger.info(f"Using PocketBase storage at {settings.pocketbase_url}")
    else:
        store = InMemoryKeyValueStore()
        logger.info("Using in-memory storage")

    config = ConfigLoader.get_instance()
    return PathfindingService(
        snapshots=GraphSnapshotRepository(store, storage_key=config.get_str("graph.storage_key")),
        cache=StrategyCache(store),
        selector=StrategySelector(settings=SelectorSettings.from_config(config)),
    )
