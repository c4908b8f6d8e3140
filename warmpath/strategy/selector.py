"""Strategy selection: weighted path first, graceful fallback after.

The selector always yields a ConnectionStrategy. The only exceptions it
raises are the two fail-fast errors (self target, empty graph) and the
internal invariant guard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import ConfigLoader
from ..errors import EmptyGraphError, InternalInvariantError, SelfTargetError
from ..graph.bfs import path_exists
from ..graph.dijkstra import find_weighted_path
from ..graph.graph_store import GraphStore
from ..models import ActorNode, Edge, Route
from ..scoring.edge_weights import EdgeWeightModel
from .acceptance_rates import cold_outreach_acceptance_rate, similarity_acceptance_rate
from .models import (
    CandidateStrategy,
    ConnectionStrategy,
    DirectPathStrategy,
    IntermediaryStrategy,
    MutualPathStrategy,
    SuggestedPerson,
)
from .next_steps import candidate_next_steps, intermediary_next_steps, path_next_steps

logger = logging.getLogger(__name__)


@dataclass
class RankedActor:
    """A known actor scored against the target"""

    node: ActorNode
    score: int
    connected_to_target: bool


@dataclass
class SelectorSettings:
    """Tunables for strategy selection, normally read from ConfigLoader"""

    max_hops: int = 3
    intermediary_min_score: int = 20
    low_confidence_score: int = 35
    min_snapshot_nodes: int = 1

    @classmethod
    def from_config(cls, config: ConfigLoader | None = None) -> SelectorSettings:
        config = config or ConfigLoader.get_instance()
        return cls(
            max_hops=config.get_int("pathfinding.max_hops"),
            intermediary_min_score=config.get_int("strategy.intermediary_min_score"),
            low_confidence_score=config.get_int("strategy.low_confidence_score"),
            min_snapshot_nodes=config.get_int("strategy.min_snapshot_nodes"),
        )


class StrategySelector:
    """Chooses how the source actor can reach the target actor."""

    def __init__(self, weight_model: EdgeWeightModel | None = None, settings: SelectorSettings | None = None):
        self.weight_model = weight_model or EdgeWeightModel()
        self.settings = settings or SelectorSettings.from_config()

    def select(self, source: ActorNode, target: ActorNode, store: GraphStore) -> ConnectionStrategy:
        """Build a strategy for reaching target from source.

        Both actors are upserted into the store, so callers holding a
        persisted snapshot should save the store afterwards.

        Raises:
            SelfTargetError: If source and target are the same actor
            EmptyGraphError: If the store held too few nodes to search
            InternalInvariantError: If no strategy could be produced
        """
        if source.id == target.id:
            raise SelfTargetError(source.id)

        snapshot_nodes = store.node_count
        self.ensure_actors(source, target, store)

        if snapshot_nodes < self.settings.min_snapshot_nodes:
            raise EmptyGraphError(snapshot_nodes, self.settings.min_snapshot_nodes)

        route = None
        if path_exists(store, source.id, target.id, max_hops=self.settings.max_hops):
            route = find_weighted_path(store, source.id, target.id, max_hops=self.settings.max_hops).route

        if route is not None:
            strategy: ConnectionStrategy | None = self._path_strategy(route)
        else:
            logger.info(f"No path to {target.id} within {self.settings.max_hops} hops, falling back to suggestions")
            strategy = self._fallback_strategy(source, target, store)

        if strategy is None:
            logger.error(f"Strategy selection produced no result for {source.id} -> {target.id}")
            raise InternalInvariantError(f"No strategy produced for {source.id} -> {target.id}")

        logger.info(
            f"Selected {strategy.type} strategy for {target.id} "
            f"(acceptance={strategy.estimated_acceptance_rate:.2f}, low_confidence={strategy.low_confidence})"
        )
        return strategy

    def ensure_actors(self, source: ActorNode, target: ActorNode, store: GraphStore) -> None:
        """Upsert source as self (degree 0), target with its match score cached,
        and the mutual connections listed on the target's profile."""
        existing_source = store.get_node(source.id)
        source_node = source.model_copy(
            update={"degree": 0, "status": existing_source.status if existing_source else source.status}
        )
        store.add_node(source_node)

        existing_target = store.get_node(target.id)
        update: dict[str, object] = {}
        if existing_target is not None:
            update["status"] = existing_target.status
            update["degree"] = existing_target.degree
        target_node = target.model_copy(update=update)
        store.add_node(target_node)

        self.add_mutual_connections(source_node, target_node, store)

        score = self.weight_model.match_score(
            source.profile, target.profile, mutual_count=self.mutual_count(source, target, store)
        )
        store.add_node(target_node.model_copy(update={"match_score": score}))

    def add_mutual_connections(self, source: ActorNode, target: ActorNode, store: GraphStore) -> int:
        """Link every mutual listed on the target's profile as source <-> mutual <-> target.

        Unknown mutuals become placeholder nodes at degree 1. Both directions
        of a pair share the weight computed from the first actor's side;
        pairs that already have an edge keep it.

        Returns:
            Number of edges inserted
        """
        added = 0
        for mutual_id in target.profile.mutual_connections:
            if mutual_id in (source.id, target.id):
                continue
            mutual = store.get_node(mutual_id)
            if mutual is None:
                mutual = ActorNode.placeholder(mutual_id)
                store.add_node(mutual)
                logger.debug(f"Added mutual connection {mutual_id} of {target.id}")

            for near, far in ((source, mutual), (mutual, target)):
                edge = self.weight_model.build_edge(near, far)
                added += store.add_edge(edge)
                added += store.add_edge(Edge(from_id=far.id, to_id=near.id, weight=edge.weight))

        if added:
            logger.info(
                f"Linked {len(target.profile.mutual_connections)} mutual connections of {target.id} ({added} edges)"
            )
        return added

    def mutual_count(self, source: ActorNode, target: ActorNode, store: GraphStore) -> int:
        """Mutuals between source and target, from the graph or the target's profile, whichever knows more."""
        in_graph = len(store.get_mutual_connections(source.id, target.id))
        return max(in_graph, len(target.profile.mutual_connections))

    def rank_actors(self, source: ActorNode, target: ActorNode, store: GraphStore) -> list[RankedActor]:
        """Every known actor except source and target, best match for the target first.

        Ties keep graph insertion order.
        """
        target_node = store.get_node(target.id) or target
        ranked: list[RankedActor] = []

        for node in store.get_all_nodes():
            if node.id in (source.id, target.id):
                continue
            mutuals = store.get_mutual_connections(node.id, target.id)
            score = self.weight_model.match_score(node.profile, target_node.profile, mutual_count=len(mutuals))
            connected = (
                store.are_adjacent(node.id, target.id)
                or len(mutuals) > 0
                or target.id in node.profile.mutual_connections
            )
            ranked.append(RankedActor(node=node, score=score, connected_to_target=connected))

        ranked.sort(key=lambda r: -r.score)
        return ranked

    def _path_strategy(self, route: Route) -> ConnectionStrategy:
        probability = route.success_probability / 100
        next_steps = path_next_steps(route)
        intermediary_names = [node.name for node in route.intermediaries]

        if route.hop_count == 1:
            return DirectPathStrategy(
                route=route,
                confidence=probability,
                estimated_acceptance_rate=probability,
                reasoning=f"You are directly connected to {route.nodes[-1].name}",
                next_steps=next_steps,
            )

        count = len(intermediary_names)
        return MutualPathStrategy(
            route=route,
            confidence=probability,
            estimated_acceptance_rate=probability,
            reasoning=(
                f"Found a {route.hop_count}-hop path via {count} "
                f"{'intermediary' if count == 1 else 'intermediaries'}: {', '.join(intermediary_names)}"
            ),
            next_steps=next_steps,
        )

    def _fallback_strategy(self, source: ActorNode, target: ActorNode, store: GraphStore) -> ConnectionStrategy:
        ranked = self.rank_actors(source, target, store)
        target_node = store.get_node(target.id) or target
        top = ranked[0] if ranked else None

        if top is not None and top.connected_to_target and top.score >= self.settings.intermediary_min_score:
            low_confidence = top.score <= self.settings.low_confidence_score
            reasoning = f"{top.node.name} is connected to {target_node.name} and matches their profile ({top.score}%)"
            if low_confidence:
                reasoning += " (limited similarity, consider building the relationship first)"
            return IntermediaryStrategy(
                intermediary=SuggestedPerson(node=top.node, score=top.score, reasoning=reasoning),
                confidence=top.score / 100,
                estimated_acceptance_rate=similarity_acceptance_rate(top.score / 100),
                low_confidence=low_confidence,
                reasoning=reasoning,
                next_steps=intermediary_next_steps(top.node, target_node),
            )

        breakdown = self.weight_model.breakdown(
            source.profile, target_node.profile, mutual_count=self.mutual_count(source, target_node, store)
        )
        score = target_node.match_score
        similarity = score / 100
        gateway = None
        if top is not None and top.score > 0:
            gateway = SuggestedPerson(
                node=top.node,
                score=top.score,
                reasoning=f"Closest known match to {target_node.name} in your graph ({top.score}%)",
            )

        reasoning = f"Limited profile overlap with {target_node.name} ({score}%)."
        if gateway is not None:
            reasoning += f" Consider an indirect approach via {gateway.node.name} or value-first engagement."
        else:
            reasoning += " Recommended approach: value-first outreach with strong personalization."

        return CandidateStrategy(
            candidate=SuggestedPerson(node=target_node, score=score, reasoning=reasoning),
            gateway=gateway,
            confidence=max(0.1, similarity),
            estimated_acceptance_rate=cold_outreach_acceptance_rate(similarity, has_gateway=gateway is not None),
            reasoning=reasoning,
            next_steps=candidate_next_steps(target_node, breakdown, gateway.node if gateway else None),
        )
