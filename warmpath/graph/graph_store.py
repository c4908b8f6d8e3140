"""In-memory acquaintance graph backed by a NetworkX DiGraph.

Node attribute "actor" holds the ActorNode, edge attribute "edge" holds the
Edge. Nodes upsert (last write wins), edges are first-write-wins per ordered
pair. Import always replaces the whole graph.
"""

from __future__ import annotations

import logging
from typing import Any

import networkx as nx
from pydantic import ValidationError

from ..errors import SnapshotFormatError
from ..models import ActorNode, Edge, GraphSnapshot

logger = logging.getLogger(__name__)


class GraphStore:
    """Directed graph of actors and weighted edges."""

    def __init__(self) -> None:
        self.graph = nx.DiGraph()

    def add_node(self, node: ActorNode) -> None:
        """Insert a node, or replace every attribute of an existing one."""
        if node.id in self.graph:
            self.graph.nodes[node.id]["actor"] = node
        else:
            self.graph.add_node(node.id, actor=node)

    def add_edge(self, edge: Edge) -> bool:
        """Insert an edge unless the ordered pair already exists.

        Unknown endpoints become placeholder nodes so an edge never dangles.

        Returns:
            True if the edge was inserted, False if the pair was already present
        """
        if self.graph.has_edge(edge.from_id, edge.to_id):
            return False

        for endpoint in edge.pair:
            if endpoint not in self.graph:
                logger.debug(f"Edge endpoint {endpoint} unknown, adding placeholder node")
                self.graph.add_node(endpoint, actor=ActorNode.placeholder(endpoint))

        self.graph.add_edge(edge.from_id, edge.to_id, edge=edge)
        return True

    def remove_edge(self, from_id: str, to_id: str) -> bool:
        """Remove an edge if present. Returns whether anything was removed."""
        if not self.graph.has_edge(from_id, to_id):
            return False
        self.graph.remove_edge(from_id, to_id)
        return True

    def replace_edge(self, edge: Edge) -> None:
        """Refresh an edge's weight by removing any existing pair first."""
        self.remove_edge(edge.from_id, edge.to_id)
        self.add_edge(edge)

    def has_node(self, node_id: str) -> bool:
        return node_id in self.graph

    def get_node(self, node_id: str) -> ActorNode | None:
        if node_id not in self.graph:
            return None
        return self.graph.nodes[node_id]["actor"]

    def get_edge(self, from_id: str, to_id: str) -> Edge | None:
        if not self.graph.has_edge(from_id, to_id):
            return None
        return self.graph.edges[from_id, to_id]["edge"]

    def get_all_nodes(self) -> list[ActorNode]:
        return [data["actor"] for _, data in self.graph.nodes(data=True)]

    def get_all_edges(self) -> list[Edge]:
        return [data["edge"] for _, _, data in self.graph.edges(data=True)]

    def get_connections(self, node_id: str) -> list[ActorNode]:
        """Out-neighbors of a node; empty for unknown ids."""
        if node_id not in self.graph:
            return []
        return [self.graph.nodes[n]["actor"] for n in self.graph.successors(node_id)]

    def get_mutual_connections(self, id_a: str, id_b: str) -> list[ActorNode]:
        """Actors present in both out-neighbor sets.

        Symmetric under set semantics; ordered by insertion into the graph.
        """
        if id_a not in self.graph or id_b not in self.graph:
            return []
        shared = set(self.graph.successors(id_a)) & set(self.graph.successors(id_b))
        return [data["actor"] for node_id, data in self.graph.nodes(data=True) if node_id in shared]

    def are_adjacent(self, id_a: str, id_b: str) -> bool:
        """True if an edge exists between the two actors in either direction."""
        return self.graph.has_edge(id_a, id_b) or self.graph.has_edge(id_b, id_a)

    @property
    def node_count(self) -> int:
        return self.graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self.graph.number_of_edges()

    def get_stats(self) -> dict[str, Any]:
        """Graph statistics for diagnostics."""
        node_count = self.node_count
        stats: dict[str, Any] = {
            "node_count": node_count,
            "edge_count": self.edge_count,
            "density": nx.density(self.graph) if node_count > 0 else 0.0,
            "average_out_degree": 0.0,
        }
        if node_count > 0:
            stats["average_out_degree"] = self.edge_count / node_count
        return stats

    def export(self) -> GraphSnapshot:
        """Snapshot of the full node and edge set."""
        return GraphSnapshot(nodes=self.get_all_nodes(), edges=self.get_all_edges())

    def export_dict(self) -> dict[str, Any]:
        """JSON-safe snapshot in the persisted {nodes, edges} shape."""
        return self.export().model_dump(mode="json", by_alias=True)

    def import_snapshot(self, snapshot: GraphSnapshot | dict[str, Any]) -> None:
        """Replace the whole graph with a snapshot.

        Raises:
            SnapshotFormatError: If a dict payload does not validate
        """
        if not isinstance(snapshot, GraphSnapshot):
            try:
                snapshot = GraphSnapshot.model_validate(snapshot)
            except ValidationError as e:
                raise SnapshotFormatError(f"Invalid graph snapshot: {e}") from e

        self.graph.clear()

        for node in snapshot.nodes:
            self.add_node(node)
        for edge in snapshot.edges:
            self.add_edge(edge)

        logger.debug(f"Imported graph snapshot: {self.node_count} nodes, {self.edge_count} edges")

    @classmethod
    def from_snapshot(cls, snapshot: GraphSnapshot | dict[str, Any]) -> GraphStore:
        store = cls()
        store.import_snapshot(snapshot)
        return store

    def copy(self) -> GraphStore:
        """Independent store with copied nodes and edges."""
        return GraphStore.from_snapshot(self.export().model_copy(deep=True))
