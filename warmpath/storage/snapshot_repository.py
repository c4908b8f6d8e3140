"""Persistence of the graph snapshot through a key-value store."""

from __future__ import annotations

import logging

from ..errors import SnapshotFormatError
from ..graph.graph_store import GraphStore
from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_KEY = "network_graph"


class GraphSnapshotRepository:
    """Loads a fresh GraphStore per call and saves stores back as {nodes, edges}."""

    def __init__(self, store: KeyValueStore, storage_key: str = DEFAULT_GRAPH_KEY):
        self.store = store
        self.storage_key = storage_key

    def load(self) -> GraphStore:
        """Independent GraphStore built from the persisted snapshot.

        A missing snapshot yields an empty graph.

        Raises:
            SnapshotFormatError: If the persisted payload is malformed
        """
        payload = self.store.get(self.storage_key)
        if payload is None:
            logger.debug(f"No graph snapshot under '{self.storage_key}', starting empty")
            return GraphStore()
        if not isinstance(payload, dict):
            raise SnapshotFormatError(f"Graph snapshot under '{self.storage_key}' is not an object")
        return GraphStore.from_snapshot(payload)

    def save(self, graph: GraphStore) -> None:
        self.store.set(self.storage_key, graph.export_dict())
        logger.debug(f"Saved graph snapshot: {graph.node_count} nodes, {graph.edge_count} edges")
