"""In-memory context graph backed by networkx."""

from __future__ import annotations

import logging

import networkx as nx

from rationale.models import ContextEdge, ContextEdgeType, ContextNode, TrajectoryResult
from rationale.stores.base import ContextGraphStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10


def build_context_graph(nodes: list[ContextNode], edges: list[ContextEdge]) -> nx.MultiDiGraph:
    """Build a directed multigraph from context nodes and edges.

    Nodes are keyed by node id and carry the ContextNode under "node".
    Edges are keyed by edge id and carry the ContextEdge under "edge", so two
    nodes may be joined by several relationships of different types.
    """
    graph = nx.MultiDiGraph()

    for node in nodes:
        graph.add_node(node.id, node=node, type=node.type.value, timestamp=node.timestamp)

    for edge in edges:
        graph.add_edge(edge.source_id, edge.target_id, key=edge.id, edge=edge, type=edge.type.value)

    return graph


class InMemoryContextGraphStore(ContextGraphStore):
    """Context graph store holding the whole graph in one networkx graph."""

    def __init__(self, nodes: list[ContextNode] | None = None, edges: list[ContextEdge] | None = None):
        self.graph = build_context_graph(nodes or [], edges or [])

    def add_node(self, node: ContextNode) -> None:
        self.graph.add_node(node.id, node=node, type=node.type.value, timestamp=node.timestamp)

    def add_edge(self, edge: ContextEdge) -> None:
        self.graph.add_edge(edge.source_id, edge.target_id, key=edge.id, edge=edge, type=edge.type.value)

    def get_node(self, node_id: str) -> ContextNode | None:
        # Edges may reference nodes that were never added.
        if node_id not in self.graph:
            return None
        return self.graph.nodes[node_id].get("node")

    def _incoming_causes(self, node_id: str) -> list[ContextEdge]:
        return [
            data["edge"]
            for _, _, data in self.graph.in_edges(node_id, data=True)
            if data["edge"].type == ContextEdgeType.CAUSED
        ]

    async def get_trajectory(self, node_id: str, max_depth: int = DEFAULT_MAX_DEPTH) -> TrajectoryResult:
        """Walk incoming causal edges back from node_id, strongest edge first.

        Stops at a root, a missing node, a cycle, or after max_depth hops.
        Every returned edge joins two consecutive nodes of the path.
        """
        path: list[ContextNode] = []
        edges: list[ContextEdge] = []
        confidence = 1.0
        visited: set[str] = set()

        node = self.get_node(node_id)
        while node is not None:
            visited.add(node.id)
            path.insert(0, node)
            if len(path) > max_depth:
                break

            causes = self._incoming_causes(node.id)
            if not causes:
                break

            best = max(causes, key=lambda e: e.confidence)
            if best.source_id in visited:
                break
            node = self.get_node(best.source_id)
            if node is None:
                break
            edges.insert(0, best)
            confidence *= best.confidence

        logger.debug("Trajectory for %s: %d node(s)", node_id, len(path))
        return TrajectoryResult(path=path, edges=edges, confidence=confidence)
