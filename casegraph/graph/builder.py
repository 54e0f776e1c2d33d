"""Snapshot → NetworkX graph conversion.

Every analysis builds a fresh graph from the current snapshot; nothing
is cached between calls. Stored edges are directed, but the direction
on a case graph is mostly cosmetic, so the algorithms query a derived
simple undirected view.

Construction rules:
  - a node id becomes a vertex once; later duplicates are ignored
  - an edge is added only if both endpoints are vertices
  - an edge id is added once; later duplicates are ignored

Nothing here raises for bad data. Dropped records are counted in
:class:`BuildStats` so the calling layer can surface integrity problems.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

import networkx as nx

from casegraph.config.settings import settings
from casegraph.graph.records import EdgeLike, NodeLike, coerce_edges, coerce_nodes

logger = logging.getLogger(__name__)


@dataclass
class BuildStats:
    """Statistics from a graph build."""

    nodes_loaded: int = 0
    edges_loaded: int = 0
    duplicate_nodes: int = 0
    duplicate_edges: int = 0
    dangling_edges: int = 0
    self_loops: int = 0
    skipped_records: int = 0
    node_type_counts: dict[str, int] = field(default_factory=dict)
    edge_type_counts: dict[str, int] = field(default_factory=dict)

    @property
    def dropped(self) -> int:
        return (
            self.duplicate_nodes + self.duplicate_edges
            + self.dangling_edges + self.skipped_records
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "nodes_loaded": self.nodes_loaded,
            "edges_loaded": self.edges_loaded,
            "duplicate_nodes": self.duplicate_nodes,
            "duplicate_edges": self.duplicate_edges,
            "dangling_edges": self.dangling_edges,
            "self_loops": self.self_loops,
            "skipped_records": self.skipped_records,
        }


class AnalysisGraph:
    """Graph handle shared by every analysis.

    Parameters
    ----------
    graph:
        The stored-direction graph, one edge per edge record (keyed by
        edge id).
    stats:
        Diagnostics collected while building.
    """

    def __init__(self, graph: nx.MultiDiGraph, stats: BuildStats) -> None:
        self._graph = graph
        self._stats = stats
        # Simple undirected view: parallel edges collapse, self-loops go
        self._undirected = nx.Graph()
        self._undirected.add_nodes_from(graph.nodes(data=True))
        self._undirected.add_edges_from(
            (u, v) for u, v in graph.edges() if u != v
        )

    @property
    def graph(self) -> nx.MultiDiGraph:
        return self._graph

    @property
    def undirected(self) -> nx.Graph:
        return self._undirected

    @property
    def stats(self) -> BuildStats:
        return self._stats

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._graph

    def node_ids(self) -> list[str]:
        """Vertex ids in snapshot order."""
        return list(self._graph.nodes())

    def label(self, node_id: str) -> str:
        data = self._graph.nodes.get(node_id, {})
        return data.get("label") or node_id

    def neighbors(self, node_id: str) -> list[str]:
        """Distinct neighbours regardless of edge direction, ascending by id."""
        if node_id not in self._undirected:
            return []
        return sorted(self._undirected.neighbors(node_id))

    def summary(self) -> dict[str, Any]:
        """Return high-level graph statistics."""
        components = list(nx.connected_components(self._undirected))
        return {
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "density": nx.density(self._undirected) if self.node_count > 1 else 0.0,
            "connected_components": len(components),
            "largest_component_size": max((len(c) for c in components), default=0),
            "node_type_distribution": dict(self._stats.node_type_counts),
            "edge_type_distribution": dict(self._stats.edge_type_counts),
            "build_stats": self._stats.as_dict(),
        }


class GraphBuilder:
    """Convert node/edge snapshots into :class:`AnalysisGraph` handles.

    Parameters
    ----------
    large_graph_warning:
        Vertex count above which a warning is logged. The graph is still
        built in full; the warning only flags that betweenness and
        community detection will be slow.
    """

    def __init__(self, large_graph_warning: int | None = None) -> None:
        if large_graph_warning is None:
            large_graph_warning = settings.LARGE_GRAPH_WARNING
        self._large_graph_warning = large_graph_warning

    def build(
        self,
        nodes: Iterable[NodeLike],
        edges: Iterable[EdgeLike],
    ) -> AnalysisGraph:
        graph = nx.MultiDiGraph()
        stats = BuildStats()

        node_records, skipped_nodes = coerce_nodes(nodes)
        edge_records, skipped_edges = coerce_edges(edges)
        stats.skipped_records = skipped_nodes + skipped_edges

        # Pass 1: vertices
        for node in node_records:
            if node.id in graph:
                stats.duplicate_nodes += 1
                continue
            graph.add_node(node.id, label=node.label, type=node.type)
            stats.nodes_loaded += 1
            stats.node_type_counts[node.type] = stats.node_type_counts.get(node.type, 0) + 1

        # Pass 2: edges between known vertices
        seen_edges: set[str] = set()
        for edge in edge_records:
            if edge.source_id not in graph or edge.target_id not in graph:
                stats.dangling_edges += 1
                continue
            if edge.id in seen_edges:
                stats.duplicate_edges += 1
                continue
            seen_edges.add(edge.id)
            graph.add_edge(
                edge.source_id,
                edge.target_id,
                key=edge.id,
                type=edge.type,
                label=edge.label,
            )
            stats.edges_loaded += 1
            if edge.source_id == edge.target_id:
                stats.self_loops += 1
            stats.edge_type_counts[edge.type] = stats.edge_type_counts.get(edge.type, 0) + 1

        if stats.dropped:
            logger.debug(
                "Dropped %d record(s): %d duplicate node(s), %d duplicate edge(s), "
                "%d dangling edge(s), %d malformed",
                stats.dropped, stats.duplicate_nodes, stats.duplicate_edges,
                stats.dangling_edges, stats.skipped_records,
            )

        if stats.nodes_loaded > self._large_graph_warning:
            logger.warning(
                "Graph has %d nodes (advisory limit %d); betweenness and "
                "community detection may be slow.",
                stats.nodes_loaded, self._large_graph_warning,
            )

        return AnalysisGraph(graph, stats)


def build_graph(nodes: Iterable[NodeLike], edges: Iterable[EdgeLike]) -> AnalysisGraph:
    """Build a fresh :class:`AnalysisGraph` from a snapshot."""
    return GraphBuilder().build(nodes, edges)
