"""Unweighted shortest path between two entities.

Used when an investigator suspects two entities are connected and wants
the shortest chain of intermediaries. Every edge counts as one hop in
either direction.
"""

from __future__ import annotations

import logging
from typing import Iterable

import networkx as nx

from casegraph.graph.builder import AnalysisGraph, build_graph
from casegraph.graph.records import EdgeLike, NodeLike

logger = logging.getLogger(__name__)


def shortest_path(graph: AnalysisGraph, source_id: str, target_id: str) -> list[str] | None:
    """Shortest path on an already built graph, or ``None``.

    A request from a node to itself yields ``[node]``.
    """
    if source_id not in graph or target_id not in graph:
        return None
    if source_id == target_id:
        return [source_id]

    try:
        return nx.bidirectional_shortest_path(graph.undirected, source_id, target_id)
    except (nx.NetworkXNoPath, nx.NodeNotFound):
        logger.debug("No path between %s and %s", source_id, target_id)
        return None


def find_shortest_path(
    nodes: Iterable[NodeLike],
    edges: Iterable[EdgeLike],
    source_id: str,
    target_id: str,
) -> list[str] | None:
    """Return node ids from source to target inclusive, or ``None``.

    ``None`` means either endpoint is missing from the snapshot or the
    two lie in different components. Neither case is an error.
    """
    return shortest_path(build_graph(nodes, edges), source_id, target_id)
