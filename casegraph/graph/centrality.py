"""Degree and betweenness centrality.

Degree centrality answers "who is directly tied to the most entities";
betweenness answers "who sits on the routes between everyone else".
In covert networks the second is usually the more telling signal:
brokers, couriers and front companies score high even with few ties.

Both run on the undirected simple view of the graph. Results are ranked
by score, highest first; equal scores keep snapshot order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

import networkx as nx

from casegraph.graph.builder import AnalysisGraph, build_graph
from casegraph.graph.records import EdgeLike, NodeLike

logger = logging.getLogger(__name__)


@dataclass
class CentralityResult:
    """Score of one node under a centrality measure."""
    node_id: str
    score: float

    def to_dict(self) -> dict[str, Any]:
        return {"nodeId": self.node_id, "score": self.score}


def degree_scores(graph: AnalysisGraph) -> dict[str, float]:
    """Distinct neighbours divided by ``n - 1``, keyed in snapshot order."""
    if graph.node_count <= 1:
        # NetworkX scores a lone node 1.0; a lone node has no ties
        return {node_id: 0.0 for node_id in graph.node_ids()}
    return nx.degree_centrality(graph.undirected)


def betweenness_scores(graph: AnalysisGraph) -> dict[str, float]:
    """Brandes betweenness, normalised by ``2 / ((n-1)(n-2))``."""
    if graph.node_count <= 2:
        return {node_id: 0.0 for node_id in graph.node_ids()}
    return nx.betweenness_centrality(graph.undirected, normalized=True)


def rank_scores(scores: dict[str, float], top_n: int | None = None) -> list[CentralityResult]:
    """Sort a score mapping into results, highest first.

    The sort is stable, so ties keep the mapping's order.
    """
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    if top_n is not None:
        ranked = ranked[:top_n]
    return [CentralityResult(node_id=node_id, score=score) for node_id, score in ranked]


def calculate_degree_centrality(
    nodes: Iterable[NodeLike],
    edges: Iterable[EdgeLike],
    top_n: int | None = None,
) -> list[CentralityResult]:
    """Rank every node by degree centrality."""
    graph = build_graph(nodes, edges)
    results = rank_scores(degree_scores(graph), top_n)
    logger.debug("Degree centrality computed for %d nodes", graph.node_count)
    return results


def calculate_betweenness_centrality(
    nodes: Iterable[NodeLike],
    edges: Iterable[EdgeLike],
    top_n: int | None = None,
) -> list[CentralityResult]:
    """Rank every node by betweenness centrality.

    Quadratic-ish in practice (``O(V * E)``); fine for the low hundreds
    of nodes a case graph holds.
    """
    graph = build_graph(nodes, edges)
    results = rank_scores(betweenness_scores(graph), top_n)
    logger.debug("Betweenness centrality computed for %d nodes", graph.node_count)
    return results
