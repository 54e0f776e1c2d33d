"""Analysis engine: high-level dispatcher.

Single entry point for the presentation layer: pick an algorithm by
name, hand over the current snapshot, get back a result plus the node
ids the canvas should highlight.

Usage::

    engine = AnalysisEngine()

    outcome = engine.run("shortest-path", nodes, edges,
                         source_id="n1", target_id="n7")
    outcome.highlighted          # the path

    outcome = engine.run("hierarchy", nodes, edges, leader_count=2)
    outcome.result.chains
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from casegraph.config.settings import settings
from casegraph.graph.builder import AnalysisGraph, GraphBuilder
from casegraph.graph.centrality import (
    CentralityResult,
    betweenness_scores,
    degree_scores,
    rank_scores,
)
from casegraph.graph.communities import partition
from casegraph.graph.hierarchy import HierarchyResult, infer_hierarchy
from casegraph.graph.layout import LayoutOptions, calculate_hierarchy_layout, positions_to_dict
from casegraph.graph.paths import shortest_path
from casegraph.graph.records import EdgeLike, NodeLike

logger = logging.getLogger(__name__)

ALGORITHMS = (
    "shortest-path",
    "degree-centrality",
    "betweenness-centrality",
    "louvain-communities",
    "hierarchy",
)

MIN_LEADERS = 1
MAX_LEADERS = 10


class CasegraphError(Exception):
    """Base class for errors raised by casegraph."""


class AnalysisRequestError(CasegraphError):
    """Raised when an analysis request is malformed (not for data problems)."""


@dataclass
class AnalysisOutcome:
    """Result of one dispatched analysis."""

    algorithm: str
    result: Any
    highlighted: list[str] = field(default_factory=list)
    layout: dict[str, dict[str, float]] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: Any = self.result
        if isinstance(self.result, HierarchyResult):
            payload = self.result.to_dict()
        elif isinstance(self.result, list):
            payload = [
                r.to_dict() if isinstance(r, CentralityResult) else r
                for r in self.result
            ]

        data: dict[str, Any] = {
            "algorithm": self.algorithm,
            "result": payload,
            "highlighted": list(self.highlighted),
        }
        if self.layout is not None:
            data["layout"] = self.layout
        return data


class AnalysisEngine:
    """Validate analysis requests and dispatch them.

    Parameters
    ----------
    top_n:
        How many centrality results to keep. Default from settings (10).
    layout_options:
        Geometry used when a hierarchy layout is requested.
    """

    def __init__(
        self,
        top_n: int | None = None,
        layout_options: LayoutOptions | None = None,
    ) -> None:
        self._top_n = settings.CENTRALITY_TOP_N if top_n is None else top_n
        self._layout_options = layout_options or LayoutOptions()
        self._builder = GraphBuilder()

    def run(
        self,
        algorithm: str,
        nodes: Iterable[NodeLike],
        edges: Iterable[EdgeLike],
        *,
        source_id: str | None = None,
        target_id: str | None = None,
        leader_count: int | None = None,
        with_layout: bool = False,
    ) -> AnalysisOutcome:
        """Run ``algorithm`` over a snapshot.

        Raises
        ------
        AnalysisRequestError
            Unknown algorithm, missing or identical path endpoints,
            hierarchy on fewer than two nodes, or a leader count
            outside 1 to 10.
        """
        if algorithm not in ALGORITHMS:
            raise AnalysisRequestError(
                f"Unknown algorithm {algorithm!r}; expected one of {', '.join(ALGORITHMS)}"
            )

        if algorithm == "shortest-path":
            if not source_id or not target_id:
                raise AnalysisRequestError("Select both a source and a target node.")
            if source_id == target_id:
                raise AnalysisRequestError("Source and target must be different nodes.")

        if algorithm == "hierarchy" and leader_count is not None:
            if not MIN_LEADERS <= leader_count <= MAX_LEADERS:
                raise AnalysisRequestError(
                    f"Leader count must be between {MIN_LEADERS} and {MAX_LEADERS}."
                )

        graph = self._builder.build(nodes, edges)

        if algorithm == "hierarchy" and graph.node_count < 2:
            raise AnalysisRequestError("At least 2 nodes are needed to analyse hierarchy.")

        logger.info(
            "Running %s on %d nodes, %d edges",
            algorithm, graph.node_count, graph.edge_count,
        )
        return self._dispatch(algorithm, graph, source_id, target_id, leader_count, with_layout)

    def _dispatch(
        self,
        algorithm: str,
        graph: AnalysisGraph,
        source_id: str | None,
        target_id: str | None,
        leader_count: int | None,
        with_layout: bool,
    ) -> AnalysisOutcome:
        if algorithm == "shortest-path":
            path = shortest_path(graph, source_id, target_id)
            if path is None:
                logger.info("No path found between %s and %s", source_id, target_id)
            return AnalysisOutcome(algorithm, path, highlighted=path or [])

        if algorithm == "degree-centrality":
            return AnalysisOutcome(algorithm, rank_scores(degree_scores(graph), self._top_n))

        if algorithm == "betweenness-centrality":
            return AnalysisOutcome(algorithm, rank_scores(betweenness_scores(graph), self._top_n))

        if algorithm == "louvain-communities":
            return AnalysisOutcome(algorithm, partition(graph))

        result = infer_hierarchy(graph, leader_count)
        layout = None
        if with_layout:
            layout = positions_to_dict(
                calculate_hierarchy_layout(result, self._layout_options)
            )
        return AnalysisOutcome(algorithm, result, highlighted=list(result.leaders), layout=layout)
