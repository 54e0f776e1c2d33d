"""Louvain community detection.

Communities on a case graph tend to be cells, family groups or the
cluster of assets around one front company. Louvain greedily merges
nodes to maximise modularity; a fixed seed keeps the partition stable
between runs on the same snapshot.
"""

from __future__ import annotations

import logging
from typing import Iterable

import networkx as nx

from casegraph.config.settings import settings
from casegraph.graph.builder import AnalysisGraph, build_graph
from casegraph.graph.records import EdgeLike, NodeLike

logger = logging.getLogger(__name__)


def partition(
    graph: AnalysisGraph,
    seed: int | None = None,
    resolution: float | None = None,
) -> dict[str, list[str]]:
    """Partition a built graph into communities.

    Community ids are ``"0"``, ``"1"``, ... in order of each group's
    first member in snapshot order; members keep snapshot order too.
    Isolated nodes end up as singletons.
    """
    if graph.node_count == 0:
        return {}

    if seed is None:
        seed = settings.LOUVAIN_SEED
    if resolution is None:
        resolution = settings.LOUVAIN_RESOLUTION

    communities = nx.community.louvain_communities(
        graph.undirected, resolution=resolution, seed=seed,
    )

    membership: dict[str, int] = {}
    for index, members in enumerate(communities):
        for node_id in members:
            membership[node_id] = index

    # Renumber by first appearance so ids don't depend on set iteration
    renumbered: dict[int, str] = {}
    groups: dict[str, list[str]] = {}
    for node_id in graph.node_ids():
        raw = membership[node_id]
        if raw not in renumbered:
            renumbered[raw] = str(len(renumbered))
        groups.setdefault(renumbered[raw], []).append(node_id)

    logger.debug(
        "Louvain found %d communities across %d nodes",
        len(groups), graph.node_count,
    )
    return groups


def detect_communities(
    nodes: Iterable[NodeLike],
    edges: Iterable[EdgeLike],
    seed: int | None = None,
    resolution: float | None = None,
) -> dict[str, list[str]]:
    """Map community id → member node ids for a snapshot."""
    return partition(build_graph(nodes, edges), seed=seed, resolution=resolution)
