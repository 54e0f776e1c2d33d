"""Command-structure inference from connectivity alone.

Given only who is tied to whom, estimate who runs the network:

1. Score every node: ``0.7 * betweenness + 0.3 * degree``, each metric
   first divided by its maximum. Betweenness dominates because in covert
   networks control sits with brokers more than with the best connected.
2. Take the top scorers as leaders, capped by the requested count, by
   roughly 10% of the network and by the network size.
3. Level every node by hop distance to the nearest leader (one
   multi-source BFS). Unreachable nodes get level ``-1``.
4. Map levels to roles, link each node to a parent one level up and to
   its children one level down, then walk chains of command from every
   leader through its strongest subordinates.

Neighbour order is ascending by node id everywhere, which keeps the
inferred structure reproducible for a given snapshot.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable

import networkx as nx

from casegraph.config.settings import settings
from casegraph.graph.builder import AnalysisGraph, build_graph
from casegraph.graph.centrality import betweenness_scores, degree_scores
from casegraph.graph.records import EdgeLike, NodeLike

logger = logging.getLogger(__name__)

UNREACHABLE = -1


class Role(str, enum.Enum):
    LEADER = "leader"
    LIEUTENANT = "lieutenant"
    OPERATIVE = "operative"
    PERIPHERAL = "peripheral"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


def role_for_level(level: int) -> Role:
    """Level 0 leads, 1 is a lieutenant, 2 and 3 are operatives, the rest peripheral."""
    if level == 0:
        return Role.LEADER
    if level == 1:
        return Role.LIEUTENANT
    if level in (2, 3):
        return Role.OPERATIVE
    return Role.PERIPHERAL


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class HierarchyNode:
    """One node's place in the inferred command structure."""
    node_id: str
    label: str
    level: int
    role: Role
    leadership_score: float
    parent_id: str | None = None
    children_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodeId": self.node_id,
            "label": self.label,
            "level": self.level,
            "role": self.role.value,
            "leadershipScore": self.leadership_score,
            "parentId": self.parent_id,
            "childrenIds": list(self.children_ids),
        }


@dataclass
class HierarchyResult:
    nodes: list[HierarchyNode] = field(default_factory=list)
    levels: dict[int, list[str]] = field(default_factory=dict)
    leaders: list[str] = field(default_factory=list)
    chains: list[list[str]] = field(default_factory=list)

    def get(self, node_id: str) -> HierarchyNode | None:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def roles(self) -> dict[Role, list[str]]:
        """Node ids grouped by role, in result order."""
        grouped: dict[Role, list[str]] = {}
        for node in self.nodes:
            grouped.setdefault(node.role, []).append(node.node_id)
        return grouped

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "levels": {level: list(ids) for level, ids in self.levels.items()},
            "leaders": list(self.leaders),
            "chains": [list(chain) for chain in self.chains],
        }


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def _normalize(scores: dict[str, float], floor: float) -> dict[str, float]:
    peak = max(scores.values(), default=0.0) or floor
    return {node_id: value / peak for node_id, value in scores.items()}


def leadership_scores(
    graph: AnalysisGraph,
    betweenness_weight: float,
    degree_weight: float,
    floor: float,
) -> dict[str, float]:
    """Blend max-normalised betweenness and degree, keyed in snapshot order."""
    betweenness = _normalize(betweenness_scores(graph), floor)
    degree = _normalize(degree_scores(graph), floor)
    return {
        node_id: betweenness_weight * betweenness[node_id] + degree_weight * degree[node_id]
        for node_id in graph.node_ids()
    }


def leader_quota(total_nodes: int, leader_count: int, fraction: float) -> int:
    """``min(leader_count, ceil(total_nodes * fraction), total_nodes)``."""
    # round() keeps 30 * 0.1 from ceiling to 4
    share = math.ceil(round(total_nodes * fraction, 9))
    return max(0, min(leader_count, share, total_nodes))


def select_leaders(scores: dict[str, float], quota: int) -> list[str]:
    ranked = sorted(scores, key=lambda node_id: scores[node_id], reverse=True)
    return ranked[:quota]


def assign_levels(graph: AnalysisGraph, leaders: list[str]) -> dict[str, int]:
    """Hop distance from each node to its nearest leader, ``-1`` if none."""
    levels = {node_id: UNREACHABLE for node_id in graph.node_ids()}
    if not leaders:
        return levels

    distances = nx.multi_source_dijkstra_path_length(graph.undirected, set(leaders))
    for node_id, distance in distances.items():
        levels[node_id] = int(distance)
    for leader in leaders:
        levels[leader] = 0
    return levels


def build_chains(
    leaders: list[str],
    by_id: dict[str, HierarchyNode],
) -> list[list[str]]:
    """Walk from each leader to its strongest child, repeatedly.

    At every step the unvisited child with the highest leadership score
    is taken; equal scores fall back to the child order (ascending id).
    Leaders without subordinates contribute no chain.
    """
    chains: list[list[str]] = []
    for leader in leaders:
        chain = [leader]
        visited = {leader}
        current = by_id[leader]
        while True:
            candidates = [c for c in current.children_ids if c not in visited]
            if not candidates:
                break
            candidates.sort(key=lambda c: by_id[c].leadership_score, reverse=True)
            step = candidates[0]
            chain.append(step)
            visited.add(step)
            current = by_id[step]
        if len(chain) > 1:
            chains.append(chain)
    return chains


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def _check_overrides(
    leader_fraction: float,
    betweenness_weight: float,
    degree_weight: float,
    score_floor: float,
) -> None:
    """Apply the same bounds as ``Settings`` to per-call overrides."""
    for name, value in (
        ("leader_fraction", leader_fraction),
        ("betweenness_weight", betweenness_weight),
        ("degree_weight", degree_weight),
    ):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"{name} must be between 0 and 1 (got {value})")
    total = betweenness_weight + degree_weight
    if abs(total - 1.0) > 1e-9:
        raise ValueError(
            f"betweenness_weight + degree_weight must equal 1 (got {total:.3f})"
        )
    if score_floor <= 0:
        raise ValueError(f"score_floor must be positive (got {score_floor})")


def infer_hierarchy(
    graph: AnalysisGraph,
    leader_count: int | None = None,
    *,
    leader_fraction: float | None = None,
    betweenness_weight: float | None = None,
    degree_weight: float | None = None,
    score_floor: float | None = None,
) -> HierarchyResult:
    """Run the hierarchy analysis on an already built graph.

    Keyword overrides replace the matching settings for this call only and
    are held to the same bounds; a violation raises ``ValueError``.
    """
    if leader_count is None:
        leader_count = settings.DEFAULT_LEADER_COUNT
    if leader_fraction is None:
        leader_fraction = settings.LEADER_FRACTION
    if betweenness_weight is None:
        betweenness_weight = settings.BETWEENNESS_WEIGHT
    if degree_weight is None:
        degree_weight = settings.DEGREE_WEIGHT
    if score_floor is None:
        score_floor = settings.SCORE_FLOOR
    _check_overrides(leader_fraction, betweenness_weight, degree_weight, score_floor)

    if graph.node_count == 0:
        return HierarchyResult()

    scores = leadership_scores(graph, betweenness_weight, degree_weight, score_floor)
    quota = leader_quota(graph.node_count, leader_count, leader_fraction)
    leaders = select_leaders(scores, quota)
    levels = assign_levels(graph, leaders)
    leader_set = set(leaders)

    by_id: dict[str, HierarchyNode] = {}
    for node_id in graph.node_ids():
        level = levels[node_id]
        role = Role.LEADER if node_id in leader_set else role_for_level(level)
        neighbors = graph.neighbors(node_id)

        parent_id = None
        if node_id not in leader_set and level > 0:
            parent_id = next((n for n in neighbors if levels[n] == level - 1), None)

        children_ids: list[str] = []
        if level != UNREACHABLE:
            children_ids = [n for n in neighbors if levels[n] == level + 1]

        by_id[node_id] = HierarchyNode(
            node_id=node_id,
            label=graph.label(node_id),
            level=level,
            role=role,
            leadership_score=scores[node_id],
            parent_id=parent_id,
            children_ids=children_ids,
        )

    ordered = sorted(by_id.values(), key=lambda n: n.level)
    grouped: dict[int, list[str]] = {}
    for node in ordered:
        grouped.setdefault(node.level, []).append(node.node_id)

    chains = build_chains(leaders, by_id)

    logger.info(
        "Hierarchy inferred: %d nodes, %d leader(s), %d ranked level(s), "
        "%d unreachable, %d chain(s)",
        graph.node_count, len(leaders),
        len([lvl for lvl in grouped if lvl != UNREACHABLE]),
        len(grouped.get(UNREACHABLE, [])), len(chains),
    )

    return HierarchyResult(
        nodes=ordered,
        levels=grouped,
        leaders=leaders,
        chains=chains,
    )


def analyze_hierarchy(
    nodes: Iterable[NodeLike],
    edges: Iterable[EdgeLike],
    leader_count: int | None = None,
    **overrides: Any,
) -> HierarchyResult:
    """Infer leaders, levels, roles and chains of command for a snapshot.

    ``leader_count`` defaults to 3. It is capped, not validated: the
    result never holds more leaders than requested, than ~10% of the
    network, or than there are nodes.
    """
    return infer_hierarchy(build_graph(nodes, edges), leader_count, **overrides)
