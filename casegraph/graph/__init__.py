"""Casegraph analytics engine.

Builds NetworkX graphs from case-graph snapshots and runs the analyses
behind the investigation canvas: shortest paths, centrality, Louvain
communities, and command-structure inference with a matching layout.

Usage::

    from casegraph.graph import analyze_hierarchy, calculate_hierarchy_layout

    result = analyze_hierarchy(nodes, edges, leader_count=2)
    positions = calculate_hierarchy_layout(result)
"""

from casegraph.graph.builder import AnalysisGraph, BuildStats, GraphBuilder, build_graph
from casegraph.graph.centrality import (
    CentralityResult,
    calculate_betweenness_centrality,
    calculate_degree_centrality,
)
from casegraph.graph.communities import detect_communities
from casegraph.graph.engine import (
    AnalysisEngine,
    AnalysisOutcome,
    AnalysisRequestError,
    CasegraphError,
)
from casegraph.graph.hierarchy import HierarchyNode, HierarchyResult, Role, analyze_hierarchy
from casegraph.graph.layout import LayoutOptions, Position, calculate_hierarchy_layout
from casegraph.graph.paths import find_shortest_path
from casegraph.graph.records import EdgeRecord, NodeRecord

__all__ = [
    "AnalysisEngine",
    "AnalysisGraph",
    "AnalysisOutcome",
    "AnalysisRequestError",
    "BuildStats",
    "CasegraphError",
    "CentralityResult",
    "EdgeRecord",
    "GraphBuilder",
    "HierarchyNode",
    "HierarchyResult",
    "LayoutOptions",
    "NodeRecord",
    "Position",
    "Role",
    "analyze_hierarchy",
    "build_graph",
    "calculate_betweenness_centrality",
    "calculate_degree_centrality",
    "calculate_hierarchy_layout",
    "detect_communities",
    "find_shortest_path",
]
