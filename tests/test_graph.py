"""Tests for casegraph.graph: builder, paths, centrality, communities.

Tests cover:
  - Snapshot → graph building (duplicates, dangling edges, diagnostics)
  - Shortest paths (correctness, absence, self-paths)
  - Degree and betweenness centrality (ranges, star graphs, tiny graphs)
  - Louvain community detection (partition completeness, determinism)

Uses small synthetic snapshots plus the bundled demo case:
  - chain A-B-C-D
  - two disconnected triangles
  - a star with one hub and several leaves
"""

import networkx as nx
import pytest

from casegraph.data.demo_network import get_demo_snapshot
from casegraph.graph.builder import GraphBuilder, build_graph
from casegraph.graph.centrality import (
    CentralityResult,
    calculate_betweenness_centrality,
    calculate_degree_centrality,
)
from casegraph.graph.communities import detect_communities
from casegraph.graph.hierarchy import analyze_hierarchy
from casegraph.graph.paths import find_shortest_path
from casegraph.graph.records import EdgeRecord, NodeRecord, coerce_edges, coerce_nodes


# ---------------------------------------------------------------------------
# Snapshot helpers
# ---------------------------------------------------------------------------

def _node(nid: str, label: str = "", ntype: str = "PERSON") -> dict:
    return {"id": nid, "label": label or nid.upper(), "type": ntype}


def _edge(eid: str, source: str, target: str, etype: str = "ASSOCIATE") -> dict:
    return {"id": eid, "sourceId": source, "targetId": target, "type": etype}


def _chain(*ids: str) -> tuple[list[dict], list[dict]]:
    nodes = [_node(i) for i in ids]
    edges = [_edge(f"e{k}", ids[k], ids[k + 1]) for k in range(len(ids) - 1)]
    return nodes, edges


@pytest.fixture
def chain_snapshot():
    return _chain("A", "B", "C", "D")


@pytest.fixture
def triangles_snapshot():
    nodes = [_node(i) for i in ("a1", "a2", "a3", "b1", "b2", "b3")]
    edges = [
        _edge("ea1", "a1", "a2"), _edge("ea2", "a2", "a3"), _edge("ea3", "a3", "a1"),
        _edge("eb1", "b1", "b2"), _edge("eb2", "b2", "b3"), _edge("eb3", "b3", "b1"),
    ]
    return nodes, edges


@pytest.fixture
def star_snapshot():
    leaves = [f"leaf-{i}" for i in range(5)]
    nodes = [_node("hub")] + [_node(leaf) for leaf in leaves]
    edges = [_edge(f"s{i}", "hub", leaf) for i, leaf in enumerate(leaves)]
    return nodes, edges


@pytest.fixture
def demo_snapshot():
    snapshot = get_demo_snapshot()
    return snapshot["nodes"], snapshot["edges"]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class TestRecords:
    def test_edge_from_camel_case(self):
        edge = EdgeRecord.from_dict(
            {"id": "e1", "sourceId": "a", "targetId": "b", "type": "OWNERSHIP", "label": "owns"}
        )
        assert edge == EdgeRecord("e1", "a", "b", "OWNERSHIP", "owns")

    def test_edge_from_snake_case(self):
        edge = EdgeRecord.from_dict({"id": "e1", "source_id": "a", "target_id": "b"})
        assert edge.source_id == "a"
        assert edge.target_id == "b"
        assert edge.label is None

    def test_node_ignores_extra_keys(self):
        node = NodeRecord.from_dict(
            {"id": "n1", "label": "Alice", "type": "PERSON", "positionX": 10, "metadata": {}}
        )
        assert node == NodeRecord("n1", "Alice", "PERSON")

    def test_coercion_skips_malformed(self):
        nodes, skipped_nodes = coerce_nodes([{"label": "no id"}, _node("a")])
        edges, skipped_edges = coerce_edges([{"id": "e1", "sourceId": "a"}])
        assert [n.id for n in nodes] == ["a"]
        assert skipped_nodes == 1
        assert edges == []
        assert skipped_edges == 1

    def test_records_pass_through(self):
        record = NodeRecord("x", "X")
        nodes, skipped = coerce_nodes([record])
        assert nodes == [record]
        assert skipped == 0

    def test_numeric_zero_id_kept(self):
        graph = build_graph(
            [{"id": 0}, {"id": 1}], [{"id": "e", "sourceId": 0, "targetId": 1}],
        )
        assert graph.node_count == 2
        assert graph.edge_count == 1
        assert graph.stats.dangling_edges == 0
        assert graph.neighbors("0") == ["1"]

    def test_empty_string_id_skipped(self):
        nodes, skipped = coerce_nodes([{"id": ""}, {"id": "a"}])
        assert [n.id for n in nodes] == ["a"]
        assert skipped == 1

    def test_record_ids_normalised_to_str(self):
        node = NodeRecord(1, "One")
        edge = EdgeRecord(7, 1, "b")
        assert node.id == "1"
        assert (edge.id, edge.source_id, edge.target_id) == ("7", "1", "b")

    def test_mixed_record_ids_analyse(self):
        nodes = [NodeRecord(1, "One"), NodeRecord(2, "Two"), _node("b"), _node("c")]
        edges = [EdgeRecord(1, 1, "b"), EdgeRecord(2, 2, "b"), _edge("e3", "b", "c")]
        result = analyze_hierarchy(nodes, edges, leader_count=1)
        assert result.leaders == ["b"]
        assert result.get("b").children_ids == ["1", "2", "c"]


# ---------------------------------------------------------------------------
# GraphBuilder tests
# ---------------------------------------------------------------------------


class TestGraphBuilder:
    def test_loads_nodes_and_edges(self, demo_snapshot):
        graph = build_graph(*demo_snapshot)
        assert graph.node_count == 10
        assert graph.edge_count == 12
        assert graph.stats.nodes_loaded == 10
        assert graph.stats.edges_loaded == 12
        assert graph.stats.dropped == 0

    def test_preserves_attributes(self, demo_snapshot):
        graph = build_graph(*demo_snapshot)
        assert graph.graph.nodes["boss"]["label"] == "Marco Valdivia"
        assert graph.graph.nodes["front-co"]["type"] == "ORGANIZATION"
        data = graph.graph.get_edge_data("boss", "front-co", key="e4")
        assert data["type"] == "OWNERSHIP"
        assert data["label"] == "Majority partner"

    def test_duplicate_node_first_wins(self):
        nodes = [_node("a", "First"), _node("a", "Second"), _node("b")]
        graph = build_graph(nodes, [])
        assert graph.node_count == 2
        assert graph.label("a") == "First"
        assert graph.stats.duplicate_nodes == 1

    def test_dangling_edge_dropped(self):
        nodes = [_node("a"), _node("b")]
        edges = [_edge("e1", "a", "b"), _edge("e2", "a", "ghost")]
        graph = build_graph(nodes, edges)
        assert graph.edge_count == 1
        assert "ghost" not in graph
        assert graph.stats.dangling_edges == 1

    def test_duplicate_edge_id_dropped(self):
        nodes = [_node("a"), _node("b"), _node("c")]
        edges = [_edge("e1", "a", "b"), _edge("e1", "b", "c")]
        graph = build_graph(nodes, edges)
        assert graph.edge_count == 1
        assert graph.neighbors("c") == []
        assert graph.stats.duplicate_edges == 1

    def test_neighbors_ignore_direction_and_sort(self):
        nodes = [_node("m"), _node("z"), _node("a"), _node("k")]
        edges = [_edge("e1", "m", "z"), _edge("e2", "a", "m"), _edge("e3", "k", "m")]
        graph = build_graph(nodes, edges)
        assert graph.neighbors("m") == ["a", "k", "z"]
        assert graph.neighbors("z") == ["m"]
        assert graph.neighbors("unknown") == []

    def test_parallel_edges_and_self_loops(self):
        nodes = [_node("a"), _node("b")]
        edges = [_edge("e1", "a", "b"), _edge("e2", "b", "a"), _edge("e3", "a", "a")]
        graph = build_graph(nodes, edges)
        assert graph.edge_count == 3
        assert graph.stats.self_loops == 1
        assert graph.undirected.number_of_edges() == 1
        assert graph.neighbors("a") == ["b"]

    def test_fresh_graph_each_call(self, chain_snapshot):
        first = build_graph(*chain_snapshot)
        second = build_graph(*chain_snapshot)
        assert first is not second
        assert first.graph is not second.graph

    def test_empty_snapshot(self):
        graph = build_graph([], [])
        assert graph.node_count == 0
        assert graph.edge_count == 0
        assert graph.summary()["connected_components"] == 0

    def test_summary(self, demo_snapshot):
        summary = build_graph(*demo_snapshot).summary()
        assert summary["node_count"] == 10
        assert summary["edge_count"] == 12
        assert summary["connected_components"] == 1
        assert summary["largest_component_size"] == 10
        assert summary["node_type_distribution"]["PERSON"] == 4
        assert summary["edge_type_distribution"]["OWNERSHIP"] == 3
        assert summary["build_stats"]["dangling_edges"] == 0

    def test_large_graph_warning(self, caplog):
        nodes, edges = _chain("a", "b", "c")
        with caplog.at_level("WARNING", logger="casegraph.graph.builder"):
            graph = GraphBuilder(large_graph_warning=2).build(nodes, edges)
        assert graph.node_count == 3
        assert "may be slow" in caplog.text


# ---------------------------------------------------------------------------
# Path finder tests
# ---------------------------------------------------------------------------


class TestShortestPath:
    def test_chain_path(self, chain_snapshot):
        assert find_shortest_path(*chain_snapshot, "A", "D") == ["A", "B", "C", "D"]

    def test_ignores_edge_direction(self, chain_snapshot):
        assert find_shortest_path(*chain_snapshot, "D", "A") == ["D", "C", "B", "A"]

    def test_demo_path_through_front_company(self, demo_snapshot):
        path = find_shortest_path(*demo_snapshot, "courier-1", "seizure")
        assert path == ["courier-1", "boss", "front-co", "truck", "seizure"]

    def test_paths_are_real_and_minimal(self, demo_snapshot):
        nodes, edges = demo_snapshot
        reference = nx.Graph()
        reference.add_edges_from((e["sourceId"], e["targetId"]) for e in edges)
        pairs = {frozenset((e["sourceId"], e["targetId"])) for e in edges}
        ids = [n["id"] for n in nodes]

        for source in ids:
            for target in ids:
                if source == target:
                    continue
                path = find_shortest_path(nodes, edges, source, target)
                assert path[0] == source
                assert path[-1] == target
                for u, v in zip(path, path[1:]):
                    assert frozenset((u, v)) in pairs
                assert len(path) - 1 == nx.shortest_path_length(reference, source, target)

    def test_no_path_between_components(self, triangles_snapshot):
        assert find_shortest_path(*triangles_snapshot, "a1", "b2") is None

    def test_missing_endpoint(self, chain_snapshot):
        assert find_shortest_path(*chain_snapshot, "A", "nope") is None
        assert find_shortest_path(*chain_snapshot, "nope", "A") is None

    def test_self_path(self, chain_snapshot):
        assert find_shortest_path(*chain_snapshot, "B", "B") == ["B"]
        assert find_shortest_path(*chain_snapshot, "nope", "nope") is None


# ---------------------------------------------------------------------------
# Centrality tests
# ---------------------------------------------------------------------------


class TestCentrality:
    def test_degree_chain(self, chain_snapshot):
        results = calculate_degree_centrality(*chain_snapshot)
        scores = {r.node_id: r.score for r in results}
        assert scores["B"] == pytest.approx(2 / 3)
        assert scores["C"] == pytest.approx(2 / 3)
        assert scores["A"] == pytest.approx(1 / 3)
        assert scores["B"] > scores["A"]
        assert scores["C"] > scores["D"]
        # Ties keep snapshot order
        assert [r.node_id for r in results] == ["B", "C", "A", "D"]

    def test_degree_range(self, demo_snapshot):
        results = calculate_degree_centrality(*demo_snapshot)
        assert len(results) == 10
        assert all(0.0 <= r.score <= 1.0 for r in results)

    def test_degree_hub_scores_one(self, star_snapshot):
        results = calculate_degree_centrality(*star_snapshot)
        assert results[0] == CentralityResult("hub", 1.0)

    def test_degree_parallel_edges_do_not_inflate(self):
        nodes = [_node("a"), _node("b")]
        edges = [_edge("e1", "a", "b"), _edge("e2", "b", "a"), _edge("e3", "a", "a")]
        scores = {r.node_id: r.score for r in calculate_degree_centrality(nodes, edges)}
        assert scores == {"a": 1.0, "b": 1.0}

    def test_betweenness_star(self, star_snapshot):
        results = calculate_betweenness_centrality(*star_snapshot)
        scores = {r.node_id: r.score for r in results}
        assert results[0].node_id == "hub"
        assert scores["hub"] == pytest.approx(1.0)
        for leaf in (f"leaf-{i}" for i in range(5)):
            assert scores[leaf] == 0.0
            assert scores["hub"] > scores[leaf]

    def test_betweenness_chain(self, chain_snapshot):
        scores = {r.node_id: r.score for r in calculate_betweenness_centrality(*chain_snapshot)}
        assert scores["B"] == pytest.approx(2 / 3)
        assert scores["A"] == 0.0

    def test_isolated_nodes_included(self):
        nodes = [_node("a"), _node("b"), _node("c"), _node("lonely")]
        edges = [_edge("e1", "a", "b"), _edge("e2", "b", "c")]
        degree = {r.node_id: r.score for r in calculate_degree_centrality(nodes, edges)}
        between = {r.node_id: r.score for r in calculate_betweenness_centrality(nodes, edges)}
        assert degree["lonely"] == 0.0
        assert between["lonely"] == 0.0

    def test_tiny_graphs(self):
        assert calculate_degree_centrality([], []) == []
        assert calculate_betweenness_centrality([], []) == []
        assert calculate_degree_centrality([_node("a")], []) == [CentralityResult("a", 0.0)]
        assert calculate_betweenness_centrality([_node("a")], []) == [CentralityResult("a", 0.0)]

    def test_top_n(self, demo_snapshot):
        results = calculate_degree_centrality(*demo_snapshot, top_n=3)
        assert len(results) == 3
        assert results[0].score >= results[1].score >= results[2].score

    def test_sorted_descending(self, demo_snapshot):
        results = calculate_betweenness_centrality(*demo_snapshot)
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_to_dict(self):
        assert CentralityResult("n1", 0.5).to_dict() == {"nodeId": "n1", "score": 0.5}


# ---------------------------------------------------------------------------
# Community detection tests
# ---------------------------------------------------------------------------


class TestCommunities:
    def test_two_triangles(self, triangles_snapshot):
        groups = detect_communities(*triangles_snapshot)
        assert len(groups) == 2
        assert sorted(sorted(members) for members in groups.values()) == [
            ["a1", "a2", "a3"],
            ["b1", "b2", "b3"],
        ]

    def test_ids_follow_snapshot_order(self, triangles_snapshot):
        groups = detect_communities(*triangles_snapshot)
        assert groups["0"] == ["a1", "a2", "a3"]
        assert groups["1"] == ["b1", "b2", "b3"]

    def test_partition_is_complete(self, demo_snapshot):
        nodes, edges = demo_snapshot
        groups = detect_communities(nodes, edges)
        members = [m for group in groups.values() for m in group]
        assert sorted(members) == sorted(n["id"] for n in nodes)
        assert len(members) == len(set(members))

    def test_isolated_nodes_are_singletons(self, triangles_snapshot):
        nodes, edges = triangles_snapshot
        nodes = nodes + [_node("x"), _node("y")]
        groups = detect_communities(nodes, edges)
        assert ["x"] in groups.values()
        assert ["y"] in groups.values()
        assert len(groups) == 4

    def test_deterministic(self, demo_snapshot):
        assert detect_communities(*demo_snapshot) == detect_communities(*demo_snapshot)

    def test_empty(self):
        assert detect_communities([], []) == {}
