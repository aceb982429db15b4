"""
Cluster Metrics and Export Tests
================================

The ClusterLabel dict shape is an external contract; these tests pin it.
"""

import pytest

from analysis_space.clustering import (
    build_cluster, build_cluster_labels, cluster_center, clustering_stats,
    find_cluster_for_node, internal_graph
)
from analysis_space.contracts import ClusterLabel, NodeType, Point
from tests.fixtures import make_edge, make_node


def tagged_cluster():
    nodes = [
        make_node("a", 0, 0, tags=("ux", "pricing"), node_type=NodeType.QUESTIONS),
        make_node("b", 10, 0, tags=("ux",), node_type=NodeType.INSIGHTS),
        make_node("c", 20, 30, tags=("ux", "onboarding", "pricing"), node_type=NodeType.INSIGHTS),
    ]
    edges = [make_edge("a", "b", 0.8), make_edge("b", "c", 0.4)]
    return build_cluster(0, "Cluster 1", nodes, edges)


class TestMetrics:

    def test_center_is_mean_position(self):
        assert cluster_center([make_node("a", 0, 0), make_node("b", 10, 20)]) == Point(5, 10)

    def test_reverse_duplicates_and_self_loops_collapse(self):
        nodes = [make_node("a"), make_node("b")]
        edges = [make_edge("a", "b", 0.4), make_edge("b", "a", 0.6), make_edge("a", "a", 1.0)]
        graph = internal_graph(nodes, edges)
        assert graph.number_of_edges() == 1
        assert graph["a"]["b"]["strength"] == 0.6

    def test_single_node_cluster_has_zero_metrics(self):
        solo = build_cluster(0, "Cluster 1", [make_node("a")], [make_edge("a", "a", 1.0)])
        assert solo.density == 0.0
        assert solo.cohesion == 0.0

    def test_external_edges_ignored(self):
        built = build_cluster(
            0, "Cluster 1", [make_node("a"), make_node("b")],
            [make_edge("a", "b", 0.5), make_edge("a", "outside", 0.9)],
        )
        assert built.density == 1.0
        assert built.cohesion == 0.5

    def test_stats(self):
        big = tagged_cluster()
        small = build_cluster(1, "Cluster 2", [make_node("x"), make_node("y")], [])
        stats = clustering_stats([big, small])
        assert stats.total_clusters == 2
        assert stats.total_nodes == 5
        assert stats.avg_cluster_size == 2.5
        assert stats.size_distribution == ((2, 1), (3, 1))

    def test_empty_stats(self):
        assert clustering_stats([]).total_clusters == 0

    def test_find_cluster_for_node(self):
        built = tagged_cluster()
        assert find_cluster_for_node([built], "b") is built
        assert find_cluster_for_node([built], "zz") is None
        assert find_cluster_for_node([built], None) is None


class TestLabelExport:

    def test_label_fields(self):
        (label,) = build_cluster_labels([tagged_cluster()])
        assert label.id == "cluster-0"
        assert label.text == "Cluster 1"
        assert label.theme == "ux"
        assert label.card_ids == ("a", "b", "c")
        assert label.metadata.dominant_tags == ("ux", "pricing", "onboarding")
        assert label.metadata.dominant_types == ("INSIGHTS", "QUESTIONS")
        assert label.metadata.card_count == 3
        assert label.confidence == pytest.approx((2 / 3 + 0.6) / 2)

    def test_theme_falls_back_to_name(self):
        built = build_cluster(4, "Community 5", [make_node("a"), make_node("b")], [])
        (label,) = build_cluster_labels([built])
        assert label.theme == "Community 5"
        assert label.confidence == 0.0

    def test_dict_shape_is_stable(self):
        (label,) = build_cluster_labels([tagged_cluster()])
        exported = label.to_dict()
        assert set(exported) == {'id', 'text', 'position', 'theme', 'confidence', 'cardIds', 'metadata'}
        assert set(exported['metadata']) == {'dominantTags', 'dominantTypes', 'cardCount'}
        assert exported['position'] == {'x': 10.0, 'y': 10.0}
        assert exported['cardIds'] == ['a', 'b', 'c']

    def test_dict_round_trip(self):
        (label,) = build_cluster_labels([tagged_cluster()])
        assert ClusterLabel.from_dict(label.to_dict()) == label
