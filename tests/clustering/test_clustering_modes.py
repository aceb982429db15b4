"""
Clustering Mode Tests
=====================

Tests for the three clustering modes and the engine wrapped around them.

INVARIANTS VERIFIED:
====================
1. Every node appears in at most one cluster
2. density in [0, 1], cohesion >= 0
3. Density mode depends on input order, and only on it
4. k-means is reproducible for a seeded Generator
5. Weak edges are removed before clustering when weight filtering is on
"""

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st

from analysis_space.clustering import (
    ClusteringEngine, choose_k, cluster, community_clusters, density_clusters,
    kmeans_clusters
)
from analysis_space.config import ClusteringSettings
from analysis_space.contracts import ClusteringAlgorithm, ClusteringConfig, FilterConfig, NodeType
from tests.fixtures import make_data, make_edge, make_node, scattered, triangle

ALGORITHMS = list(ClusteringAlgorithm)


@st.composite
def networks(draw):
    count = draw(st.integers(min_value=0, max_value=25))
    coords = st.floats(min_value=0, max_value=500, allow_nan=False)
    nodes = [make_node(f"n{i}", draw(coords), draw(coords)) for i in range(count)]
    edges = []
    if count:
        pairs = draw(st.lists(
            st.tuples(st.integers(0, count - 1), st.integers(0, count - 1),
                      st.floats(min_value=0, max_value=1)),
            max_size=40,
        ))
        seen = set()
        for s, t, strength in pairs:
            if (s, t) in seen:
                continue
            seen.add((s, t))
            edges.append(make_edge(f"n{s}", f"n{t}", strength))
    return make_data(nodes, edges)


class TestScenarios:

    def test_strong_triangle_forms_one_community(self):
        data = triangle(0.9)
        config = ClusteringConfig(
            algorithm=ClusteringAlgorithm.COMMUNITY, cluster_threshold=0.5, min_cluster_size=2
        )
        clusters = cluster(data.nodes, data.edges, config)
        assert len(clusters) == 1
        assert clusters[0].size == 3
        assert clusters[0].density == 1.0
        assert clusters[0].cohesion == pytest.approx(0.9)
        assert clusters[0].name == "Community 1"

    @pytest.mark.parametrize("algorithm", [ClusteringAlgorithm.HDBSCAN, ClusteringAlgorithm.COMMUNITY])
    def test_scattered_nodes_form_no_cluster(self, algorithm):
        data = scattered(5)
        config = ClusteringConfig(algorithm=algorithm, min_cluster_size=3)
        assert cluster(data.nodes, data.edges, config) == ()

    def test_scattered_nodes_kmeans_at_most_two(self):
        data = scattered(5)
        config = ClusteringConfig(algorithm=ClusteringAlgorithm.KMEANS, min_cluster_size=3)
        clusters = cluster(data.nodes, data.edges, config, rng=np.random.default_rng(0))
        assert 1 <= len(clusters) <= 2
        assert sum(c.size for c in clusters) == 5

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_empty_network(self, algorithm):
        assert cluster((), (), ClusteringConfig(algorithm=algorithm)) == ()


class TestInvariants:

    @settings(max_examples=60, deadline=None)
    @given(networks(), st.sampled_from(ALGORITHMS), st.integers(1, 4), st.floats(0, 1))
    def test_nodes_belong_to_at_most_one_cluster(self, data, algorithm, min_size, threshold):
        config = ClusteringConfig(
            algorithm=algorithm, min_cluster_size=min_size, cluster_threshold=threshold
        )
        clusters = cluster(data.nodes, data.edges, config, rng=np.random.default_rng(7))
        members = [node_id for c in clusters for node_id in c.node_ids]
        assert len(members) == len(set(members))
        assert set(members) <= set(data.node_ids)
        assert sum(c.size for c in clusters) <= len(data.nodes)

    @settings(max_examples=60, deadline=None)
    @given(networks(), st.sampled_from(ALGORITHMS))
    def test_metric_bounds(self, data, algorithm):
        config = ClusteringConfig(algorithm=algorithm, min_cluster_size=1, cluster_threshold=0.3)
        for c in cluster(data.nodes, data.edges, config, rng=np.random.default_rng(1)):
            assert 0.0 <= c.density <= 1.0
            assert 0.0 <= c.cohesion <= 1.0
            assert c.size == len(c.nodes)

    def test_ids_names_and_colors(self):
        data = make_data([make_node(f"n{i}", i * 300, 0) for i in range(12)])
        clusters = density_clusters(data.nodes, data.edges, 1, 0.5)
        assert [c.id for c in clusters[:2]] == ["cluster-0", "cluster-1"]
        assert clusters[0].name == "Cluster 1"
        assert clusters[0].color == clusters[10].color == "#3b82f6"


class TestDensityMode:

    def test_radius_is_strict(self):
        nodes = [make_node("a", 0, 0), make_node("b", 50, 0), make_node("c", 49.9, 0)]
        clusters = density_clusters(nodes, (), min_cluster_size=1, cluster_threshold=0.5)
        assert clusters[0].node_ids == ("a", "c")

    def test_seed_order_changes_result(self):
        a, b, c = make_node("a", 0, 0), make_node("b", 40, 0), make_node("c", 80, 0)
        forward = density_clusters([a, b, c], (), min_cluster_size=2, cluster_threshold=0.5)
        middle_first = density_clusters([b, a, c], (), min_cluster_size=2, cluster_threshold=0.5)
        assert [cl.node_ids for cl in forward] == [("a", "b")]
        assert [cl.node_ids for cl in middle_first] == [("b", "a", "c")]

    def test_small_neighbourhood_still_consumes_nodes(self):
        # a gathers b and is dropped; c could otherwise have gathered b and d
        nodes = [
            make_node("a", 0, 0), make_node("b", 40, 0),
            make_node("c", 80, 0), make_node("d", 120, 0),
        ]
        clusters = density_clusters(nodes, (), min_cluster_size=3, cluster_threshold=0.5)
        assert clusters == ()

    def test_same_order_same_result(self):
        data = scattered(6, spacing=30)
        config = ClusteringConfig(min_cluster_size=2)
        assert cluster(data.nodes, (), config) == cluster(data.nodes, (), config)


class TestKMeans:

    def test_k_selection(self):
        assert choose_k(5) == 2
        assert choose_k(25) == 2
        assert choose_k(30) == 3
        assert choose_k(101) == 10

    def test_seeded_runs_are_identical(self):
        data = make_data([make_node(f"n{i}", (i * 37) % 400, (i * 91) % 400) for i in range(40)])
        first = kmeans_clusters(data.nodes, data.edges, rng=np.random.default_rng(11))
        second = kmeans_clusters(data.nodes, data.edges, rng=np.random.default_rng(11))
        assert [c.node_ids for c in first] == [c.node_ids for c in second]

    def test_every_node_assigned(self):
        data = make_data([make_node(f"n{i}", i * 10, 0) for i in range(23)])
        clusters = kmeans_clusters(data.nodes, data.edges, rng=np.random.default_rng(5))
        assert sum(c.size for c in clusters) == 23

    def test_fewer_nodes_than_k(self):
        clusters = kmeans_clusters([make_node("solo", 3, 4)], (), rng=np.random.default_rng(0))
        assert len(clusters) == 1
        assert clusters[0].id == "cluster-0"

    def test_two_obvious_groups(self):
        left = [make_node(f"l{i}", i, 0) for i in range(5)]
        right = [make_node(f"r{i}", 1000 + i, 0) for i in range(5)]
        clusters = kmeans_clusters(left + right, (), rng=np.random.default_rng(2))
        groups = sorted(sorted(c.node_ids) for c in clusters)
        if len(groups) == 2:
            assert groups == [sorted(n.id for n in left), sorted(n.id for n in right)]


class TestCommunityMode:

    def test_threshold_is_strict(self):
        data = triangle(0.5)
        assert community_clusters(data.nodes, data.edges, 2, 0.5) == ()

    def test_unknown_endpoints_ignored(self):
        nodes = [make_node("a"), make_node("b")]
        edges = [make_edge("a", "b", 0.9), make_edge("a", "ghost", 0.9)]
        clusters = community_clusters(nodes, edges, 2, 0.5)
        assert [c.node_ids for c in clusters] == [("a", "b")]

    def test_fresh_union_find_per_run(self):
        data = triangle(0.9)
        first = community_clusters(data.nodes, data.edges, 2, 0.5)
        second = community_clusters(data.nodes, (), 2, 0.5)
        assert len(first) == 1
        assert second == ()

    def test_clusters_ordered_by_first_member(self):
        nodes = [make_node(n) for n in ("x", "a", "y", "b")]
        edges = [make_edge("a", "b", 0.9), make_edge("x", "y", 0.6)]
        clusters = community_clusters(nodes, edges, 2, 0.5)
        assert [c.node_ids for c in clusters] == [("x", "y"), ("a", "b")]


class TestWeightFiltering:

    def test_weak_edges_removed_before_clustering(self):
        data = triangle(0.2)
        config = ClusteringConfig(
            algorithm=ClusteringAlgorithm.COMMUNITY, cluster_threshold=0.1,
            min_cluster_size=2, strength_threshold=0.3,
        )
        assert cluster(data.nodes, data.edges, config) == ()
        unfiltered = ClusteringConfig(
            algorithm=ClusteringAlgorithm.COMMUNITY, cluster_threshold=0.1,
            min_cluster_size=2, use_weight_filtering=False,
        )
        assert len(cluster(data.nodes, data.edges, unfiltered)) == 1

    def test_metrics_use_filtered_edges(self):
        nodes = [make_node("a", 0, 0), make_node("b", 10, 0), make_node("c", 20, 0)]
        edges = [make_edge("a", "b", 0.9), make_edge("b", "c", 0.1)]
        config = ClusteringConfig(min_cluster_size=3, strength_threshold=0.3)
        (only,) = cluster(nodes, edges, config)
        assert only.density == pytest.approx(1 / 3)
        assert only.cohesion == pytest.approx(0.9)


class TestClusteringEngine:

    def test_result_is_memoized(self):
        engine = ClusteringEngine()
        data = triangle()
        config = ClusteringConfig(min_cluster_size=2)
        assert engine.run(data, config) is engine.run(data, config)
        assert engine.runs == 1

    def test_config_change_recomputes(self):
        engine = ClusteringEngine()
        data = triangle()
        engine.run(data, ClusteringConfig(min_cluster_size=2))
        engine.run(data, ClusteringConfig(min_cluster_size=3))
        assert engine.runs == 2

    def test_result_carries_fingerprint_and_stats(self):
        data = make_data(list(triangle().nodes) + [make_node("far", 5000, 5000)], triangle().edges)
        result = ClusteringEngine().run(data, ClusteringConfig(min_cluster_size=2))
        assert result.network_fingerprint == data.fingerprint
        assert result.unclustered_node_ids == ("far",)
        assert result.stats.total_clusters == 1
        assert result.stats.size_distribution == ((3, 1),)

    def test_configured_seed_makes_kmeans_reproducible(self):
        data = make_data([make_node(f"n{i}", (i * 53) % 300, (i * 17) % 300) for i in range(30)])
        config = ClusteringConfig(algorithm=ClusteringAlgorithm.KMEANS)
        first = ClusteringEngine(ClusteringSettings(seed=9)).run(data, config)
        second = ClusteringEngine(ClusteringSettings(seed=9)).run(data, config)
        assert [c.node_ids for c in first.clusters] == [c.node_ids for c in second.clusters]

    def test_filters_narrow_the_clustered_nodes(self):
        far = make_node("far", 5000, 5000, node_type=NodeType.THEMES)
        data = make_data(list(triangle().nodes) + [far], triangle().edges)
        engine = ClusteringEngine()
        config = ClusteringConfig(min_cluster_size=2)

        inbox_only = engine.run(data, config, FilterConfig(types=(NodeType.INBOX,)))
        assert inbox_only.network_fingerprint == data.fingerprint
        assert [c.node_ids for c in inbox_only.clusters] == [("a", "b", "c")]
        assert inbox_only.unclustered_node_ids == ()

        themes_only = engine.run(data, config, FilterConfig(types=(NodeType.THEMES,)))
        assert themes_only.clusters == ()
        assert themes_only.unclustered_node_ids == ("far",)
        assert engine.runs == 2
