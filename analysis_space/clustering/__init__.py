"""
Clustering Layer

Three interchangeable modes (density, k-means, community) with shared
metrics, summary statistics and label export.
"""

from .engine import ClusteringEngine, cluster
from .density import density_clusters
from .kmeans import kmeans_clusters, choose_k
from .community import community_clusters
from .metrics import (
    CLUSTER_COLORS, build_cluster, cluster_center, clustering_stats,
    find_cluster_for_node, graph_cohesion, graph_density, internal_graph
)
from .export import build_cluster_label, build_cluster_labels

__all__ = [
    'ClusteringEngine', 'cluster',
    'density_clusters', 'kmeans_clusters', 'choose_k', 'community_clusters',
    'CLUSTER_COLORS', 'build_cluster', 'cluster_center', 'clustering_stats',
    'find_cluster_for_node', 'graph_cohesion', 'graph_density', 'internal_graph',
    'build_cluster_label', 'build_cluster_labels',
]
