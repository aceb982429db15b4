"""
Cluster Metrics
===============

Structural quality figures shared by every clustering mode.

ALLOWED:
- Centre of mass of member positions
- Internal edge density (networkx subgraph)
- Mean internal edge strength (cohesion)

FORBIDDEN:
- Ranking or importance scores
"""

from __future__ import annotations
from collections import Counter
from typing import Iterable, Optional, Sequence, Tuple

import networkx as nx

from ..contracts.base import ORIGIN, Point
from ..contracts.clusters import Cluster, ClusteringStats
from ..contracts.network import NetworkEdge, NetworkNode

CLUSTER_COLORS: Tuple[str, ...] = (
    '#3b82f6', '#ef4444', '#10b981', '#f59e0b', '#8b5cf6',
    '#06b6d4', '#84cc16', '#f97316', '#ec4899', '#6366f1',
)


def cluster_color(index: int) -> str:
    return CLUSTER_COLORS[index % len(CLUSTER_COLORS)]


def cluster_center(nodes: Sequence[NetworkNode]) -> Point:
    if not nodes:
        return ORIGIN
    return Point(
        sum(n.x for n in nodes) / len(nodes),
        sum(n.y for n in nodes) / len(nodes),
    )


def internal_graph(nodes: Sequence[NetworkNode], edges: Iterable[NetworkEdge]) -> nx.Graph:
    """
    Undirected graph of the edges running between members.

    Self-loops are skipped; a pair linked in both directions becomes one
    edge carrying the larger strength.
    """
    graph = nx.Graph()
    graph.add_nodes_from(n.id for n in nodes)
    for edge in edges:
        if edge.is_self_loop or edge.source not in graph or edge.target not in graph:
            continue
        if graph.has_edge(edge.source, edge.target):
            current = graph[edge.source][edge.target]['strength']
            graph[edge.source][edge.target]['strength'] = max(current, edge.strength)
        else:
            graph.add_edge(edge.source, edge.target, strength=edge.strength)
    return graph


def graph_density(graph: nx.Graph) -> float:
    """Edges / n(n-1)/2, or 0 for fewer than two nodes."""
    if graph.number_of_nodes() <= 1:
        return 0.0
    return float(nx.density(graph))


def graph_cohesion(graph: nx.Graph) -> float:
    """Mean internal edge strength, or 0 without internal edges."""
    strengths = [data['strength'] for _, _, data in graph.edges(data=True)]
    if not strengths:
        return 0.0
    return sum(strengths) / len(strengths)


def build_cluster(
    index: int,
    name: str,
    nodes: Sequence[NetworkNode],
    edges: Iterable[NetworkEdge],
) -> Cluster:
    """Assemble a Cluster with its metrics; `index` drives id and color."""
    graph = internal_graph(nodes, edges)
    return Cluster(
        id=f"cluster-{index}",
        name=name,
        nodes=tuple(nodes),
        center=cluster_center(nodes),
        color=cluster_color(index),
        size=len(nodes),
        density=graph_density(graph),
        cohesion=graph_cohesion(graph),
    )


# =============================================================================
# SUMMARIES
# =============================================================================

def clustering_stats(clusters: Sequence[Cluster]) -> ClusteringStats:
    if not clusters:
        return ClusteringStats(
            total_clusters=0, total_nodes=0, avg_cluster_size=0.0,
            avg_density=0.0, avg_cohesion=0.0, size_distribution=(),
        )
    count = len(clusters)
    total_nodes = sum(c.size for c in clusters)
    sizes = Counter(c.size for c in clusters)
    return ClusteringStats(
        total_clusters=count,
        total_nodes=total_nodes,
        avg_cluster_size=total_nodes / count,
        avg_density=sum(c.density for c in clusters) / count,
        avg_cohesion=sum(c.cohesion for c in clusters) / count,
        size_distribution=tuple(sorted(sizes.items())),
    )


def find_cluster_for_node(clusters: Iterable[Cluster], node_id: Optional[str]) -> Optional[Cluster]:
    if node_id is None:
        return None
    for cluster in clusters:
        if cluster.contains(node_id):
            return cluster
    return None
