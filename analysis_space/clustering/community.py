"""
Community Mode

Strong-edge connectivity. Edges above the threshold merge their endpoints
into one community; a fresh union-find is built for every run.
"""

from __future__ import annotations
from typing import Dict, List, Sequence, Tuple

from networkx.utils import UnionFind

from ..contracts.clusters import Cluster
from ..contracts.network import NetworkEdge, NetworkNode
from .metrics import build_cluster


def community_clusters(
    nodes: Sequence[NetworkNode],
    edges: Sequence[NetworkEdge],
    min_cluster_size: int,
    cluster_threshold: float,
) -> Tuple[Cluster, ...]:
    if not nodes:
        return ()

    order = {n.id: i for i, n in enumerate(nodes)}
    components = UnionFind(order)

    # sorted() is stable: equal strengths keep input order
    for edge in sorted(edges, key=lambda e: e.strength, reverse=True):
        if edge.source not in order or edge.target not in order:
            continue
        if edge.strength > cluster_threshold:
            components.union(edge.source, edge.target)

    groups: Dict[str, List[NetworkNode]] = {}
    for node in nodes:
        groups.setdefault(components[node.id], []).append(node)

    kept = [members for members in groups.values() if len(members) >= min_cluster_size]
    return tuple(
        build_cluster(i, f"Community {i + 1}", members, edges)
        for i, members in enumerate(kept)
    )
