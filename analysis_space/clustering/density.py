"""
Density Mode

Single-pass neighbourhood gathering. An approximation of density-based
clustering, not HDBSCAN.

ORDER DEPENDENCE:
=================
Seeds are taken in input order and every node joins at most one
neighbourhood, so reordering the input can change the result. Nodes
gathered by a neighbourhood that turns out too small are still consumed.
"""

from __future__ import annotations
from typing import List, Sequence, Tuple

import numpy as np

from ..contracts.clusters import Cluster
from ..contracts.network import NetworkEdge, NetworkNode
from .metrics import build_cluster

DEFAULT_DISTANCE_SCALE = 100.0


def density_clusters(
    nodes: Sequence[NetworkNode],
    edges: Sequence[NetworkEdge],
    min_cluster_size: int,
    cluster_threshold: float,
    distance_scale: float = DEFAULT_DISTANCE_SCALE,
) -> Tuple[Cluster, ...]:
    if not nodes:
        return ()

    radius = cluster_threshold * distance_scale
    xs = np.array([n.x for n in nodes], dtype=float)
    ys = np.array([n.y for n in nodes], dtype=float)
    visited = np.zeros(len(nodes), dtype=bool)

    groups: List[List[NetworkNode]] = []
    for seed in range(len(nodes)):
        if visited[seed]:
            continue
        visited[seed] = True
        distances = np.hypot(xs - xs[seed], ys - ys[seed])
        neighbours = np.flatnonzero(~visited & (distances < radius))
        visited[neighbours] = True

        members = [nodes[seed]] + [nodes[i] for i in neighbours]
        if len(members) >= min_cluster_size:
            groups.append(members)

    return tuple(
        build_cluster(i, f"Cluster {i + 1}", members, edges)
        for i, members in enumerate(groups)
    )
