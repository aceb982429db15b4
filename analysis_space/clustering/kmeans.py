"""
k-means Mode

Lloyd iterations over node positions with a fixed iteration count.
Deterministic for a given seeded Generator.
"""

from __future__ import annotations
from typing import Optional, Sequence, Tuple

import numpy as np

from ..contracts.clusters import Cluster
from ..contracts.network import NetworkEdge, NetworkNode
from .metrics import build_cluster

DEFAULT_ITERATIONS = 10
NODES_PER_CLUSTER = 10
MIN_K = 2


def choose_k(node_count: int, nodes_per_cluster: int = NODES_PER_CLUSTER, min_k: int = MIN_K) -> int:
    return max(min_k, node_count // nodes_per_cluster)


def kmeans_clusters(
    nodes: Sequence[NetworkNode],
    edges: Sequence[NetworkEdge],
    rng: Optional[np.random.Generator] = None,
    iterations: int = DEFAULT_ITERATIONS,
    nodes_per_cluster: int = NODES_PER_CLUSTER,
    min_k: int = MIN_K,
) -> Tuple[Cluster, ...]:
    if not nodes:
        return ()
    rng = rng if rng is not None else np.random.default_rng()

    points = np.array([[n.x, n.y] for n in nodes], dtype=float)
    k = choose_k(len(nodes), nodes_per_cluster, min_k)
    picks = rng.choice(len(nodes), size=k, replace=len(nodes) < k)
    centers = points[picks].copy()

    labels = np.zeros(len(nodes), dtype=int)
    for _ in range(iterations):
        # (n, k) squared distances; argmin breaks ties towards the lower index
        distances = ((points[:, None, :] - centers[None, :, :]) ** 2).sum(axis=2)
        labels = distances.argmin(axis=1)
        for j in range(k):
            members = labels == j
            if members.any():
                centers[j] = points[members].mean(axis=0)

    clusters = []
    for j in range(k):
        indices = np.flatnonzero(labels == j)
        if indices.size == 0:
            continue
        index = len(clusters)
        clusters.append(build_cluster(
            index, f"Cluster {index + 1}", [nodes[i] for i in indices], edges
        ))
    return tuple(clusters)
