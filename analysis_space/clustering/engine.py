"""
Clustering Engine
=================

Dispatches to one of three interchangeable modes and packages the output
as a ClusteringResult tied to the snapshot it was computed from.

GUARANTEES:
===========
1. Every node appears in at most one cluster
2. density in [0, 1], cohesion >= 0 for every cluster
3. Same snapshot + same config + same filters -> the memoized result is returned
4. Weight filtering removes weak edges before clustering AND metrics
"""

from __future__ import annotations
from typing import Optional, Sequence, Tuple
import logging

import numpy as np

from ..config import ClusteringSettings
from ..contracts.base import ClusteringAlgorithm
from ..contracts.clusters import Cluster, ClusteringResult
from ..contracts.network import NetworkData, NetworkEdge, NetworkNode
from ..contracts.view import ClusteringConfig, FilterConfig
from ..transform.filters import apply_filters, strong_edges
from .community import community_clusters
from .density import density_clusters
from .kmeans import kmeans_clusters
from .metrics import clustering_stats

LOGGER = logging.getLogger(__name__)


def cluster(
    nodes: Sequence[NetworkNode],
    edges: Sequence[NetworkEdge],
    config: ClusteringConfig,
    rng: Optional[np.random.Generator] = None,
    settings: Optional[ClusteringSettings] = None,
) -> Tuple[Cluster, ...]:
    """Run the configured algorithm. Empty node set -> empty tuple."""
    settings = settings or ClusteringSettings()
    if not nodes:
        return ()
    if config.use_weight_filtering:
        edges = strong_edges(edges, config.strength_threshold)

    if config.algorithm is ClusteringAlgorithm.HDBSCAN:
        return density_clusters(
            nodes, edges,
            min_cluster_size=config.min_cluster_size,
            cluster_threshold=config.cluster_threshold,
            distance_scale=settings.distance_scale,
        )
    if config.algorithm is ClusteringAlgorithm.KMEANS:
        return kmeans_clusters(
            nodes, edges,
            rng=rng,
            iterations=settings.kmeans_iterations,
            nodes_per_cluster=settings.kmeans_nodes_per_cluster,
            min_k=settings.kmeans_min_k,
        )
    if config.algorithm is ClusteringAlgorithm.COMMUNITY:
        return community_clusters(
            nodes, edges,
            min_cluster_size=config.min_cluster_size,
            cluster_threshold=config.cluster_threshold,
        )
    raise ValueError(f"Unsupported clustering algorithm: {config.algorithm!r}")


class ClusteringEngine:
    """
    Memoized clustering over NetworkData snapshots.

    Only the most recent (fingerprint, config, filters) key is remembered.
    When no Generator is injected, each run draws from a fresh Generator
    seeded with settings.seed, so a configured seed makes k-means
    reproducible.
    """

    def __init__(
        self,
        settings: Optional[ClusteringSettings] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self._settings = settings or ClusteringSettings()
        self._rng = rng
        self._key: Optional[Tuple[str, ClusteringConfig, Optional[FilterConfig]]] = None
        self._result: Optional[ClusteringResult] = None
        self._runs = 0

    @property
    def runs(self) -> int:
        """Number of non-memoized computations so far."""
        return self._runs

    def run(
        self,
        data: NetworkData,
        config: ClusteringConfig,
        filters: Optional[FilterConfig] = None,
    ) -> ClusteringResult:
        """
        Cluster the part of `data` selected by `filters`.

        The result stays tied to the fingerprint of the full snapshot, so
        the store accepts it for as long as that snapshot is current.
        """
        key = (data.fingerprint, config, filters)
        if self._result is not None and self._key == key:
            return self._result

        source = apply_filters(data, filters) if filters is not None else data
        rng = self._rng if self._rng is not None else np.random.default_rng(self._settings.seed)
        clusters = cluster(source.nodes, source.edges, config, rng=rng, settings=self._settings)
        clustered = {node_id for c in clusters for node_id in c.node_ids}
        result = ClusteringResult(
            algorithm=config.algorithm,
            clusters=clusters,
            config=config,
            network_fingerprint=data.fingerprint,
            unclustered_node_ids=tuple(n.id for n in source.nodes if n.id not in clustered),
            stats=clustering_stats(clusters),
        )
        LOGGER.debug(
            "%s clustering of %d node(s) produced %d cluster(s)",
            config.algorithm.value, len(source.nodes), len(clusters)
        )

        self._key = key
        self._result = result
        self._runs += 1
        return result

    def clear(self) -> None:
        self._key = None
        self._result = None
