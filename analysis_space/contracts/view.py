"""
View Contracts

Viewport transform and the user-adjustable filter / clustering settings.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Mapping, Tuple
import math

from .base import ClusteringAlgorithm, EdgeType, NodeType


@dataclass(frozen=True)
class Viewport:
    """
    Affine world -> screen transform.

    screen = (world + (x, y)) * scale
    """
    x: float
    y: float
    scale: float

    def __post_init__(self):
        if not math.isfinite(self.scale) or self.scale <= 0:
            raise ValueError(f"Viewport scale must be a positive number, got {self.scale}")
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError("Viewport offset must be finite")


DEFAULT_VIEWPORT = Viewport(x=400.0, y=300.0, scale=0.5)


@dataclass(frozen=True)
class FilterConfig:
    """
    Narrows the nodes/edges that take part in rendering and clustering.

    Empty collections mean "no restriction".
    """
    tags: Tuple[str, ...] = ()
    types: Tuple[NodeType, ...] = ()
    relationships: Tuple[EdgeType, ...] = ()
    strength_threshold: float = 0.3

    @property
    def is_open(self) -> bool:
        """True when the filter lets everything through."""
        return (
            not self.tags and not self.types and not self.relationships
            and self.strength_threshold <= 0.0
        )

    def merged(self, changes: Mapping[str, Any]) -> 'FilterConfig':
        """Partial update, the SET_FILTERS merge semantics."""
        updates = dict(changes)
        if 'tags' in updates:
            updates['tags'] = tuple(updates['tags'])
        if 'types' in updates:
            updates['types'] = tuple(NodeType(t) for t in updates['types'])
        if 'relationships' in updates:
            updates['relationships'] = tuple(EdgeType(r) for r in updates['relationships'])
        return replace(self, **updates)


@dataclass(frozen=True)
class ClusteringConfig:
    """Clustering algorithm selection and its tuning knobs."""
    algorithm: ClusteringAlgorithm = ClusteringAlgorithm.HDBSCAN
    strength_threshold: float = 0.3
    use_weight_filtering: bool = True
    show_filtered_clusters: bool = True
    min_cluster_size: int = 3
    cluster_threshold: float = 0.5

    def __post_init__(self):
        if self.min_cluster_size < 1:
            raise ValueError("min_cluster_size must be at least 1")
        if self.cluster_threshold < 0:
            raise ValueError("cluster_threshold must be non-negative")

    def merged(self, changes: Mapping[str, Any]) -> 'ClusteringConfig':
        """Partial update, the SET_CLUSTERING_CONFIG merge semantics."""
        updates = dict(changes)
        if isinstance(updates.get('algorithm'), str):
            updates['algorithm'] = ClusteringAlgorithm(updates['algorithm'])
        return replace(self, **updates)
