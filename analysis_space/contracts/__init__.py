"""
Contracts Layer

Immutable data model shared by every layer of the analysis space.

PRINCIPLES:
1. Immutable (Frozen)
2. Errors are data
3. No rendering, no scheduling
"""

from .base import (
    ErrorCode, Error, NodeType, EdgeType, SidePanelType, ClusteringAlgorithm,
    Point, ORIGIN, ContainerDimensions, ContainerBounds, DERIVED_RELATIONSHIP_KINDS
)
from .network import (
    CardRecord, RelationshipRecord, NetworkNode, NetworkEdge, NetworkData,
    derive_edge_id
)
from .view import (
    Viewport, DEFAULT_VIEWPORT, FilterConfig, ClusteringConfig
)
from .clusters import (
    Cluster, ClusteringStats, ClusteringResult, ClusterLabel, ClusterLabelMetadata
)

__all__ = [
    'ErrorCode', 'Error', 'NodeType', 'EdgeType', 'SidePanelType', 'ClusteringAlgorithm',
    'Point', 'ORIGIN', 'ContainerDimensions', 'ContainerBounds', 'DERIVED_RELATIONSHIP_KINDS',
    'CardRecord', 'RelationshipRecord', 'NetworkNode', 'NetworkEdge', 'NetworkData',
    'derive_edge_id',
    'Viewport', 'DEFAULT_VIEWPORT', 'FilterConfig', 'ClusteringConfig',
    'Cluster', 'ClusteringStats', 'ClusteringResult', 'ClusterLabel', 'ClusterLabelMetadata',
]
