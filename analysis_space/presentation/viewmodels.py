"""
Panel View Models

Responsibility:
Render-ready contracts for the side-panel content.
No computation here; panels build these from store state.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

from ..contracts.base import ClusteringAlgorithm, SidePanelType
from ..contracts.clusters import Cluster, ClusteringStats, ClusterLabel
from ..contracts.network import NetworkEdge

if TYPE_CHECKING:
    from ..panels.relations import HistogramBin, RelationshipStats, TypeShare

NO_DATA_MESSAGE = "No network data to analyze yet"
NO_RELATIONSHIPS_MESSAGE = "No relationships between these cards yet"


@dataclass(frozen=True)
class PlaceholderViewModel:
    """Shown when a panel has nothing to display."""
    panel: SidePanelType
    message: str = NO_DATA_MESSAGE


@dataclass(frozen=True)
class RelationsViewModel:
    stats: RelationshipStats
    type_chart: Tuple[TypeShare, ...]
    strength_histogram: Tuple[HistogramBin, ...]
    filtered_edges: Tuple[NetworkEdge, ...]
    selected_node_id: Optional[str]
    selected_node_relations: Tuple[NetworkEdge, ...]
    edge_type: str      # "all" or an EdgeType value
    min_strength: float
    only_connected: bool


@dataclass(frozen=True)
class ClusteringViewModel:
    algorithm: ClusteringAlgorithm
    clusters: Tuple[Cluster, ...]
    stats: ClusteringStats
    labels: Tuple[ClusterLabel, ...]
    selected_cluster: Optional[Cluster]
    unclustered_count: int
    is_visible: bool    # show_clusters and show_filtered_clusters
