"""
Presentation Layer

Render-ready view models. Nothing here mutates state.
"""

from .viewmodels import (
    PlaceholderViewModel, RelationsViewModel, ClusteringViewModel, NO_DATA_MESSAGE,
    NO_RELATIONSHIPS_MESSAGE
)
from .graph import (
    GraphNodeView, GraphEdgeView, NetworkGraphView, EMPTY_VIEW,
    NODE_STYLES, EDGE_COLORS, build_graph_view, visible_clusters
)

__all__ = [
    'PlaceholderViewModel', 'RelationsViewModel', 'ClusteringViewModel', 'NO_DATA_MESSAGE',
    'NO_RELATIONSHIPS_MESSAGE',
    'GraphNodeView', 'GraphEdgeView', 'NetworkGraphView', 'EMPTY_VIEW',
    'NODE_STYLES', 'EDGE_COLORS', 'build_graph_view', 'visible_clusters',
]
