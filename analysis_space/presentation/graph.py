"""
Graph Presentation

Responsibility:
Deterministic transformation of the culled network into render-ready
node and edge views. Positions are screen coordinates.
The active FilterConfig is applied before culling, so filtered-out
nodes and edges are neither drawn nor counted as culled.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..contracts.base import EdgeType, NodeType
from ..contracts.clusters import Cluster
from ..contracts.network import NetworkData
from ..state.reducer import AnalysisSpaceState
from ..transform.filters import apply_filters
from ..viewport.engine import ViewportEngine

NODE_STYLES: Dict[NodeType, Tuple[str, str]] = {
    NodeType.INBOX: ('#6c7086', '📥'),
    NodeType.QUESTIONS: ('#fbbf24', '❓'),
    NodeType.INSIGHTS: ('#a855f7', '💡'),
    NodeType.THEMES: ('#3b82f6', '🎯'),
    NodeType.ACTIONS: ('#f97316', '⚡'),
}

EDGE_COLORS: Dict[EdgeType, str] = {
    EdgeType.SEMANTIC: '#10b981',
    EdgeType.MANUAL: '#3b82f6',
    EdgeType.DERIVED: '#f59e0b',
}

SELECTED_BORDER = '#00ff88'
HIGHLIGHTED_BORDER = '#fbbf24'
DEFAULT_BORDER = '#333366'


@dataclass(frozen=True)
class GraphNodeView:
    """Renderable graph node."""
    node_id: str
    x: float
    y: float
    size: float
    color: str
    icon: str
    label: str
    border_color: str
    is_selected: bool
    is_highlighted: bool


@dataclass(frozen=True)
class GraphEdgeView:
    """Renderable graph edge."""
    edge_id: str
    source_id: str
    target_id: str
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    opacity: float
    stroke_width: float
    is_highlighted: bool


@dataclass(frozen=True)
class NetworkGraphView:
    """
    Visible part of the network for one viewport.
    Layout must be stable: same state -> identical view.
    """
    view_id: str
    nodes: Tuple[GraphNodeView, ...]
    edges: Tuple[GraphEdgeView, ...]
    clusters: Tuple[Cluster, ...] = ()
    culled_nodes: int = 0
    culled_edges: int = 0


EMPTY_VIEW = NetworkGraphView(view_id="empty", nodes=(), edges=())


def visible_clusters(state: AnalysisSpaceState) -> Tuple[Cluster, ...]:
    """Clusters to draw as overlays, honouring both visibility switches."""
    if not state.network.show_clusters or not state.clustering_config.show_filtered_clusters:
        return ()
    return state.detected_clusters


def build_graph_view(
    data: Optional[NetworkData],
    state: AnalysisSpaceState,
    engine: Optional[ViewportEngine] = None,
) -> NetworkGraphView:
    if data is None:
        return EMPTY_VIEW
    engine = engine or ViewportEngine()
    network = state.network
    visible = apply_filters(data, network.active_filters)
    culled = engine.cull(
        visible, network.transform, network.container_dimensions, network.node_positions
    )
    highlighted = network.highlighted_nodes

    nodes = []
    for node in culled.nodes:
        position = culled.screen_positions[node.id]
        color, icon = NODE_STYLES[node.type]
        is_selected = node.id == network.selected_node
        is_highlighted = node.id in highlighted
        if is_selected:
            border = SELECTED_BORDER
        elif is_highlighted:
            border = HIGHLIGHTED_BORDER
        else:
            border = DEFAULT_BORDER
        nodes.append(GraphNodeView(
            node_id=node.id,
            x=position.x,
            y=position.y,
            size=engine.node_render_size(node, network.transform.scale),
            color=color,
            icon=icon,
            label=node.title,
            border_color=border,
            is_selected=is_selected,
            is_highlighted=is_highlighted,
        ))

    edges = []
    for edge in culled.edges:
        start = culled.screen_positions[edge.source]
        end = culled.screen_positions[edge.target]
        is_highlighted = edge.source in highlighted or edge.target in highlighted
        edges.append(GraphEdgeView(
            edge_id=edge.id,
            source_id=edge.source,
            target_id=edge.target,
            x1=start.x, y1=start.y, x2=end.x, y2=end.y,
            color=EDGE_COLORS[edge.type],
            opacity=0.8 if is_highlighted else 0.4,
            stroke_width=3.0 if is_highlighted else max(1.0, edge.strength * 2),
            is_highlighted=is_highlighted,
        ))

    return NetworkGraphView(
        view_id=visible.fingerprint,
        nodes=tuple(nodes),
        edges=tuple(edges),
        clusters=visible_clusters(state),
        culled_nodes=culled.culled_node_count,
        culled_edges=culled.total_edges - len(culled.edges),
    )
