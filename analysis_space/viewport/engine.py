"""
Viewport Engine
===============

Pan/zoom mathematics and visibility culling.

TRANSFORM:
==========
screen = (world + (x, y)) * scale
world  = screen / scale - (x, y)

GUARANTEES:
===========
1. Every returned Viewport has scale within [min_scale, max_scale]
2. Zooming keeps the world point under the cursor fixed on screen
3. Culling never mutates its inputs
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

import numpy as np

from ..config import ViewportSettings
from ..contracts.base import ContainerDimensions, Point
from ..contracts.network import NetworkData, NetworkEdge, NetworkNode
from ..contracts.view import Viewport


@dataclass(frozen=True)
class CulledView:
    """Nodes/edges that survive culling, with their screen positions."""
    viewport: Viewport
    nodes: Tuple[NetworkNode, ...]
    edges: Tuple[NetworkEdge, ...]
    screen_positions: Mapping[str, Point] = field(default_factory=dict)
    total_nodes: int = 0
    total_edges: int = 0

    @property
    def culled_node_count(self) -> int:
        return self.total_nodes - len(self.nodes)


class ViewportEngine:
    """Stateless transform arithmetic; the store owns the Viewport."""

    def __init__(self, settings: Optional[ViewportSettings] = None):
        self._settings = settings or ViewportSettings()

    @property
    def settings(self) -> ViewportSettings:
        return self._settings

    # =========================================================================
    # TRANSFORMS
    # =========================================================================

    def clamp_scale(self, scale: float) -> float:
        return min(self._settings.max_scale, max(self._settings.min_scale, scale))

    def clamp(self, viewport: Viewport) -> Viewport:
        scale = self.clamp_scale(viewport.scale)
        if scale == viewport.scale:
            return viewport
        return Viewport(x=viewport.x, y=viewport.y, scale=scale)

    @staticmethod
    def world_to_screen(viewport: Viewport, point: Point) -> Point:
        return Point(
            (point.x + viewport.x) * viewport.scale,
            (point.y + viewport.y) * viewport.scale,
        )

    @staticmethod
    def screen_to_world(viewport: Viewport, point: Point) -> Point:
        return Point(
            point.x / viewport.scale - viewport.x,
            point.y / viewport.scale - viewport.y,
        )

    def pan(self, viewport: Viewport, dx_screen: float, dy_screen: float) -> Viewport:
        """Translate by a screen-space drag delta."""
        return Viewport(
            x=viewport.x + dx_screen / viewport.scale,
            y=viewport.y + dy_screen / viewport.scale,
            scale=viewport.scale,
        )

    def zoom_at(self, viewport: Viewport, cursor: Point, factor: float) -> Viewport:
        """
        Scale by `factor` around a container-relative cursor position.

        x' = x + (cx / new_scale - cx / scale), symmetric for y.
        """
        new_scale = self.clamp_scale(viewport.scale * factor)
        if new_scale == viewport.scale:
            return viewport
        return Viewport(
            x=viewport.x + (cursor.x / new_scale - cursor.x / viewport.scale),
            y=viewport.y + (cursor.y / new_scale - cursor.y / viewport.scale),
            scale=new_scale,
        )

    def wheel_factor(self, delta_y: float) -> float:
        """Scrolling down zooms out, anything else zooms in."""
        if delta_y > 0:
            return self._settings.zoom_out_factor
        return self._settings.zoom_in_factor

    def zoom_for_wheel(self, viewport: Viewport, cursor: Point, delta_y: float) -> Viewport:
        return self.zoom_at(viewport, cursor, self.wheel_factor(delta_y))

    # =========================================================================
    # CULLING
    # =========================================================================

    def is_visible(self, screen_point: Point, dims: ContainerDimensions) -> bool:
        margin = self._settings.cull_margin
        return (
            -margin <= screen_point.x <= dims.width + margin
            and -margin <= screen_point.y <= dims.height + margin
        )

    def cull(
        self,
        data: NetworkData,
        viewport: Viewport,
        dims: ContainerDimensions,
        node_positions: Optional[Mapping[str, Point]] = None,
    ) -> CulledView:
        """
        Keep nodes whose screen position lies inside the container expanded
        by the cull margin; keep edges whose endpoints are both kept.
        """
        positions = node_positions or {}
        count = len(data.nodes)
        xs = np.empty(count, dtype=float)
        ys = np.empty(count, dtype=float)
        for i, node in enumerate(data.nodes):
            override = positions.get(node.id)
            xs[i] = override.x if override is not None else node.x
            ys[i] = override.y if override is not None else node.y

        sx = (xs + viewport.x) * viewport.scale
        sy = (ys + viewport.y) * viewport.scale
        margin = self._settings.cull_margin
        mask = (
            (sx >= -margin) & (sx <= dims.width + margin)
            & (sy >= -margin) & (sy <= dims.height + margin)
        )

        visible_nodes = []
        screen_positions: Dict[str, Point] = {}
        for i in np.flatnonzero(mask):
            node = data.nodes[i]
            visible_nodes.append(node)
            screen_positions[node.id] = Point(float(sx[i]), float(sy[i]))

        visible_edges = tuple(
            e for e in data.edges
            if e.source in screen_positions and e.target in screen_positions
        )
        return CulledView(
            viewport=viewport,
            nodes=tuple(visible_nodes),
            edges=visible_edges,
            screen_positions=screen_positions,
            total_nodes=count,
            total_edges=len(data.edges),
        )

    # =========================================================================
    # HIT TESTING
    # =========================================================================

    def node_render_size(self, node: NetworkNode, scale: float) -> float:
        """Rendered diameter in pixels."""
        return max(
            self._settings.min_node_size,
            min(self._settings.max_node_size, node.size * scale),
        )

    def hit_test(self, view: CulledView, point: Point) -> Optional[str]:
        """Id of the visible node under `point`; the nearest centre wins."""
        best_id: Optional[str] = None
        best_distance = float('inf')
        for node in view.nodes:
            center = view.screen_positions[node.id]
            radius = self.node_render_size(node, view.viewport.scale) / 2.0
            distance = center.distance_to(point)
            if distance <= radius and distance < best_distance:
                best_id = node.id
                best_distance = distance
        return best_id

    def edge_hit_test(self, view: CulledView, point: Point) -> Optional[str]:
        """
        Id of the visible edge passing within edge_hit_tolerance pixels of
        `point`; the closest segment wins.
        """
        tolerance = self._settings.edge_hit_tolerance
        best_id: Optional[str] = None
        best_distance = float('inf')
        for edge in view.edges:
            distance = segment_distance(
                point, view.screen_positions[edge.source], view.screen_positions[edge.target]
            )
            if distance <= tolerance and distance < best_distance:
                best_id = edge.id
                best_distance = distance
        return best_id


def segment_distance(point: Point, start: Point, end: Point) -> float:
    """Distance from `point` to the segment start-end."""
    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return start.distance_to(point)
    t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / length_sq
    t = min(1.0, max(0.0, t))
    return Point(start.x + t * dx, start.y + t * dy).distance_to(point)
