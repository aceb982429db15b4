"""
Gesture Controller

Translates pointer, wheel and click input into store actions.

All pointer positions are container-relative screen coordinates, except
wheel events which carry client coordinates and are mapped through the
container bounds.

ENVIRONMENT ERRORS:
===================
Failures of the host environment (a wheel event that refuses
prevent_default, a host callback that raises) are recorded, logged at
WARNING and never interrupt the gesture.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional, Tuple
import logging

from ..contracts.base import ContainerBounds, Error, ErrorCode, Point
from ..state import actions
from ..state.store import AnalysisStore
from ..transform.filters import apply_filters
from .engine import CulledView, ViewportEngine

LOGGER = logging.getLogger(__name__)

NodeCallback = Callable[[str], None]
EdgeCallback = Callable[[str], None]

MAX_RECORDED_ERRORS = 50


@dataclass(frozen=True)
class WheelEvent:
    """Wheel input as delivered by the host."""
    delta_y: float
    client_x: float
    client_y: float
    prevent_default: Optional[Callable[[], None]] = None


class GestureController:
    """
    Pointer input -> SET_DRAG_STATE / SET_TRANSFORM / SET_SELECTED_NODE.

    Hit testing runs on the filtered, culled network, so a node or edge
    hidden by the active FilterConfig can never be clicked.
    """

    def __init__(
        self,
        store: AnalysisStore,
        engine: Optional[ViewportEngine] = None,
        on_node_select: Optional[NodeCallback] = None,
        on_node_double_click: Optional[NodeCallback] = None,
        on_edge_click: Optional[EdgeCallback] = None,
    ):
        self._store = store
        self._engine = engine or ViewportEngine()
        self._on_node_select = on_node_select
        self._on_node_double_click = on_node_double_click
        self._on_edge_click = on_edge_click
        self._press: Optional[Point] = None
        self._last: Optional[Point] = None
        self._travel = 0.0
        self._suppress_click = False
        self._errors: Deque[Error] = deque(maxlen=MAX_RECORDED_ERRORS)

    @property
    def errors(self) -> Tuple[Error, ...]:
        """Recently recovered environment errors, oldest first."""
        return tuple(self._errors)

    @property
    def is_dragging(self) -> bool:
        return self._press is not None

    # =========================================================================
    # PANNING
    # =========================================================================

    def pointer_down(self, point: Point) -> None:
        self._press = point
        self._last = point
        self._travel = 0.0
        self._suppress_click = False
        self._store.dispatch(actions.set_drag_state(True, point))

    def pointer_move(self, point: Point) -> None:
        if self._press is None or self._last is None:
            return
        dx = point.x - self._last.x
        dy = point.y - self._last.y
        self._last = point
        self._travel = max(self._travel, self._press.distance_to(point))
        if dx == 0 and dy == 0:
            return
        viewport = self._engine.pan(self._store.state.network.transform, dx, dy)
        self._store.dispatch(actions.set_transform(viewport))

    def pointer_up(self, point: Optional[Point] = None) -> None:
        if self._press is None:
            return
        if point is not None:
            self._travel = max(self._travel, self._press.distance_to(point))
        self._suppress_click = self._travel > self._engine.settings.click_tolerance
        self._press = None
        self._last = None
        self._store.dispatch(actions.set_drag_state(False))

    # =========================================================================
    # ZOOM
    # =========================================================================

    def wheel(self, event: WheelEvent, bounds: ContainerBounds) -> None:
        """Zoom around the cursor; a restricted event API never blocks zooming."""
        if event.prevent_default is not None:
            try:
                event.prevent_default()
            except Exception as exc:
                self._record(Error(
                    code=ErrorCode.EVENT_API_RESTRICTED,
                    message="prevent_default() failed on wheel event",
                    context=(("exception", repr(exc)),)
                ))
        cursor = bounds.to_local(event.client_x, event.client_y)
        current = self._store.state.network.transform
        viewport = self._engine.zoom_for_wheel(current, cursor, event.delta_y)
        if viewport != current:
            self._store.dispatch(actions.set_transform(viewport))

    # =========================================================================
    # SELECTION
    # =========================================================================

    def click(self, point: Point) -> Optional[str]:
        """
        Select the node under `point`, or clear selection on empty space.

        A click that misses every node but lands on an edge also clears the
        selection and reports the edge through on_edge_click.
        """
        if self._suppress_click:
            self._suppress_click = False
            return None
        view = self._visible_view()
        node_id = self._engine.hit_test(view, point) if view is not None else None
        self._store.dispatch(actions.select_node(node_id))
        if node_id is not None:
            self._invoke(self._on_node_select, node_id)
        elif view is not None:
            edge_id = self._engine.edge_hit_test(view, point)
            if edge_id is not None:
                self._invoke(self._on_edge_click, edge_id)
        return node_id

    def double_click(self, point: Point) -> Optional[str]:
        """Open the node under `point`. Selection is left untouched."""
        node_id = self.node_at(point)
        if node_id is not None:
            self._invoke(self._on_node_double_click, node_id)
        return node_id

    def node_at(self, point: Point) -> Optional[str]:
        view = self._visible_view()
        return self._engine.hit_test(view, point) if view is not None else None

    def edge_at(self, point: Point) -> Optional[str]:
        view = self._visible_view()
        return self._engine.edge_hit_test(view, point) if view is not None else None

    def _visible_view(self) -> Optional[CulledView]:
        # Hit testing sees exactly what build_graph_view draws.
        state = self._store.state
        if state.network_data is None:
            return None
        return self._engine.cull(
            apply_filters(state.network_data, state.network.active_filters),
            state.network.transform,
            state.network.container_dimensions,
            state.network.node_positions,
        )

    # =========================================================================
    # ERROR RECORDING
    # =========================================================================

    def _invoke(self, callback: Optional[NodeCallback], target_id: str) -> None:
        if callback is None:
            return
        try:
            callback(target_id)
        except Exception as exc:
            self._record(Error(
                code=ErrorCode.CALLBACK_FAILED,
                message="Host callback raised",
                context=(("target_id", target_id), ("exception", repr(exc)))
            ))

    def _record(self, error: Error) -> None:
        self._errors.append(error)
        LOGGER.warning("%s: %s %s", error.code.name, error.message, dict(error.context))
