"""
Action Contracts

Named state transitions. Intent only, no execution logic.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from ..contracts.base import ContainerDimensions, Point, SidePanelType
from ..contracts.clusters import ClusteringResult
from ..contracts.network import NetworkData
from ..contracts.view import Viewport


class ActionType(Enum):
    """Every transition the reducer understands."""
    # Viewport
    SET_TRANSFORM = "set_transform"
    SET_DRAG_STATE = "set_drag_state"
    SET_NODE_POSITIONS = "set_node_positions"
    SET_CONTAINER_DIMENSIONS = "set_container_dimensions"
    SET_DISPLAY_OPTIONS = "set_display_options"

    # Selection
    SET_SELECTED_NODE = "set_selected_node"
    SET_HIGHLIGHTED_NODES = "set_highlighted_nodes"

    # Panels
    SET_ACTIVE_SIDE_PANEL = "set_active_side_panel"
    TOGGLE_SIDE_PANEL = "toggle_side_panel"

    # Analysis
    SET_CLUSTERING_CONFIG = "set_clustering_config"
    SET_FILTERS = "set_filters"
    SET_NETWORK_DATA = "set_network_data"
    SET_CLUSTERING_RESULT = "set_clustering_result"
    ADD_ANALYSIS_RESULT = "add_analysis_result"
    SET_SEARCH_QUERY = "set_search_query"

    # Status
    SET_LOADING = "set_loading"
    SET_ERROR = "set_error"
    CLEAR_ERROR = "clear_error"

    # Lifecycle
    RESET_NETWORK_STATE = "reset_network_state"
    RESET = "reset"


@dataclass(frozen=True)
class Action:
    """A single dispatched intent."""
    type: ActionType
    payload: Any = None


# =============================================================================
# ACTION BUILDERS
# =============================================================================

def set_transform(viewport: Viewport) -> Action:
    return Action(ActionType.SET_TRANSFORM, viewport)


def set_drag_state(is_dragging: bool, drag_start: Optional[Point] = None) -> Action:
    return Action(
        ActionType.SET_DRAG_STATE,
        {'is_dragging': is_dragging, 'drag_start': drag_start},
    )


def set_node_positions(positions: Mapping[str, Point]) -> Action:
    return Action(ActionType.SET_NODE_POSITIONS, dict(positions))


def set_container_dimensions(dims: ContainerDimensions) -> Action:
    return Action(ActionType.SET_CONTAINER_DIMENSIONS, dims)


def set_display_options(**options: bool) -> Action:
    return Action(ActionType.SET_DISPLAY_OPTIONS, options)


def select_node(node_id: Optional[str]) -> Action:
    return Action(ActionType.SET_SELECTED_NODE, node_id)


def highlight_nodes(node_ids: Iterable[str]) -> Action:
    return Action(ActionType.SET_HIGHLIGHTED_NODES, frozenset(node_ids))


def set_active_side_panel(panel: Optional[SidePanelType]) -> Action:
    return Action(ActionType.SET_ACTIVE_SIDE_PANEL, panel)


def toggle_side_panel(panel: SidePanelType) -> Action:
    return Action(ActionType.TOGGLE_SIDE_PANEL, panel)


def set_clustering_config(**changes: Any) -> Action:
    return Action(ActionType.SET_CLUSTERING_CONFIG, changes)


def set_filters(**changes: Any) -> Action:
    return Action(ActionType.SET_FILTERS, changes)


def set_network_data(data: Optional[NetworkData]) -> Action:
    return Action(ActionType.SET_NETWORK_DATA, data)


def set_clustering_result(result: Optional[ClusteringResult]) -> Action:
    return Action(ActionType.SET_CLUSTERING_RESULT, result)


def add_analysis_result(result: Any) -> Action:
    return Action(ActionType.ADD_ANALYSIS_RESULT, result)


def set_search_query(query: str) -> Action:
    return Action(ActionType.SET_SEARCH_QUERY, query)


def set_loading(is_loading: bool) -> Action:
    return Action(ActionType.SET_LOADING, is_loading)


def set_error(message: str) -> Action:
    return Action(ActionType.SET_ERROR, message)


def clear_error() -> Action:
    return Action(ActionType.CLEAR_ERROR)


def reset_network_state() -> Action:
    return Action(ActionType.RESET_NETWORK_STATE)


def reset() -> Action:
    return Action(ActionType.RESET)
