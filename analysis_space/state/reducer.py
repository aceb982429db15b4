"""
Analysis State Reducer
======================

Pure function state derivation: reduce(state, action) -> state.

INVARIANT: reduce() is a PURE FUNCTION
Same state + same action -> identical new state. Inputs are never mutated.

STALE RESULT RULE:
==================
A ClusteringResult is accepted only when its network_fingerprint matches
the NetworkData currently held. Replacing the NetworkData drops a result
computed for another snapshot.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Tuple
import logging

from ..config import ViewportSettings
from ..contracts.base import ContainerDimensions, Error, Point, SidePanelType
from ..contracts.clusters import Cluster, ClusteringResult
from ..contracts.network import NetworkData
from ..contracts.view import ClusteringConfig, FilterConfig, Viewport
from .actions import Action, ActionType

LOGGER = logging.getLogger(__name__)

_EMPTY_POSITIONS: Mapping[str, Point] = MappingProxyType({})
_DEFAULT_SETTINGS = ViewportSettings()


# =============================================================================
# STATE STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class NetworkState:
    """Canvas interaction state: viewport, selection, drag, overrides."""
    transform: Viewport
    container_dimensions: ContainerDimensions
    selected_node: Optional[str] = None
    highlighted_nodes: FrozenSet[str] = frozenset()
    is_dragging: bool = False
    drag_start: Optional[Point] = None
    show_clusters: bool = True
    show_density: bool = False
    active_filters: FilterConfig = field(default_factory=FilterConfig)
    node_positions: Mapping[str, Point] = field(default_factory=lambda: _EMPTY_POSITIONS)


@dataclass(frozen=True)
class AnalysisSpaceState:
    """Complete state of one mounted analysis space."""
    network: NetworkState
    network_data: Optional[NetworkData] = None
    active_side_panel: Optional[SidePanelType] = None
    clustering_config: ClusteringConfig = field(default_factory=ClusteringConfig)
    clustering_result: Optional[ClusteringResult] = None
    analysis_results: Tuple[Any, ...] = ()
    search_query: str = ""
    is_loading: bool = False
    error: Optional[str] = None

    @property
    def detected_clusters(self) -> Tuple[Cluster, ...]:
        """Clusters of the accepted clustering result, the only copy kept."""
        return self.clustering_result.clusters if self.clustering_result is not None else ()


def initial_network_state(settings: Optional[ViewportSettings] = None) -> NetworkState:
    settings = settings or ViewportSettings()
    return NetworkState(
        transform=Viewport(
            x=settings.default_x, y=settings.default_y, scale=settings.default_scale
        ),
        container_dimensions=ContainerDimensions(
            width=settings.container_width, height=settings.container_height
        ),
    )


def initial_state(settings: Optional[ViewportSettings] = None) -> AnalysisSpaceState:
    return AnalysisSpaceState(network=initial_network_state(settings))


# =============================================================================
# HANDLERS
# =============================================================================

Handler = Callable[[AnalysisSpaceState, Any, ViewportSettings], AnalysisSpaceState]


def _with_network(state: AnalysisSpaceState, **changes: Any) -> AnalysisSpaceState:
    return replace(state, network=replace(state.network, **changes))


def _set_transform(state, viewport: Viewport, settings):
    scale = min(settings.max_scale, max(settings.min_scale, viewport.scale))
    if scale != viewport.scale:
        viewport = Viewport(x=viewport.x, y=viewport.y, scale=scale)
    return _with_network(state, transform=viewport)


def _set_selected_node(state, node_id: Optional[str], settings):
    return _with_network(state, selected_node=node_id)


def _set_highlighted_nodes(state, node_ids, settings):
    return _with_network(state, highlighted_nodes=frozenset(node_ids or ()))


def _set_active_side_panel(state, panel: Optional[SidePanelType], settings):
    if panel is not None and not isinstance(panel, SidePanelType):
        panel = SidePanelType(panel)
    return replace(state, active_side_panel=panel)


def _toggle_side_panel(state, panel, settings):
    panel = panel if isinstance(panel, SidePanelType) else SidePanelType(panel)
    next_panel = None if state.active_side_panel is panel else panel
    return replace(state, active_side_panel=next_panel)


def _set_clustering_config(state, changes: Mapping[str, Any], settings):
    return replace(state, clustering_config=state.clustering_config.merged(changes))


def _set_filters(state, changes: Mapping[str, Any], settings):
    return _with_network(state, active_filters=state.network.active_filters.merged(changes))


def _set_loading(state, is_loading: bool, settings):
    return replace(state, is_loading=bool(is_loading))


def _set_error(state, error, settings):
    message = error.message if isinstance(error, Error) else error
    return replace(state, error=message)


def _clear_error(state, payload, settings):
    return replace(state, error=None)


def _set_search_query(state, query: str, settings):
    return replace(state, search_query=query or "")


def _add_analysis_result(state, result, settings):
    return replace(state, analysis_results=state.analysis_results + (result,))


def _set_network_data(state, data: Optional[NetworkData], settings):
    network = state.network
    result = state.clustering_result
    if data is None:
        return replace(
            state,
            network_data=None,
            clustering_result=None,
            network=replace(
                network,
                selected_node=None,
                highlighted_nodes=frozenset(),
                node_positions=_EMPTY_POSITIONS,
            ),
        )

    index = data.node_index
    selected = network.selected_node if network.selected_node in index else None
    highlighted = frozenset(n for n in network.highlighted_nodes if n in index)
    positions = {k: v for k, v in network.node_positions.items() if k in index}

    if result is not None and result.network_fingerprint != data.fingerprint:
        result = None

    return replace(
        state,
        network_data=data,
        clustering_result=result,
        network=replace(
            network,
            selected_node=selected,
            highlighted_nodes=highlighted,
            node_positions=MappingProxyType(positions),
        ),
    )


def _set_clustering_result(state, result: Optional[ClusteringResult], settings):
    if result is None:
        return replace(state, clustering_result=None)
    data = state.network_data
    if data is None or result.network_fingerprint != data.fingerprint:
        LOGGER.debug(
            "Ignoring clustering result for snapshot %s (current %s)",
            result.network_fingerprint, data.fingerprint if data is not None else None
        )
        return state
    return replace(state, clustering_result=result)


def _set_drag_state(state, payload: Mapping[str, Any], settings):
    is_dragging = bool(payload.get('is_dragging', False))
    drag_start = payload.get('drag_start') if is_dragging else None
    return _with_network(state, is_dragging=is_dragging, drag_start=drag_start)


def _set_node_positions(state, positions: Mapping[str, Point], settings):
    merged = dict(state.network.node_positions)
    merged.update(positions)
    return _with_network(state, node_positions=MappingProxyType(merged))


def _set_container_dimensions(state, dims: ContainerDimensions, settings):
    return _with_network(state, container_dimensions=dims)


def _set_display_options(state, options: Mapping[str, bool], settings):
    changes = {
        key: bool(options[key])
        for key in ('show_clusters', 'show_density') if key in options
    }
    return _with_network(state, **changes)


def _reset_network_state(state, payload, settings):
    return replace(state, network=initial_network_state(settings))


def _reset(state, payload, settings):
    return initial_state(settings)


_HANDLERS: Dict[ActionType, Handler] = {
    ActionType.SET_TRANSFORM: _set_transform,
    ActionType.SET_SELECTED_NODE: _set_selected_node,
    ActionType.SET_HIGHLIGHTED_NODES: _set_highlighted_nodes,
    ActionType.SET_ACTIVE_SIDE_PANEL: _set_active_side_panel,
    ActionType.TOGGLE_SIDE_PANEL: _toggle_side_panel,
    ActionType.SET_CLUSTERING_CONFIG: _set_clustering_config,
    ActionType.SET_FILTERS: _set_filters,
    ActionType.SET_LOADING: _set_loading,
    ActionType.SET_ERROR: _set_error,
    ActionType.CLEAR_ERROR: _clear_error,
    ActionType.SET_SEARCH_QUERY: _set_search_query,
    ActionType.ADD_ANALYSIS_RESULT: _add_analysis_result,
    ActionType.SET_NETWORK_DATA: _set_network_data,
    ActionType.SET_CLUSTERING_RESULT: _set_clustering_result,
    ActionType.SET_DRAG_STATE: _set_drag_state,
    ActionType.SET_NODE_POSITIONS: _set_node_positions,
    ActionType.SET_CONTAINER_DIMENSIONS: _set_container_dimensions,
    ActionType.SET_DISPLAY_OPTIONS: _set_display_options,
    ActionType.RESET_NETWORK_STATE: _reset_network_state,
    ActionType.RESET: _reset,
}


def reduce(
    state: AnalysisSpaceState,
    action: Action,
    settings: Optional[ViewportSettings] = None,
) -> AnalysisSpaceState:
    """
    Apply one action.

    Raises ValueError for anything that is not a known Action; that is a
    programming error, not a runtime condition.
    """
    handler = _HANDLERS.get(getattr(action, 'type', None))
    if handler is None:
        raise ValueError(f"Unknown action: {action!r}")
    return handler(state, action.payload, settings or _DEFAULT_SETTINGS)
