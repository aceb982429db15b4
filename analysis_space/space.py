"""
Analysis Space Facade

Single integration point for the host application.

BOUNDARY ENFORCEMENT:
=====================
The host imports ONLY this facade (and the contracts it returns).
The host NEVER dispatches to the store or drives the phase controller directly.

WHY A FACADE:
=============
1. Single point of integration
2. Wires store, engines and panels from one AnalysisSpaceConfig
3. Keeps host callbacks behind the gesture controller's error recording
"""

from __future__ import annotations
from typing import Any, Optional, Sequence, Tuple
import logging

import numpy as np

from .clustering.engine import ClusteringEngine
from .clustering.export import build_cluster_labels
from .config import AnalysisSpaceConfig
from .contracts.base import ContainerBounds, ContainerDimensions, Point, SidePanelType
from .contracts.clusters import ClusteringResult, ClusterLabel
from .contracts.network import NetworkData
from .panels.content import PanelContent, content_factory, select_cluster
from .panels.phase import PanelPhase, PhaseController
from .panels.scheduling import Scheduler, default_scheduler
from .presentation.graph import NetworkGraphView, build_graph_view
from .state import actions
from .state.reducer import AnalysisSpaceState
from .state.store import AnalysisStore, Listener, Unsubscribe
from .transform.mapper import (
    CardInput, NetworkDataCache, NetworkMapper, RelationshipInput, TransformReport
)
from .viewport.engine import ViewportEngine
from .viewport.gestures import EdgeCallback, GestureController, NodeCallback, WheelEvent

LOGGER = logging.getLogger(__name__)


class AnalysisSpace:
    """
    One mounted analysis space.

    USAGE:
    ======
    ```python
    space = AnalysisSpace(scheduler=ManualScheduler(), on_node_select=open_card)
    space.load(cards, relationships, board_id="board-1")

    space.toggle_panel(SidePanelType.CLUSTERING)
    view = space.graph_view()
    labels = space.cluster_labels()
    ```

    GUARANTEES:
    ===========
    1. Identical card/relationship sequences are transformed once
    2. Switching boards resets the canvas state
    3. After unmount() no panel holds a store subscription
    """

    def __init__(
        self,
        config: Optional[AnalysisSpaceConfig] = None,
        scheduler: Optional[Scheduler] = None,
        on_node_select: Optional[NodeCallback] = None,
        on_node_double_click: Optional[NodeCallback] = None,
        on_edge_click: Optional[EdgeCallback] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self._config = config or AnalysisSpaceConfig()
        self._store = AnalysisStore(settings=self._config.viewport)
        self._viewport = ViewportEngine(self._config.viewport)

        layout_rng = rng if rng is not None else np.random.default_rng(self._config.layout.seed)
        self._transform = NetworkDataCache(
            NetworkMapper(rng=layout_rng, layout_extent=self._config.layout.extent)
        )
        self._clustering = ClusteringEngine(self._config.clustering)

        self._gestures = GestureController(
            self._store,
            self._viewport,
            on_node_select=on_node_select,
            on_node_double_click=on_node_double_click,
            on_edge_click=on_edge_click,
        )
        self._panels = PhaseController(
            self._store,
            scheduler or default_scheduler(),
            factory=content_factory(self._store, self._clustering),
            settle_delay=self._config.panels.settle_delay_seconds,
        )

        self._board_id: Optional[str] = None
        self._nest_id: Optional[str] = None
        self._report: Optional[TransformReport] = None
        self._mounted = True

        self._apply_clustering_defaults()
        self._panels.activate()

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def state(self) -> AnalysisSpaceState:
        return self._store.state

    @property
    def store(self) -> AnalysisStore:
        return self._store

    @property
    def gestures(self) -> GestureController:
        return self._gestures

    @property
    def panel_phase(self) -> PanelPhase:
        return self._panels.phase

    @property
    def panel_content(self) -> Optional[PanelContent]:
        return self._panels.content

    @property
    def last_report(self) -> Optional[TransformReport]:
        return self._report

    @property
    def board_id(self) -> Optional[str]:
        return self._board_id

    @property
    def nest_id(self) -> Optional[str]:
        return self._nest_id

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    def subscribe(self, listener: Listener) -> Unsubscribe:
        return self._store.subscribe(listener)

    # =========================================================================
    # DATA
    # =========================================================================

    def load(
        self,
        cards: Sequence[CardInput],
        relationships: Sequence[RelationshipInput],
        board_id: Optional[str] = None,
        nest_id: Optional[str] = None,
    ) -> NetworkData:
        """
        Transform and publish board data.

        Pass the same sequence objects to skip the transform. A different
        board_id than the previous load resets the canvas state first.
        """
        if self._board_id is not None and board_id != self._board_id:
            LOGGER.info("Board changed from %s to %s; resetting network state", self._board_id, board_id)
            self._store.dispatch(actions.reset_network_state())
        self._board_id = board_id
        self._nest_id = nest_id

        result = self._transform.get(cards, relationships)
        self._report = result.report
        if result.data is not self._store.state.network_data:
            self._store.dispatch(actions.set_network_data(result.data))
        return result.data

    def set_filters(self, **changes: Any) -> None:
        self._store.dispatch(actions.set_filters(**changes))

    def configure_clustering(self, **changes: Any) -> None:
        self._store.dispatch(actions.set_clustering_config(**changes))

    def set_container_dimensions(self, width: float, height: float) -> None:
        self._store.dispatch(actions.set_container_dimensions(ContainerDimensions(width, height)))

    def highlight(self, node_ids: Sequence[str]) -> None:
        self._store.dispatch(actions.highlight_nodes(node_ids))

    # =========================================================================
    # GESTURES
    # =========================================================================

    def pointer_down(self, x: float, y: float) -> None:
        self._gestures.pointer_down(Point(x, y))

    def pointer_move(self, x: float, y: float) -> None:
        self._gestures.pointer_move(Point(x, y))

    def pointer_up(self, x: float, y: float) -> None:
        self._gestures.pointer_up(Point(x, y))

    def wheel(self, event: WheelEvent, bounds: ContainerBounds) -> None:
        self._gestures.wheel(event, bounds)

    def click(self, x: float, y: float) -> Optional[str]:
        return self._gestures.click(Point(x, y))

    def double_click(self, x: float, y: float) -> Optional[str]:
        return self._gestures.double_click(Point(x, y))

    def edge_at(self, x: float, y: float) -> Optional[str]:
        return self._gestures.edge_at(Point(x, y))

    # =========================================================================
    # VIEWS
    # =========================================================================

    def graph_view(self) -> NetworkGraphView:
        state = self._store.state
        return build_graph_view(state.network_data, state, self._viewport)

    def toggle_panel(self, panel: SidePanelType) -> None:
        self._panels.toggle(panel)

    def close_panel(self) -> None:
        self._panels.close()

    # =========================================================================
    # CLUSTERING
    # =========================================================================

    def run_clustering(self) -> Optional[ClusteringResult]:
        """Cluster the filtered snapshot with the current config and publish it."""
        state = self._store.state
        if state.network_data is None:
            return None
        result = self._clustering.run(
            state.network_data, state.clustering_config, state.network.active_filters
        )
        self._store.dispatch(actions.set_clustering_result(result))
        return result

    def cluster_labels(self) -> Tuple[ClusterLabel, ...]:
        result = self._store.state.clustering_result
        if result is None:
            return ()
        return build_cluster_labels(result.clusters)

    def select_cluster(self, cluster_id: str) -> Optional[str]:
        """Select the first node of `cluster_id`; None when there is no such cluster."""
        return select_cluster(self._store, cluster_id)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def reset(self) -> None:
        """Back to the freshly mounted state; loaded board data is discarded."""
        self._panels.close()
        self._store.dispatch(actions.reset())
        self._apply_clustering_defaults()
        self._transform.clear()
        self._clustering.clear()
        self._board_id = None
        self._nest_id = None
        self._report = None

    def unmount(self) -> None:
        if not self._mounted:
            return
        self._panels.dispose()
        self._transform.clear()
        self._clustering.clear()
        self._mounted = False

    def _apply_clustering_defaults(self) -> None:
        settings = self._config.clustering
        current = self._store.state.clustering_config
        if (
            current.min_cluster_size != settings.min_cluster_size
            or current.cluster_threshold != settings.cluster_threshold
        ):
            self._store.dispatch(actions.set_clustering_config(
                min_cluster_size=settings.min_cluster_size,
                cluster_threshold=settings.cluster_threshold,
            ))
