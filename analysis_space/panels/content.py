"""
Panel Content
=============

Content mounted into the side panel once it reaches FULL.

LIFECYCLE:
==========
mount()   -> subscribes to the store, builds the first view model
unmount() -> unsubscribes; the content holds no store reference afterwards

A panel never outlives its subscription: after unmount() the store's
listener count is back to what it was before mount().
"""

from __future__ import annotations
from typing import Callable, Optional, Tuple, Union
import logging

from ..clustering.engine import ClusteringEngine
from ..clustering.export import build_cluster_labels
from ..clustering.metrics import clustering_stats, find_cluster_for_node
from ..contracts.base import EdgeType, SidePanelType
from ..contracts.view import ClusteringConfig, FilterConfig
from ..presentation.viewmodels import (
    NO_RELATIONSHIPS_MESSAGE, ClusteringViewModel, PlaceholderViewModel, RelationsViewModel
)
from ..state import actions
from ..state.actions import Action
from ..state.reducer import AnalysisSpaceState
from ..state.store import AnalysisStore, Unsubscribe
from .relations import (
    ALL_TYPES, DEFAULT_MIN_STRENGTH, filter_relations, node_relations,
    relationship_stats, strength_histogram, type_chart
)

LOGGER = logging.getLogger(__name__)


class PanelContent:
    """Base class: subscription bookkeeping and view-model caching."""

    panel: SidePanelType

    def __init__(self, store: AnalysisStore):
        self._store = store
        self._unsubscribe: Optional[Unsubscribe] = None
        self._view_model = None

    @property
    def is_mounted(self) -> bool:
        return self._unsubscribe is not None

    @property
    def view_model(self):
        return self._view_model

    def mount(self) -> None:
        if self.is_mounted:
            return
        self._unsubscribe = self._store.subscribe(self._on_state)
        self._on_mount(self._store.state)
        self._view_model = self.build(self._store.state)
        LOGGER.debug("Mounted %s panel", self.panel.value)

    def unmount(self) -> None:
        if self._unsubscribe is None:
            return
        self._unsubscribe()
        self._unsubscribe = None
        LOGGER.debug("Unmounted %s panel", self.panel.value)

    def _on_state(self, state: AnalysisSpaceState, action: Action) -> None:
        self._view_model = self.build(state)

    def _on_mount(self, state: AnalysisSpaceState) -> None:
        pass

    def build(self, state: AnalysisSpaceState):
        raise NotImplementedError


class PlaceholderPanel(PanelContent):
    """Theory, view and search panels are hosted elsewhere."""

    def __init__(self, store: AnalysisStore, panel: SidePanelType):
        super().__init__(store)
        self.panel = panel

    def build(self, state: AnalysisSpaceState) -> PlaceholderViewModel:
        return PlaceholderViewModel(panel=self.panel, message=f"{self.panel.value} panel")


# =============================================================================
# RELATIONS
# =============================================================================

class RelationsPanel(PanelContent):
    """Relationship statistics and the filtered edge list."""

    panel = SidePanelType.RELATIONS

    def __init__(self, store: AnalysisStore):
        super().__init__(store)
        self._edge_type = ALL_TYPES
        self._min_strength = DEFAULT_MIN_STRENGTH
        self._only_connected = False

    def set_filter(
        self,
        edge_type: Union[str, EdgeType, None] = None,
        min_strength: Optional[float] = None,
        only_connected: Optional[bool] = None,
    ) -> None:
        if edge_type is not None:
            self._edge_type = edge_type.value if isinstance(edge_type, EdgeType) else edge_type
        if min_strength is not None:
            self._min_strength = min_strength
        if only_connected is not None:
            self._only_connected = only_connected
        if self.is_mounted:
            self._view_model = self.build(self._store.state)

    def build(self, state: AnalysisSpaceState) -> Union[RelationsViewModel, PlaceholderViewModel]:
        data = state.network_data
        stats = relationship_stats(data)
        if data is None:
            return PlaceholderViewModel(panel=self.panel)
        if stats is None:
            return PlaceholderViewModel(panel=self.panel, message=NO_RELATIONSHIPS_MESSAGE)

        selected = state.network.selected_node
        connected_to = selected if self._only_connected else None
        filtered = filter_relations(data, self._edge_type, self._min_strength, connected_to)
        return RelationsViewModel(
            stats=stats,
            type_chart=type_chart(stats),
            strength_histogram=strength_histogram(
                filtered, stats.strength_min, stats.strength_max
            ),
            filtered_edges=filtered,
            selected_node_id=selected,
            selected_node_relations=node_relations(data, selected),
            edge_type=self._edge_type,
            min_strength=self._min_strength,
            only_connected=self._only_connected,
        )


# =============================================================================
# CLUSTERING
# =============================================================================

def select_cluster(store: AnalysisStore, cluster_id: str) -> Optional[str]:
    """
    Focus the canvas on a cluster by selecting its first node.

    Returns the selected node id; an unknown cluster id changes nothing.
    """
    result = store.state.clustering_result
    clusters = result.clusters if result is not None else ()
    for candidate in clusters:
        if candidate.id == cluster_id and candidate.nodes:
            node_id = candidate.nodes[0].id
            store.dispatch(actions.select_node(node_id))
            return node_id
    LOGGER.debug("No cluster %s to select", cluster_id)
    return None


class ClusteringPanel(PanelContent):
    """
    Runs the clustering engine whenever the snapshot, the clustering config
    or the active filters change and publishes the result through the store.
    """

    panel = SidePanelType.CLUSTERING

    def __init__(self, store: AnalysisStore, engine: Optional[ClusteringEngine] = None):
        super().__init__(store)
        self._engine = engine or ClusteringEngine()
        self._last_key: Optional[Tuple[str, ClusteringConfig, FilterConfig]] = None

    def _on_mount(self, state: AnalysisSpaceState) -> None:
        self._last_key = None
        self._recluster(state)

    def _on_state(self, state: AnalysisSpaceState, action: Action) -> None:
        self._recluster(state)
        super()._on_state(state, action)

    def _recluster(self, state: AnalysisSpaceState) -> None:
        data = state.network_data
        if data is None:
            self._last_key = None
            return
        filters = state.network.active_filters
        key = (data.fingerprint, state.clustering_config, filters)
        if key == self._last_key:
            return
        self._last_key = key
        result = self._engine.run(data, state.clustering_config, filters)
        self._store.dispatch(actions.set_clustering_result(result))

    def select_cluster(self, cluster_id: str) -> Optional[str]:
        return select_cluster(self._store, cluster_id)

    def build(self, state: AnalysisSpaceState) -> Union[ClusteringViewModel, PlaceholderViewModel]:
        result = state.clustering_result
        if state.network_data is None or result is None:
            return PlaceholderViewModel(panel=self.panel)
        return ClusteringViewModel(
            algorithm=result.algorithm,
            clusters=result.clusters,
            stats=result.stats or clustering_stats(result.clusters),
            labels=build_cluster_labels(result.clusters),
            selected_cluster=find_cluster_for_node(result.clusters, state.network.selected_node),
            unclustered_count=len(result.unclustered_node_ids),
            is_visible=state.network.show_clusters and result.config.show_filtered_clusters,
        )


# =============================================================================
# FACTORY
# =============================================================================

ContentFactory = Callable[[SidePanelType], PanelContent]


def content_factory(
    store: AnalysisStore,
    engine: Optional[ClusteringEngine] = None,
) -> ContentFactory:
    """Factory used by the phase controller to create panel content."""
    engine = engine or ClusteringEngine()

    def create(panel: SidePanelType) -> PanelContent:
        if panel is SidePanelType.RELATIONS:
            return RelationsPanel(store)
        if panel is SidePanelType.CLUSTERING:
            return ClusteringPanel(store, engine)
        return PlaceholderPanel(store, panel)

    return create
