"""
Panels Layer

Side-panel phase state machine, schedulers, panel content and the
relations analysis behind the relations panel.
"""

from .relations import (
    RelationshipStats, TypeShare, HistogramBin,
    relationship_stats, node_relations, filter_relations, strength_histogram, type_chart
)
from .scheduling import (
    Scheduler, ManualScheduler, AsyncioScheduler, ImmediateScheduler, ScheduledCall,
    default_scheduler
)
from .content import (
    PanelContent, RelationsPanel, ClusteringPanel, PlaceholderPanel, content_factory,
    select_cluster
)
from .phase import PanelPhase, PhaseController

__all__ = [
    'RelationshipStats', 'TypeShare', 'HistogramBin',
    'relationship_stats', 'node_relations', 'filter_relations', 'strength_histogram', 'type_chart',
    'Scheduler', 'ManualScheduler', 'AsyncioScheduler', 'ImmediateScheduler', 'ScheduledCall',
    'default_scheduler',
    'PanelContent', 'RelationsPanel', 'ClusteringPanel', 'PlaceholderPanel', 'content_factory',
    'select_cluster',
    'PanelPhase', 'PhaseController',
]
