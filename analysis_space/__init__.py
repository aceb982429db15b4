"""
Analysis Space

Interactive network analysis over board cards: transform, viewport,
clustering, state store and the phased side panel.

The host application integrates through AnalysisSpace; the sub-packages
are importable on their own for testing and reuse.
"""

from .config import AnalysisSpaceConfig, ConfigError, configure_logging
from .contracts import (
    NodeType, EdgeType, SidePanelType, ClusteringAlgorithm, Point,
    ContainerBounds, ContainerDimensions, NetworkData, NetworkNode, NetworkEdge,
    Viewport, FilterConfig, ClusteringConfig, Cluster, ClusteringResult, ClusterLabel
)
from .panels import PanelPhase, ManualScheduler, AsyncioScheduler, ImmediateScheduler
from .viewport import WheelEvent
from .space import AnalysisSpace

__version__ = "0.1.0"

__all__ = [
    'AnalysisSpace', 'AnalysisSpaceConfig', 'ConfigError', 'configure_logging',
    'NodeType', 'EdgeType', 'SidePanelType', 'ClusteringAlgorithm', 'Point',
    'ContainerBounds', 'ContainerDimensions', 'NetworkData', 'NetworkNode', 'NetworkEdge',
    'Viewport', 'FilterConfig', 'ClusteringConfig', 'Cluster', 'ClusteringResult', 'ClusterLabel',
    'PanelPhase', 'ManualScheduler', 'AsyncioScheduler', 'ImmediateScheduler', 'WheelEvent',
]
