"""
Transform Layer

Host cards/relationships -> NetworkData, plus filter application.
Stateless apart from the identity memo in NetworkDataCache.
"""

from .mapper import (
    NetworkMapper, NetworkDataCache, TransformReport, TransformResult,
    map_network, to_network_data
)
from .filters import apply_filters, node_passes, edge_passes, strong_edges

__all__ = [
    'NetworkMapper', 'NetworkDataCache', 'TransformReport', 'TransformResult',
    'map_network', 'to_network_data',
    'apply_filters', 'node_passes', 'edge_passes', 'strong_edges',
]
