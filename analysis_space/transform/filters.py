"""
Network Filtering

Applies a FilterConfig to a NetworkData snapshot. Pure, returns a new
snapshot; edges survive only when both endpoints survive.
"""

from __future__ import annotations
from typing import Iterable

from ..contracts.network import NetworkData, NetworkEdge, NetworkNode
from ..contracts.view import FilterConfig


def node_passes(node: NetworkNode, filters: FilterConfig) -> bool:
    if filters.types and node.type not in filters.types:
        return False
    if filters.tags and not set(filters.tags).intersection(node.tags):
        return False
    return True


def edge_passes(edge: NetworkEdge, filters: FilterConfig) -> bool:
    if filters.relationships and edge.type not in filters.relationships:
        return False
    return edge.strength >= filters.strength_threshold


def apply_filters(data: NetworkData, filters: FilterConfig) -> NetworkData:
    """Return the sub-network selected by `filters`."""
    if filters.is_open:
        return data
    nodes = tuple(n for n in data.nodes if node_passes(n, filters))
    kept = {n.id for n in nodes}
    edges = tuple(
        e for e in data.edges
        if e.source in kept and e.target in kept and edge_passes(e, filters)
    )
    return NetworkData(nodes=nodes, edges=edges)


def strong_edges(edges: Iterable[NetworkEdge], threshold: float) -> tuple:
    """Edges at or above the strength threshold (weight filtering)."""
    return tuple(e for e in edges if e.strength >= threshold)
