"""
Relations Analysis

Edge statistics behind the relations panel: totals, type distribution,
strength range, per-node relations, filtered edge lists and a strength
histogram.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from ..contracts.base import EdgeType
from ..contracts.network import NetworkData, NetworkEdge

ALL_TYPES = "all"
DEFAULT_MIN_STRENGTH = 0.1
DEFAULT_BINS = 10


@dataclass(frozen=True)
class RelationshipStats:
    total_edges: int
    avg_strength: float
    type_distribution: Tuple[Tuple[str, int], ...]  # first-seen order
    strength_min: float
    strength_max: float


@dataclass(frozen=True)
class TypeShare:
    type: str
    count: int
    percentage: float


@dataclass(frozen=True)
class HistogramBin:
    start: float
    end: float
    count: int
    percentage: float

    @property
    def label(self) -> str:
        return f"{self.start:.2f}-{self.end:.2f}"


def relationship_stats(data: Optional[NetworkData]) -> Optional[RelationshipStats]:
    """None when there is nothing to summarize."""
    if data is None or not data.edges:
        return None
    strengths = np.array([e.strength for e in data.edges], dtype=float)
    types = Counter(e.type.value for e in data.edges)
    return RelationshipStats(
        total_edges=len(data.edges),
        avg_strength=float(strengths.mean()),
        type_distribution=tuple(types.items()),
        strength_min=float(strengths.min()),
        strength_max=float(strengths.max()),
    )


def node_relations(data: Optional[NetworkData], node_id: Optional[str]) -> Tuple[NetworkEdge, ...]:
    if data is None or node_id is None:
        return ()
    return tuple(e for e in data.edges if e.touches(node_id))


def filter_relations(
    data: Optional[NetworkData],
    edge_type: Union[str, EdgeType] = ALL_TYPES,
    min_strength: float = DEFAULT_MIN_STRENGTH,
    connected_to: Optional[str] = None,
) -> Tuple[NetworkEdge, ...]:
    """
    Edges of `edge_type` (or any type for "all") at or above `min_strength`,
    optionally restricted to those touching `connected_to`.
    """
    if data is None:
        return ()
    wanted = None if edge_type == ALL_TYPES else EdgeType(edge_type)
    return tuple(
        e for e in data.edges
        if (wanted is None or e.type is wanted)
        and e.strength >= min_strength
        and (connected_to is None or e.touches(connected_to))
    )


def strength_histogram(
    edges: Sequence[NetworkEdge],
    lo: float,
    hi: float,
    bins: int = DEFAULT_BINS,
) -> Tuple[HistogramBin, ...]:
    """
    Equal-width bins over [lo, hi]; the last bin includes `hi`.

    A zero-width range puts every in-range edge into the first bin.
    """
    strengths = np.array([e.strength for e in edges], dtype=float)
    total = len(strengths)
    width = (hi - lo) / bins
    edges_at = [lo + i * width for i in range(bins + 1)]

    if hi > lo:
        counts, _ = np.histogram(strengths, bins=bins, range=(lo, hi))
    else:
        counts = np.zeros(bins, dtype=int)
        counts[0] = int(np.count_nonzero(strengths == lo))

    return tuple(
        HistogramBin(
            start=edges_at[i],
            end=edges_at[i + 1],
            count=int(counts[i]),
            percentage=(int(counts[i]) / total * 100.0) if total else 0.0,
        )
        for i in range(bins)
    )


def type_chart(stats: Optional[RelationshipStats]) -> Tuple[TypeShare, ...]:
    if stats is None or not stats.total_edges:
        return ()
    return tuple(
        TypeShare(type=kind, count=count, percentage=count / stats.total_edges * 100.0)
        for kind, count in stats.type_distribution
    )
