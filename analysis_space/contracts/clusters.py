"""
Cluster Contracts

Computed clustering output and the export shape consumed by the
theory-building feature.

EXPORT STABILITY:
=================
ClusterLabel.to_dict() is the external contract. Its keys must not change
even when the internal Cluster representation does.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .base import ClusteringAlgorithm, Point
from .network import NetworkNode
from .view import ClusteringConfig


@dataclass(frozen=True)
class Cluster:
    """A group of nodes plus its quality metrics. Never persisted."""
    id: str
    name: str
    nodes: Tuple[NetworkNode, ...]
    center: Point
    color: str
    size: int
    density: float
    cohesion: float

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return tuple(n.id for n in self.nodes)

    def contains(self, node_id: str) -> bool:
        return any(n.id == node_id for n in self.nodes)


@dataclass(frozen=True)
class ClusteringStats:
    """Summary figures shown at the top of the clustering panel."""
    total_clusters: int
    total_nodes: int
    avg_cluster_size: float
    avg_density: float
    avg_cohesion: float
    size_distribution: Tuple[Tuple[int, int], ...]  # (cluster size, count), ascending


@dataclass(frozen=True)
class ClusteringResult:
    """
    One completed clustering run.

    network_fingerprint ties the result to the snapshot it was computed
    from; the store refuses results for any other snapshot.
    """
    algorithm: ClusteringAlgorithm
    clusters: Tuple[Cluster, ...]
    config: ClusteringConfig
    network_fingerprint: str
    unclustered_node_ids: Tuple[str, ...] = ()
    stats: Optional[ClusteringStats] = None

    @property
    def is_empty(self) -> bool:
        return not self.clusters


@dataclass(frozen=True)
class ClusterLabelMetadata:
    dominant_tags: Tuple[str, ...]
    dominant_types: Tuple[str, ...]
    card_count: int


@dataclass(frozen=True)
class ClusterLabel:
    """Cluster label exported to theory building."""
    id: str
    text: str
    position: Point
    theme: str
    confidence: float
    card_ids: Tuple[str, ...]
    metadata: ClusterLabelMetadata = field(
        default_factory=lambda: ClusterLabelMetadata((), (), 0)
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'text': self.text,
            'position': {'x': self.position.x, 'y': self.position.y},
            'theme': self.theme,
            'confidence': self.confidence,
            'cardIds': list(self.card_ids),
            'metadata': {
                'dominantTags': list(self.metadata.dominant_tags),
                'dominantTypes': list(self.metadata.dominant_types),
                'cardCount': self.metadata.card_count,
            },
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> 'ClusterLabel':
        meta = raw.get('metadata') or {}
        return cls(
            id=raw['id'],
            text=raw['text'],
            position=Point(raw['position']['x'], raw['position']['y']),
            theme=raw['theme'],
            confidence=float(raw['confidence']),
            card_ids=tuple(raw.get('cardIds') or ()),
            metadata=ClusterLabelMetadata(
                dominant_tags=tuple(meta.get('dominantTags') or ()),
                dominant_types=tuple(meta.get('dominantTypes') or ()),
                card_count=int(meta.get('cardCount', 0)),
            ),
        )
