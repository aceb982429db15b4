"""
Cluster Label Export

Converts clusters into the ClusterLabel records consumed by theory
building. Tag and type frequencies are counted over member nodes; ties
keep first-seen order.
"""

from __future__ import annotations
from collections import Counter
from typing import Iterable, Tuple

from ..contracts.clusters import Cluster, ClusterLabel, ClusterLabelMetadata

DOMINANT_COUNT = 3


def _top(values: Iterable[str], count: int = DOMINANT_COUNT) -> Tuple[str, ...]:
    return tuple(value for value, _ in Counter(values).most_common(count))


def build_cluster_label(cluster: Cluster) -> ClusterLabel:
    dominant_tags = _top(tag for node in cluster.nodes for tag in node.tags)
    dominant_types = _top(node.type.value for node in cluster.nodes)
    confidence = min(1.0, max(0.0, (cluster.density + cluster.cohesion) / 2.0))
    return ClusterLabel(
        id=cluster.id,
        text=cluster.name,
        position=cluster.center,
        theme=dominant_tags[0] if dominant_tags else cluster.name,
        confidence=confidence,
        card_ids=cluster.node_ids,
        metadata=ClusterLabelMetadata(
            dominant_tags=dominant_tags,
            dominant_types=dominant_types,
            card_count=cluster.size,
        ),
    )


def build_cluster_labels(clusters: Iterable[Cluster]) -> Tuple[ClusterLabel, ...]:
    return tuple(build_cluster_label(c) for c in clusters)
