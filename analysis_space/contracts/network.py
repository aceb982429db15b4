"""
Network Contracts

Immutable node/edge/snapshot types plus the host-facing input records they
are built from.

INVARIANTS:
===========
- NetworkNode.id is unique within a NetworkData
- NetworkEdge.source / target reference nodes of the same NetworkData
- NetworkEdge.id is derived from (source, target), duplicates collapse
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple
import hashlib

from .base import EdgeType, NodeType, Point


def derive_edge_id(source: str, target: str) -> str:
    """Deterministic edge identity for a (source, target) pair."""
    edge_hash = hashlib.sha256(f"{source}|{target}".encode('utf-8')).hexdigest()[:12]
    return f"edge_{edge_hash}"


def freeze_mapping(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


# =============================================================================
# HOST INPUT RECORDS
# =============================================================================

@dataclass(frozen=True)
class CardRecord:
    """
    Card as supplied by the board-data collaborator.

    Coordinates are optional; everything else is passed through loosely
    and normalized by the transform layer.
    """
    id: str
    x: Any = None
    y: Any = None
    title: Optional[str] = None
    tags: Tuple[str, ...] = ()
    column_type: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> 'CardRecord':
        tags = raw.get('tags') or ()
        if isinstance(tags, str):
            tags = (tags,)
        return cls(
            id=str(raw['id']),
            x=raw.get('x'),
            y=raw.get('y'),
            title=raw.get('title'),
            tags=tuple(str(t) for t in tags),
            column_type=raw.get('column_type'),
            description=raw.get('description'),
            created_at=raw.get('created_at'),
            updated_at=raw.get('updated_at'),
        )


@dataclass(frozen=True)
class RelationshipRecord:
    """Relationship row: card_id -> related_card_id."""
    card_id: str
    related_card_id: str
    strength: Any = None
    relationship_type: Optional[str] = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> 'RelationshipRecord':
        return cls(
            card_id=str(raw['card_id']),
            related_card_id=str(raw['related_card_id']),
            strength=raw.get('strength'),
            relationship_type=raw.get('relationship_type'),
        )


# =============================================================================
# GRAPH TYPES
# =============================================================================

@dataclass(frozen=True)
class NetworkNode:
    """One card rendered as a point in world space."""
    id: str
    x: float
    y: float
    size: float
    type: NodeType
    title: str
    tags: Tuple[str, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=lambda: freeze_mapping(None), compare=False)

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    def moved_to(self, point: Point) -> 'NetworkNode':
        return NetworkNode(
            id=self.id, x=point.x, y=point.y, size=self.size, type=self.type,
            title=self.title, tags=self.tags, metadata=self.metadata
        )


@dataclass(frozen=True)
class NetworkEdge:
    """One relationship between two nodes."""
    id: str
    source: str
    target: str
    strength: float
    type: EdgeType
    metadata: Mapping[str, Any] = field(default_factory=lambda: freeze_mapping(None), compare=False)

    def __post_init__(self):
        if not 0.0 <= self.strength <= 1.0:
            raise ValueError(f"Edge strength must be in [0, 1], got {self.strength}")

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id


@dataclass(frozen=True)
class NetworkData:
    """
    Immutable snapshot of the analyzed board.

    Rebuilt whenever the source cards/relationships change.
    """
    nodes: Tuple[NetworkNode, ...] = ()
    edges: Tuple[NetworkEdge, ...] = ()

    def __post_init__(self):
        ids = [n.id for n in self.nodes]
        if len(ids) != len(set(ids)):
            raise ValueError("NetworkData node ids must be unique")

    @cached_property
    def node_index(self) -> Dict[str, NetworkNode]:
        return {n.id: n for n in self.nodes}

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return tuple(n.id for n in self.nodes)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @cached_property
    def fingerprint(self) -> str:
        """Content hash identifying this snapshot (stale-result detection)."""
        hasher = hashlib.sha256()
        for node in self.nodes:
            hasher.update(f"n|{node.id}|{node.x:.6f}|{node.y:.6f}\n".encode('utf-8'))
        for edge in self.edges:
            hasher.update(f"e|{edge.id}|{edge.strength:.6f}\n".encode('utf-8'))
        return hasher.hexdigest()[:16]

    def get_node(self, node_id: str) -> Optional[NetworkNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def with_positions(self, overrides: Mapping[str, Point]) -> 'NetworkData':
        """Return a snapshot where overridden nodes sit at their new position."""
        if not overrides:
            return self
        return NetworkData(
            nodes=tuple(
                n.moved_to(overrides[n.id]) if n.id in overrides else n
                for n in self.nodes
            ),
            edges=self.edges,
        )
