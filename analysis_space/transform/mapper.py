"""
Card to Network Mapper

Converts board cards and relationships into an immutable NetworkData.

MAPPING BOUNDARY:
=================
This is the ONLY place where host records become nodes and edges.

MAPPING RULES:
==============
1. One node per card (first occurrence of an id wins)
2. One edge per relationship whose endpoints both resolve
3. Bad values are replaced by safe defaults and recorded, never raised
4. Inputs are never mutated
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
import logging
import math

import numpy as np

from ..contracts.base import (
    DERIVED_RELATIONSHIP_KINDS, EdgeType, Error, ErrorCode, NodeType
)
from ..contracts.network import (
    CardRecord, NetworkData, NetworkEdge, NetworkNode, RelationshipRecord,
    derive_edge_id, freeze_mapping
)

LOGGER = logging.getLogger(__name__)

CardInput = Union[CardRecord, Mapping[str, Any]]
RelationshipInput = Union[RelationshipRecord, Mapping[str, Any]]

DEFAULT_LAYOUT_EXTENT = 1000.0
DEFAULT_STRENGTH = 0.5
DEFAULT_TITLE = "Untitled"


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass(frozen=True)
class TransformReport:
    """What the mapper had to repair or drop."""
    node_count: int
    edge_count: int
    dropped_relationships: int = 0
    duplicate_cards: int = 0
    collapsed_relationships: int = 0
    positioned_nodes: int = 0
    errors: Tuple[Error, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class TransformResult:
    data: NetworkData
    report: TransformReport


# =============================================================================
# MAPPER
# =============================================================================

class NetworkMapper:
    """
    Maps host cards/relationships to NetworkData.

    The RNG is only used for cards without coordinates; inject a seeded
    numpy Generator for reproducible layouts.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        layout_extent: float = DEFAULT_LAYOUT_EXTENT,
    ):
        self._rng = rng if rng is not None else np.random.default_rng()
        self._layout_extent = layout_extent

    def map(
        self,
        cards: Sequence[CardInput],
        relationships: Sequence[RelationshipInput],
    ) -> TransformResult:
        errors: List[Error] = []

        nodes: Dict[str, NetworkNode] = {}
        duplicate_cards = 0
        positioned = 0
        for raw_card in cards:
            card = _as_card(raw_card)
            if card.id in nodes:
                duplicate_cards += 1
                errors.append(Error(
                    code=ErrorCode.DUPLICATE_CARD,
                    message="Card id already mapped; keeping first occurrence",
                    context=(("card_id", card.id),)
                ))
                continue
            node, was_positioned, node_errors = self._map_card(card)
            nodes[node.id] = node
            positioned += int(was_positioned)
            errors.extend(node_errors)

        edges: Dict[str, NetworkEdge] = {}
        dropped = 0
        collapsed = 0
        for raw_rel in relationships:
            rel = _as_relationship(raw_rel)
            if rel.card_id not in nodes or rel.related_card_id not in nodes:
                dropped += 1
                errors.append(Error(
                    code=ErrorCode.DANGLING_RELATIONSHIP,
                    message="Relationship references an unknown card",
                    context=(
                        ("card_id", rel.card_id),
                        ("related_card_id", rel.related_card_id),
                    )
                ))
                continue
            edge_id = derive_edge_id(rel.card_id, rel.related_card_id)
            if edge_id in edges:
                collapsed += 1
                errors.append(Error(
                    code=ErrorCode.DUPLICATE_RELATIONSHIP,
                    message="Relationship repeats an existing pair",
                    context=(("edge_id", edge_id),)
                ))
                continue
            edge, edge_errors = self._map_relationship(edge_id, rel)
            edges[edge_id] = edge
            errors.extend(edge_errors)

        for error in errors:
            LOGGER.debug("Recovered data error %s: %s %s", error.code.name, error.message, error.context)
        if dropped or duplicate_cards or collapsed:
            LOGGER.info(
                "Network transform dropped %d relationship(s), %d duplicate card(s), "
                "collapsed %d duplicate relationship(s)",
                dropped, duplicate_cards, collapsed
            )

        data = NetworkData(nodes=tuple(nodes.values()), edges=tuple(edges.values()))
        report = TransformReport(
            node_count=len(data.nodes),
            edge_count=len(data.edges),
            dropped_relationships=dropped,
            duplicate_cards=duplicate_cards,
            collapsed_relationships=collapsed,
            positioned_nodes=positioned,
            errors=tuple(errors),
        )
        return TransformResult(data=data, report=report)

    # =========================================================================
    # CARD MAPPING
    # =========================================================================

    def _map_card(self, card: CardRecord) -> Tuple[NetworkNode, bool, List[Error]]:
        errors: List[Error] = []

        x = _coerce_coordinate(card.x)
        y = _coerce_coordinate(card.y)
        positioned = x is None or y is None
        if x is None:
            x = float(self._rng.uniform(0.0, self._layout_extent))
        if y is None:
            y = float(self._rng.uniform(0.0, self._layout_extent))
        if positioned:
            errors.append(Error(
                code=ErrorCode.MISSING_COORDINATES,
                message="Card has no usable position; assigned one",
                context=(("card_id", card.id),)
            ))

        node_type = NodeType.parse(card.column_type)
        if node_type is None:
            if card.column_type:
                errors.append(Error(
                    code=ErrorCode.UNKNOWN_NODE_TYPE,
                    message="Unknown column type; using INBOX",
                    context=(("card_id", card.id), ("column_type", str(card.column_type)))
                ))
            node_type = NodeType.INBOX

        tags = tuple(card.tags)
        node = NetworkNode(
            id=card.id,
            x=x,
            y=y,
            size=float(max(1, (len(tags) or 1) * 2)),
            type=node_type,
            title=card.title or DEFAULT_TITLE,
            tags=tags,
            metadata=freeze_mapping({
                'description': card.description,
                'created_at': card.created_at,
                'updated_at': card.updated_at,
            }),
        )
        return node, positioned, errors

    # =========================================================================
    # RELATIONSHIP MAPPING
    # =========================================================================

    def _map_relationship(
        self,
        edge_id: str,
        rel: RelationshipRecord,
    ) -> Tuple[NetworkEdge, List[Error]]:
        errors: List[Error] = []

        strength = _coerce_number(rel.strength)
        if strength is None:
            strength = DEFAULT_STRENGTH
        elif not 0.0 <= strength <= 1.0:
            errors.append(Error(
                code=ErrorCode.STRENGTH_OUT_OF_RANGE,
                message="Relationship strength clamped to [0, 1]",
                context=(("edge_id", edge_id), ("strength", str(strength)))
            ))
            strength = min(1.0, max(0.0, strength))

        edge = NetworkEdge(
            id=edge_id,
            source=rel.card_id,
            target=rel.related_card_id,
            strength=strength,
            type=_edge_type(rel.relationship_type),
            metadata=freeze_mapping({'relationship_type': rel.relationship_type}),
        )
        return edge, errors


# =============================================================================
# HELPERS
# =============================================================================

def _as_card(raw: CardInput) -> CardRecord:
    return raw if isinstance(raw, CardRecord) else CardRecord.from_mapping(raw)


def _as_relationship(raw: RelationshipInput) -> RelationshipRecord:
    if isinstance(raw, RelationshipRecord):
        return raw
    return RelationshipRecord.from_mapping(raw)


def _coerce_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _coerce_coordinate(value: Any) -> Optional[float]:
    return _coerce_number(value)


def _edge_type(raw: Optional[str]) -> EdgeType:
    if not raw:
        return EdgeType.MANUAL
    kind = raw.strip().lower()
    if kind in DERIVED_RELATIONSHIP_KINDS:
        return EdgeType.DERIVED
    try:
        return EdgeType(kind)
    except ValueError:
        return EdgeType.MANUAL


def map_network(
    cards: Sequence[CardInput],
    relationships: Sequence[RelationshipInput],
    rng: Optional[np.random.Generator] = None,
    layout_extent: float = DEFAULT_LAYOUT_EXTENT,
) -> TransformResult:
    """Map cards/relationships and report what was repaired."""
    return NetworkMapper(rng=rng, layout_extent=layout_extent).map(cards, relationships)


def to_network_data(
    cards: Sequence[CardInput],
    relationships: Sequence[RelationshipInput],
    rng: Optional[np.random.Generator] = None,
) -> NetworkData:
    """Pure transform: cards + relationships -> NetworkData."""
    return map_network(cards, relationships, rng=rng).data


# =============================================================================
# MEMOIZATION
# =============================================================================

class NetworkDataCache:
    """
    Recompute only when the input sequences change identity.

    Callers must pass referentially stable sequences; a new list with the
    same content counts as a change.
    """

    def __init__(self, mapper: Optional[NetworkMapper] = None):
        self._mapper = mapper or NetworkMapper()
        self._inputs: Optional[Tuple[Sequence[CardInput], Sequence[RelationshipInput]]] = None
        self._result: Optional[TransformResult] = None
        self._computations = 0

    def get(
        self,
        cards: Sequence[CardInput],
        relationships: Sequence[RelationshipInput],
    ) -> TransformResult:
        if (
            self._result is not None
            and self._inputs is not None
            and self._inputs[0] is cards
            and self._inputs[1] is relationships
        ):
            return self._result
        self._result = self._mapper.map(cards, relationships)
        self._inputs = (cards, relationships)
        self._computations += 1
        return self._result

    @property
    def computations(self) -> int:
        return self._computations

    def clear(self) -> None:
        self._inputs = None
        self._result = None
