"""
Test Fixtures

Explicit, deterministic builders for nodes, edges, snapshots and host
records. No random generation here; property tests draw their own data.
"""

from typing import Iterable, Optional, Sequence, Tuple

from analysis_space.contracts import (
    EdgeType, NetworkData, NetworkEdge, NetworkNode, NodeType, derive_edge_id
)


def make_node(
    node_id: str,
    x: float = 0.0,
    y: float = 0.0,
    tags: Sequence[str] = (),
    node_type: NodeType = NodeType.INBOX,
    size: float = 2.0,
    title: Optional[str] = None,
) -> NetworkNode:
    return NetworkNode(
        id=node_id, x=x, y=y, size=size, type=node_type,
        title=title or f"Card {node_id}", tags=tuple(tags),
    )


def make_edge(
    source: str,
    target: str,
    strength: float = 0.5,
    edge_type: EdgeType = EdgeType.MANUAL,
) -> NetworkEdge:
    return NetworkEdge(
        id=derive_edge_id(source, target), source=source, target=target,
        strength=strength, type=edge_type,
    )


def make_data(nodes: Iterable[NetworkNode], edges: Iterable[NetworkEdge] = ()) -> NetworkData:
    return NetworkData(nodes=tuple(nodes), edges=tuple(edges))


# =============================================================================
# SCENARIOS
# =============================================================================

def triangle(strength: float = 0.9) -> NetworkData:
    """Three mutually related nodes close together."""
    nodes = [make_node("a", 0, 0), make_node("b", 10, 0), make_node("c", 5, 8)]
    edges = [
        make_edge("a", "b", strength),
        make_edge("b", "c", strength),
        make_edge("a", "c", strength),
    ]
    return make_data(nodes, edges)


def scattered(count: int = 5, spacing: float = 1000.0) -> NetworkData:
    """Disconnected nodes far apart from each other."""
    return make_data(make_node(f"n{i}", i * spacing, i * spacing) for i in range(count))


def board_cards() -> Tuple[dict, ...]:
    """Host card rows as the board collaborator supplies them."""
    return (
        {'id': 'c1', 'x': 100, 'y': 100, 'title': 'Why do users churn?',
         'tags': ['churn', 'retention'], 'column_type': 'QUESTIONS'},
        {'id': 'c2', 'x': 140, 'y': 120, 'title': 'Onboarding is long',
         'tags': ['onboarding', 'churn'], 'column_type': 'INSIGHTS'},
        {'id': 'c3', 'x': 120, 'y': 160, 'title': 'Retention theme',
         'tags': ['retention'], 'column_type': 'themes'},
        {'id': 'c4', 'x': 900, 'y': 900, 'title': 'Ship checklist',
         'tags': [], 'column_type': 'ACTIONS'},
    )


def board_relationships() -> Tuple[dict, ...]:
    return (
        {'card_id': 'c1', 'related_card_id': 'c2', 'strength': 0.9,
         'relationship_type': 'semantic'},
        {'card_id': 'c2', 'related_card_id': 'c3', 'strength': 0.8,
         'relationship_type': 'tag_similarity'},
        {'card_id': 'c1', 'related_card_id': 'c3', 'strength': 0.7,
         'relationship_type': 'manual'},
        {'card_id': 'c3', 'related_card_id': 'c4', 'strength': 0.2},
    )
