"""
Network Mapping Tests
=====================

Tests for the card/relationship -> NetworkData transform.

MAPPING RULES VERIFIED:
=======================
1. One node per card, first occurrence wins
2. Relationships with unknown endpoints are dropped and counted
3. Bad values are repaired with defaults and recorded as errors
4. Missing positions come from the injected Generator
5. Inputs are never mutated
"""

import copy

import numpy as np
import pytest

from analysis_space.contracts import EdgeType, ErrorCode, NodeType, derive_edge_id
from analysis_space.transform import (
    NetworkDataCache, NetworkMapper, map_network, to_network_data
)
from tests.fixtures import board_cards, board_relationships


class TestCardMapping:

    def test_one_node_per_card(self):
        data = to_network_data(board_cards(), board_relationships())
        assert data.node_ids == ("c1", "c2", "c3", "c4")

    def test_column_type_is_case_insensitive(self):
        data = to_network_data(board_cards(), ())
        assert data.node_index["c3"].type is NodeType.THEMES
        assert data.node_index["c1"].type is NodeType.QUESTIONS

    def test_unknown_column_type_falls_back_to_inbox(self):
        result = map_network([{'id': 'x', 'x': 1, 'y': 1, 'column_type': 'BACKLOG'}], ())
        assert result.data.nodes[0].type is NodeType.INBOX
        assert [e.code for e in result.report.errors] == [ErrorCode.UNKNOWN_NODE_TYPE]

    def test_missing_column_type_is_not_an_error(self):
        result = map_network([{'id': 'x', 'x': 1, 'y': 1}], ())
        assert result.data.nodes[0].type is NodeType.INBOX
        assert result.report.is_clean

    def test_size_follows_tag_count(self):
        data = to_network_data(board_cards(), ())
        assert data.node_index["c1"].size == 4.0
        assert data.node_index["c3"].size == 2.0
        assert data.node_index["c4"].size == 2.0

    def test_title_defaults(self):
        data = to_network_data([{'id': 'x', 'x': 0, 'y': 0}], ())
        assert data.nodes[0].title == "Untitled"

    def test_metadata_carries_card_details(self):
        data = to_network_data(
            [{'id': 'x', 'x': 0, 'y': 0, 'description': 'notes', 'created_at': '2024-01-01'}], ()
        )
        assert data.nodes[0].metadata['description'] == 'notes'
        assert data.nodes[0].metadata['created_at'] == '2024-01-01'

    def test_duplicate_card_keeps_first(self):
        cards = [
            {'id': 'dup', 'x': 1, 'y': 1, 'title': 'first'},
            {'id': 'dup', 'x': 2, 'y': 2, 'title': 'second'},
        ]
        result = map_network(cards, ())
        assert len(result.data.nodes) == 1
        assert result.data.nodes[0].title == 'first'
        assert result.report.duplicate_cards == 1


class TestPositioning:

    def test_zero_is_a_valid_coordinate(self):
        result = map_network([{'id': 'origin', 'x': 0, 'y': 0}], ())
        node = result.data.nodes[0]
        assert (node.x, node.y) == (0.0, 0.0)
        assert result.report.positioned_nodes == 0

    @pytest.mark.parametrize("bad", [None, "abc", float('nan'), float('inf')])
    def test_unusable_coordinates_are_assigned(self, bad):
        result = map_network([{'id': 'n', 'x': bad, 'y': 5}], (), rng=np.random.default_rng(1))
        node = result.data.nodes[0]
        assert 0.0 <= node.x < 1000.0
        assert node.y == 5.0
        assert result.report.positioned_nodes == 1
        assert result.report.errors[0].code is ErrorCode.MISSING_COORDINATES

    def test_seeded_layout_is_reproducible(self):
        cards = [{'id': f"n{i}"} for i in range(20)]
        first = to_network_data(cards, (), rng=np.random.default_rng(42))
        second = to_network_data(cards, (), rng=np.random.default_rng(42))
        assert [(n.x, n.y) for n in first.nodes] == [(n.x, n.y) for n in second.nodes]

    def test_layout_extent_bounds_positions(self):
        mapper = NetworkMapper(rng=np.random.default_rng(3), layout_extent=50.0)
        data = mapper.map([{'id': f"n{i}"} for i in range(30)], ()).data
        assert all(0.0 <= n.x < 50.0 and 0.0 <= n.y < 50.0 for n in data.nodes)


class TestRelationshipMapping:

    def test_relationship_types(self):
        data = to_network_data(board_cards(), board_relationships())
        by_id = {e.id: e for e in data.edges}
        assert by_id[derive_edge_id("c1", "c2")].type is EdgeType.SEMANTIC
        assert by_id[derive_edge_id("c2", "c3")].type is EdgeType.DERIVED
        assert by_id[derive_edge_id("c1", "c3")].type is EdgeType.MANUAL
        assert by_id[derive_edge_id("c3", "c4")].type is EdgeType.MANUAL

    def test_unknown_relationship_kind_is_manual(self):
        data = to_network_data(
            board_cards(),
            [{'card_id': 'c1', 'related_card_id': 'c2', 'relationship_type': 'telepathy'}],
        )
        assert data.edges[0].type is EdgeType.MANUAL

    def test_dangling_relationship_dropped(self):
        rels = list(board_relationships()) + [
            {'card_id': 'c1', 'related_card_id': 'ghost', 'strength': 0.5}
        ]
        result = map_network(board_cards(), rels)
        assert len(result.data.edges) == 4
        assert result.report.dropped_relationships == 1
        assert ErrorCode.DANGLING_RELATIONSHIP in {e.code for e in result.report.errors}

    def test_duplicate_relationship_collapses(self):
        rels = [
            {'card_id': 'c1', 'related_card_id': 'c2', 'strength': 0.9},
            {'card_id': 'c1', 'related_card_id': 'c2', 'strength': 0.1},
        ]
        result = map_network(board_cards(), rels)
        assert len(result.data.edges) == 1
        assert result.data.edges[0].strength == 0.9
        assert result.report.collapsed_relationships == 1

    def test_reverse_direction_is_a_distinct_edge(self):
        rels = [
            {'card_id': 'c1', 'related_card_id': 'c2'},
            {'card_id': 'c2', 'related_card_id': 'c1'},
        ]
        assert len(to_network_data(board_cards(), rels).edges) == 2

    def test_missing_strength_defaults(self):
        data = to_network_data(board_cards(), [{'card_id': 'c1', 'related_card_id': 'c2'}])
        assert data.edges[0].strength == 0.5

    @pytest.mark.parametrize("raw, expected", [(1.7, 1.0), (-0.3, 0.0)])
    def test_strength_is_clamped(self, raw, expected):
        result = map_network(
            board_cards(), [{'card_id': 'c1', 'related_card_id': 'c2', 'strength': raw}]
        )
        assert result.data.edges[0].strength == expected
        assert result.report.errors[0].code is ErrorCode.STRENGTH_OUT_OF_RANGE

    def test_edge_id_is_deterministic(self):
        assert derive_edge_id("a", "b") == derive_edge_id("a", "b")
        assert derive_edge_id("a", "b") != derive_edge_id("b", "a")
        assert derive_edge_id("a", "b").startswith("edge_")
        assert len(derive_edge_id("a", "b")) == len("edge_") + 12


class TestPurity:

    def test_inputs_not_mutated(self):
        cards = [dict(c) for c in board_cards()]
        rels = [dict(r) for r in board_relationships()]
        before = (copy.deepcopy(cards), copy.deepcopy(rels))
        to_network_data(cards, rels)
        assert (cards, rels) == before

    def test_clean_input_reports_clean(self):
        result = map_network(board_cards(), board_relationships())
        assert result.report.is_clean
        assert result.report.node_count == 4
        assert result.report.edge_count == 4


class TestNetworkDataCache:

    def test_same_inputs_are_computed_once(self):
        cache = NetworkDataCache()
        cards, rels = board_cards(), board_relationships()
        first = cache.get(cards, rels)
        second = cache.get(cards, rels)
        assert first is second
        assert cache.computations == 1

    def test_new_sequence_recomputes(self):
        cache = NetworkDataCache()
        cards, rels = board_cards(), board_relationships()
        cache.get(cards, rels)
        cache.get(list(cards), rels)
        assert cache.computations == 2

    def test_clear_forces_recompute(self):
        cache = NetworkDataCache()
        cards, rels = board_cards(), board_relationships()
        cache.get(cards, rels)
        cache.clear()
        cache.get(cards, rels)
        assert cache.computations == 2
