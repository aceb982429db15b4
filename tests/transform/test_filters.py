"""Filter application tests."""

from analysis_space.contracts import EdgeType, FilterConfig, NodeType
from analysis_space.transform import apply_filters, strong_edges
from tests.fixtures import make_data, make_edge, make_node


def sample():
    nodes = [
        make_node("q", tags=("ux",), node_type=NodeType.QUESTIONS),
        make_node("i", tags=("ux", "pricing"), node_type=NodeType.INSIGHTS),
        make_node("t", tags=("pricing",), node_type=NodeType.THEMES),
    ]
    edges = [
        make_edge("q", "i", 0.9, EdgeType.SEMANTIC),
        make_edge("i", "t", 0.2, EdgeType.MANUAL),
        make_edge("q", "t", 0.5, EdgeType.DERIVED),
    ]
    return make_data(nodes, edges)


class TestApplyFilters:

    def test_open_filter_returns_same_snapshot(self):
        data = sample()
        assert apply_filters(data, FilterConfig(strength_threshold=0.0)) is data

    def test_default_threshold_drops_weak_edges(self):
        filtered = apply_filters(sample(), FilterConfig())
        assert {e.strength for e in filtered.edges} == {0.9, 0.5}
        assert len(filtered.nodes) == 3

    def test_type_filter_drops_edges_of_removed_nodes(self):
        filtered = apply_filters(
            sample(), FilterConfig(types=(NodeType.QUESTIONS, NodeType.INSIGHTS), strength_threshold=0.0)
        )
        assert filtered.node_ids == ("q", "i")
        assert [(e.source, e.target) for e in filtered.edges] == [("q", "i")]

    def test_tag_filter_matches_any_tag(self):
        filtered = apply_filters(sample(), FilterConfig(tags=("pricing",), strength_threshold=0.0))
        assert filtered.node_ids == ("i", "t")

    def test_relationship_filter(self):
        filtered = apply_filters(
            sample(), FilterConfig(relationships=(EdgeType.DERIVED,), strength_threshold=0.0)
        )
        assert [e.type for e in filtered.edges] == [EdgeType.DERIVED]

    def test_merged_is_partial(self):
        config = FilterConfig().merged({'tags': ['ux']})
        assert config.tags == ("ux",)
        assert config.strength_threshold == 0.3


def test_strong_edges_keeps_threshold_inclusive():
    edges = sample().edges
    assert [e.strength for e in strong_edges(edges, 0.5)] == [0.9, 0.5]
