"""
Tests for bounded multi-source path search.

Tests cover:
1. Baseline (distance-ordered) search
2. Selective (activation-ordered) search and pruning
3. Path invariants (bounds, connectivity, uniqueness)
4. Scoring helpers
5. Integrity errors
"""

import pytest

from thoughtgraph.config import GraphConfig, SearchMode
from thoughtgraph.core.search import (
    ACTIVATION_FLOOR,
    BoundedPathSearch,
    PathSearchOptions,
    activation_score,
    dynamic_edge_threshold,
    path_score,
    propagate_activation,
)
from thoughtgraph.core.search.bmssp import _build_edge_weights
from thoughtgraph.models.graph import GraphIndex
from thoughtgraph.utils.exceptions import IndexIntegrityError

BASELINE = PathSearchOptions(mode=SearchMode.BASELINE)


@pytest.fixture
def search():
    return BoundedPathSearch()


def _assert_path_invariants(graph: GraphIndex, result, options: PathSearchOptions):
    edges = {frozenset((e.source, e.target)) for e in graph.edges}
    assert len(result.paths) <= options.max_results
    for path in result.paths:
        assert len(path.node_ids) >= 2
        assert len(set(path.node_ids)) == len(path.node_ids)
        assert path.distance <= options.max_depth
        assert 0.0 <= path.path_score <= 1.0
        for a, b in zip(path.node_ids, path.node_ids[1:]):
            assert frozenset((a, b)) in edges
    signatures = ["->".join(p.node_ids) for p in result.paths]
    assert len(signatures) == len(set(signatures))
    scores = [p.path_score for p in result.paths]
    assert scores == sorted(scores, reverse=True)


@pytest.mark.unit
class TestBaselineSearch:
    """Tests for distance-ordered bounded search."""

    def test_finds_all_bounded_paths(self, search, chain_graph):
        """Test every simple path from the source within the bound is found."""
        result = search.search_graph(chain_graph, ["a"], BASELINE)

        found = {tuple(p.node_ids) for p in result.paths}
        assert found == {
            ("a", "b"),
            ("a", "c"),
            ("a", "c", "d"),
            ("a", "c", "b"),
            ("a", "b", "c"),
            ("a", "b", "c", "d"),
        }
        _assert_path_invariants(chain_graph, result, BASELINE)

    def test_max_depth_bound(self, search, chain_graph):
        """Test paths longer than max_depth are never returned."""
        options = PathSearchOptions(mode=SearchMode.BASELINE, max_depth=1.0)
        result = search.search_graph(chain_graph, ["a"], options)

        assert [p.node_ids for p in result.paths] == [["a", "b"], ["a", "c"]]
        _assert_path_invariants(chain_graph, result, options)

    def test_results_sorted_by_score(self, search, chain_graph):
        """Test heavier paths rank first."""
        options = PathSearchOptions(mode=SearchMode.BASELINE, max_depth=1.0)
        result = search.search_graph(chain_graph, ["a"], options)

        assert result.paths[0].path_score == pytest.approx(0.7 * 0.9 + 0.3 * 0.5)
        assert result.paths[1].path_score == pytest.approx(0.7 * 0.5 + 0.3 * 0.5)

    def test_distance_ordered_acceptance(self, search, chain_graph):
        """Test the shortest path is accepted first when results are capped."""
        options = PathSearchOptions(mode=SearchMode.BASELINE, max_results=1)
        result = search.search_graph(chain_graph, ["a"], options)

        assert [p.node_ids for p in result.paths] == [["a", "c"]]
        assert result.paths[0].distance == pytest.approx(0.5)

    def test_min_edge_weight(self, search, chain_graph):
        """Test edges below the minimum weight are not followed."""
        options = PathSearchOptions(mode=SearchMode.BASELINE, min_edge_weight=0.75)
        result = search.search_graph(chain_graph, ["a"], options)

        assert {tuple(p.node_ids) for p in result.paths} == {("a", "b"), ("a", "b", "c")}

    def test_edges_traversed_both_directions(self, search, chain_graph):
        """Test a stored target can reach its source."""
        options = PathSearchOptions(mode=SearchMode.BASELINE, max_depth=0.8)
        result = search.search_graph(chain_graph, ["d"], options)

        assert [p.node_ids for p in result.paths] == [["d", "c"]]

    def test_node_list_unique_in_path_order(self, search, chain_graph):
        """Test node_list holds each visited node once."""
        result = search.search_graph(chain_graph, ["a"], BASELINE)
        assert len(result.node_list) == len(set(result.node_list))
        assert set(result.node_list) == {"a", "b", "c", "d"}

    def test_duplicate_sources(self, search, chain_graph):
        """Test repeated source ids do not duplicate paths."""
        once = search.search_graph(chain_graph, ["a"], BASELINE)
        twice = search.search_graph(chain_graph, ["a", "a"], BASELINE)
        assert [p.node_ids for p in twice.paths] == [p.node_ids for p in once.paths]

    def test_multiple_sources(self, search, chain_graph):
        """Test paths may start from any source."""
        options = PathSearchOptions(mode=SearchMode.BASELINE, max_depth=0.7)
        result = search.search_graph(chain_graph, ["a", "d"], options)

        starts = {p.node_ids[0] for p in result.paths}
        assert starts == {"a", "d"}
        _assert_path_invariants(chain_graph, result, options)

    def test_no_sources(self, search, chain_graph):
        """Test an empty source list gives an empty result."""
        result = search.search_graph(chain_graph, [], BASELINE)
        assert result.paths == []
        assert result.node_list == []
        assert result.activated_node_count == 0


@pytest.mark.unit
class TestSelectiveSearch:
    """Tests for activation-ordered search."""

    def test_low_activation_pruned(self, search, chain_graph):
        """Test branches whose activation decays below the floor are dropped."""
        result = search.search_graph(chain_graph, ["a"])

        assert [p.node_ids for p in result.paths] == [["a", "b"]]
        assert result.activated_node_count == 2
        assert result.node_list == ["a", "b"]

    def test_selective_is_subset_of_baseline(self, search, chain_graph):
        """Test selective search never finds paths baseline misses."""
        selective = search.search_graph(chain_graph, ["a"])
        baseline = search.search_graph(chain_graph, ["a"], BASELINE)

        assert {tuple(p.node_ids) for p in selective.paths} <= {
            tuple(p.node_ids) for p in baseline.paths
        }

    def test_invariants(self, search, chain_graph):
        """Test path invariants hold in selective mode."""
        options = PathSearchOptions()
        _assert_path_invariants(chain_graph, search.search_graph(chain_graph, ["a", "c"]), options)

    def test_activation_decays_along_every_hop(self, search, chain_graph, monkeypatch):
        """Test each pushed neighbor's activation is at most its parent's."""
        hops = []

        def recording_propagate(base_score, edge_weight, parent_activation):
            activation = propagate_activation(base_score, edge_weight, parent_activation)
            hops.append((activation, parent_activation))
            return activation

        monkeypatch.setattr(
            "thoughtgraph.core.search.bmssp.propagate_activation", recording_propagate
        )
        search.search_graph(chain_graph, ["a"])

        assert hops
        assert all(activation <= parent for activation, parent in hops)

    def test_default_options_from_config(self, chain_graph):
        """Test options can be derived from GraphConfig."""
        options = PathSearchOptions.from_config(
            GraphConfig(max_depth=1.0, search_mode=SearchMode.BASELINE)
        )
        result = BoundedPathSearch(options).search_graph(chain_graph, ["a"])
        assert len(result.paths) == 2


@pytest.mark.unit
class TestScoringHelpers:
    """Tests for activation and scoring formulas."""

    def test_activation_score_range(self, chain_graph):
        """Test activation scores stay in [0, 1]."""
        nodes = chain_graph.nodes
        for node in nodes:
            assert 0.0 <= activation_score(node, nodes[:1]) <= 1.0

    def test_activation_score_value(self, chain_graph):
        """Test the weighted sum for a source node."""
        a = chain_graph.nodes[0]
        expected = 0.5 * 0.25 + 1.0 * 0.30 + 0.4 * 0.15 + 0.8 * 0.15 + 1.0 * 0.15
        assert activation_score(a, [a]) == pytest.approx(expected)

    def test_activation_never_increases(self):
        """Test propagated activation is bounded by the parent's."""
        for base in (0.0, 0.3, 1.0):
            for weight in (0.1, 0.5, 1.0):
                assert propagate_activation(base, weight, 0.6) <= 0.6

    def test_dynamic_threshold(self):
        """Test strong parents accept weaker edges, floored at min weight."""
        assert dynamic_edge_threshold(0.1, 1.0) == pytest.approx(0.3)
        assert dynamic_edge_threshold(0.1, 0.0) == pytest.approx(0.7)
        assert dynamic_edge_threshold(0.5, 1.0) == pytest.approx(0.5)

    def test_activation_floor(self):
        """Test the pruning floor constant."""
        assert ACTIVATION_FLOOR == 0.25

    def test_missing_centrality_defaults(self, make_node, make_edge):
        """Test nodes without centrality count as 0.5."""
        graph = GraphIndex(
            title="G",
            nodes=[make_node("x", centrality=None), make_node("y", centrality=None)],
            edges=[make_edge("x", "y", 0.9)],
        )
        score = path_score(["x", "y"], graph.node_map(), _build_edge_weights(graph))
        assert score == pytest.approx(0.7 * 0.9 + 0.3 * 0.5)


@pytest.mark.unit
class TestIntegrityErrors:
    """Tests for broken index invariants."""

    def test_unknown_source(self, search, chain_graph):
        """Test an unknown source id raises."""
        with pytest.raises(IndexIntegrityError):
            search.search_graph(chain_graph, ["missing"])

    def test_dangling_edge(self, search, make_node, make_edge):
        """Test an edge to a missing node raises."""
        graph = GraphIndex(title="G", nodes=[make_node("x")], edges=[make_edge("x", "ghost", 0.5)])
        with pytest.raises(IndexIntegrityError):
            search.search_graph(graph, ["x"])

    def test_disconnected_path(self, chain_graph):
        """Test scoring a path over a missing edge raises."""
        with pytest.raises(IndexIntegrityError):
            path_score(["a", "d"], chain_graph.node_map(), _build_edge_weights(chain_graph))
