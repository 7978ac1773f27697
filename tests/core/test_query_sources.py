"""
Tests for query source discovery.
"""

import pytest

from thoughtgraph.core.search import find_query_sources


def _ids(nodes):
    return [n.node_id for n in nodes]


@pytest.mark.unit
class TestFindQuerySources:
    """Tests for find_query_sources()."""

    def test_keyword_match(self, chain_graph):
        """Test exact keyword membership matches."""
        assert _ids(find_query_sources("alpha", chain_graph.nodes)) == ["a"]

    def test_case_insensitive(self, chain_graph):
        """Test query terms are lower-cased."""
        assert _ids(find_query_sources("ALPHA", chain_graph.nodes)) == ["a"]

    def test_ordered_by_match_count(self, chain_graph):
        """Test nodes matching more terms come first, ties in graph order."""
        assert _ids(find_query_sources("shared alpha", chain_graph.nodes)) == ["a", "b", "c"]

    def test_summary_substring(self, chain_graph):
        """Test terms match inside titles and summaries."""
        assert _ids(find_query_sources("summary", chain_graph.nodes)) == ["a", "b", "c", "d"]

    def test_keyword_prefix_does_not_match(self, chain_graph):
        """Test keywords must match whole."""
        assert find_query_sources("alp", chain_graph.nodes) == []

    @pytest.mark.parametrize("query", ["", "   "])
    def test_empty_query(self, chain_graph, query):
        """Test empty queries have no sources."""
        assert find_query_sources(query, chain_graph.nodes) == []
