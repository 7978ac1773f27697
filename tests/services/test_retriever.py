"""
Tests for content retrieval and context formatting.
"""

import pytest

from thoughtgraph.core.hierarchy import HierarchyBuilder
from thoughtgraph.models import GraphIndex, GraphNodeType, RetrievedContent, TreeIndex, TreeNode
from thoughtgraph.services import Retriever
from thoughtgraph.utils.exceptions import NotFoundError


@pytest.fixture
def retriever():
    return Retriever()


@pytest.fixture
def sample_tree(id_generator, clock, sample_document):
    return HierarchyBuilder(id_generator=id_generator, clock=clock).build_tree(
        sample_document, "User Guide"
    )


@pytest.mark.unit
class TestRetrieveContent:
    """Tests for Retriever.retrieve_content()."""

    def test_tree_nodes_in_given_order(self, retriever, sample_tree):
        """Test tree nodes contribute their text in selection order."""
        contents = retriever.retrieve_content(sample_tree, ["node_6", "node_3"])

        assert [c.title for c in contents] == ["Endpoints", "Installation"]
        assert contents[1].text.startswith("## Installation")
        assert "installation wizard" in contents[1].text
        assert contents[0].relevance_score is None

    def test_graph_nodes_with_scores(self, retriever, chain_graph):
        """Test graph nodes contribute content and carry their scores."""
        contents = retriever.retrieve_content(chain_graph, ["a", "b"], {"a": 0.9})

        assert contents[0].text == "Content of a"
        assert contents[0].summary == "Summary of a"
        assert contents[0].relevance_score == 0.9
        assert contents[1].relevance_score is None

    def test_unknown_tree_node(self, retriever, sample_tree):
        """Test unknown ids raise NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            retriever.retrieve_content(sample_tree, ["missing"])
        assert exc_info.value.context == {"index": "User Guide"}

    def test_unknown_graph_node(self, retriever, chain_graph):
        """Test unknown graph ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            retriever.retrieve_content(chain_graph, ["a", "z"])

    def test_empty_selection(self, retriever, chain_graph):
        """Test no ids give no content."""
        assert retriever.retrieve_content(chain_graph, []) == []


@pytest.mark.unit
class TestFormatting:
    """Tests for context formatting and full-text collection."""

    def test_format_context(self):
        """Test markdown blocks separated by blank lines."""
        contents = [
            RetrievedContent(node_id="1", title="One", text="first"),
            RetrievedContent(node_id="2", title="Two", text="second"),
        ]
        assert Retriever.format_context(contents) == "### One\nfirst\n\n### Two\nsecond"

    def test_format_empty_context(self):
        """Test no content gives an empty context."""
        assert Retriever.format_context([]) == ""

    def test_collect_tree_text(self, sample_tree, sample_document):
        """Test every node contributes a titled block in pre-order."""
        text = Retriever.collect_all_text(sample_tree)

        assert text.startswith(f"## User Guide\n{sample_document}\n\n## Getting Started\n")
        assert "\n\n## Installation\n## Installation\n\nDownload the installer" in text
        assert text.endswith(
            "## Endpoints\n## Endpoints\n\nEach endpoint accepts JSON requests and returns JSON responses."
        )
        root_block = f"## User Guide\n{sample_document}"
        titles = ["Getting Started", "Installation", "Configuration", "API Reference", "Endpoints"]
        offsets = [text.index(f"\n\n## {title}\n", len(root_block)) for title in titles]
        assert offsets == sorted(offsets)

    def test_collect_tree_text_uses_summary(self):
        """Test nodes without text fall back to their summary."""
        child = TreeNode(node_id="n2", title="Child", text="child text", start_index=1, end_index=1)
        root = TreeNode(
            node_id="n1",
            title="Root",
            summary="root summary",
            start_index=0,
            end_index=1,
            children=[child],
        )
        tree = TreeIndex(title="T", nodes=[root])

        assert Retriever.collect_all_text(tree) == "## Root\nroot summary\n\n## Child\nchild text"

    def test_collect_tree_text_skips_empty_nodes(self):
        """Test nodes with neither text nor summary are left out."""
        child = TreeNode(node_id="n2", title="Child", text="body", start_index=1, end_index=1)
        root = TreeNode(node_id="n1", title="Root", start_index=0, end_index=1, children=[child])

        assert Retriever.collect_all_text(TreeIndex(title="T", nodes=[root])) == "## Child\nbody"

    def test_collect_graph_text(self, make_node):
        """Test graph text comes from the document root."""
        root = make_node("r", node_type=GraphNodeType.DOCUMENT)
        graph = GraphIndex(title="G", nodes=[root, make_node("s")])
        assert Retriever.collect_all_text(graph) == "Content of r"

    def test_collect_empty_indexes(self):
        """Test empty indexes give empty text."""
        assert Retriever.collect_all_text(TreeIndex(title="T")) == ""
        assert Retriever.collect_all_text(GraphIndex(title="G")) == ""
