"""
Content retrieval for selected index nodes.

Turns the node ids picked by a search into text blocks and formats
them into a single context string for a downstream prompt.
"""

from thoughtgraph.core.hierarchy import find_node, flatten_tree
from thoughtgraph.models.graph import GraphIndex
from thoughtgraph.models.search import RetrievedContent
from thoughtgraph.models.tree import TreeIndex
from thoughtgraph.utils.exceptions import NotFoundError
from thoughtgraph.utils.logger import get_logger

logger = get_logger(__name__)


class Retriever:
    """Pulls node content out of tree and graph indexes."""

    def retrieve_content(
        self,
        index: TreeIndex | GraphIndex,
        node_ids: list[str],
        scores: dict[str, float] | None = None,
    ) -> list[RetrievedContent]:
        """
        Look up the content of each selected node, in the given order.

        Tree nodes contribute their text (or summary when they have no
        text of their own); graph nodes contribute their content.

        Args:
            index: Tree or graph index the ids belong to
            node_ids: Selected node ids
            scores: Optional relevance score per node id

        Returns:
            One RetrievedContent per id

        Raises:
            NotFoundError: If an id is not a node of the index
        """
        scores = scores or {}
        contents: list[RetrievedContent] = []

        if isinstance(index, GraphIndex):
            nodes = index.node_map()
            for node_id in node_ids:
                node = nodes.get(node_id)
                if node is None:
                    raise NotFoundError(
                        f"Node not found: {node_id}", context={"index": index.title}
                    )
                contents.append(
                    RetrievedContent(
                        node_id=node.node_id,
                        title=node.title,
                        text=node.content,
                        summary=node.summary,
                        relevance_score=scores.get(node_id),
                    )
                )
        else:
            for node_id in node_ids:
                node = find_node(index.nodes, node_id)
                if node is None:
                    raise NotFoundError(
                        f"Node not found: {node_id}", context={"index": index.title}
                    )
                contents.append(
                    RetrievedContent(
                        node_id=node.node_id,
                        title=node.title,
                        text=node.text or node.summary,
                        summary=node.summary,
                        relevance_score=scores.get(node_id),
                    )
                )

        logger.debug(f"Retrieved {len(contents)} nodes from '{index.title}'")
        return contents

    @staticmethod
    def format_context(contents: list[RetrievedContent]) -> str:
        """Markdown blocks ("### title" then text), separated by blank lines."""
        return "\n\n".join(f"### {c.title}\n{c.text}" for c in contents)

    @staticmethod
    def collect_all_text(index: TreeIndex | GraphIndex) -> str:
        """
        Full text of an index.

        Trees give one "## title" block per node in pre-order, holding
        the node's text (or its summary when it has none). Graphs give
        the document root's content.
        """
        if isinstance(index, GraphIndex):
            root = index.root
            return root.content if root is not None else ""

        blocks = [
            f"## {node.title}\n{node.text or node.summary}"
            for node in flatten_tree(index.nodes)
            if node.text or node.summary
        ]
        return "\n\n".join(blocks)

