"""
Hierarchy builder - nested section trees from leveled segments.

Transforms the segmenter's flat output into a "table of contents":
a synthetic document root whose children are the outermost sections,
with deeper-level sections nested under the closest preceding section
of a lower level.
"""

from collections.abc import Callable
from datetime import UTC, datetime

from thoughtgraph.config import SegmenterConfig
from thoughtgraph.core.segmenter import Segmenter
from thoughtgraph.core.tokenizer import summarize
from thoughtgraph.models.tree import DocumentSource, Segment, SourceType, TreeIndex, TreeNode
from thoughtgraph.utils.id_generator import IdGenerator, UuidIdGenerator
from thoughtgraph.utils.logger import get_logger

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class HierarchyBuilder:
    """
    Builds TreeIndex values from plain text.

    Usage:
        builder = HierarchyBuilder()
        tree = builder.build_tree(text, "User Guide", "Product manual")
    """

    def __init__(
        self,
        config: SegmenterConfig | None = None,
        id_generator: IdGenerator | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """
        Initialize hierarchy builder.

        Args:
            config: Segmentation configuration (heading patterns, summary length)
            id_generator: Node id source; a fresh UUID generator per builder by default
            clock: Timestamp source for created_at
        """
        self.config = config or SegmenterConfig()
        self.segmenter = Segmenter(self.config)
        self.id_generator = id_generator or UuidIdGenerator()
        self.clock = clock

    def build_tree(
        self,
        text: str,
        title: str,
        description: str | None = None,
        source_type: SourceType = SourceType.TEXT,
        source_path: str | None = None,
    ) -> TreeIndex:
        """
        Segment text and build its section tree.

        Args:
            text: Plain document text
            title: Document title (becomes the root node title)
            description: Optional document description
            source_type: Format the text was extracted from
            source_path: Optional path of the source file

        Returns:
            TreeIndex with a single document root, or no nodes for empty text
        """
        segments = self.segmenter.segment(text)
        nodes = self.build_nodes(segments, title)

        tree = TreeIndex(
            title=title,
            description=description,
            nodes=nodes,
            created_at=self.clock(),
            source=DocumentSource(type=source_type, path=source_path),
        )
        logger.info(
            f"Built tree '{title}': {count_nodes(tree.nodes)} nodes, "
            f"depth {max_depth(tree.nodes)}"
        )
        return tree

    def build_nodes(self, segments: list[Segment], title: str) -> list[TreeNode]:
        """
        Wrap the section hierarchy in a synthetic document root.

        Args:
            segments: Leveled segments in document order
            title: Title for the root node

        Returns:
            [root] or [] when there are no segments
        """
        if not segments:
            return []

        root_id = self.id_generator.next_id()
        children = self._partition(segments, 0, len(segments), min_level=1)
        paragraphs = [p for segment in segments for p in segment.paragraphs]

        return [
            TreeNode(
                node_id=root_id,
                title=title,
                summary=summarize(paragraphs, self.config.max_summary_length),
                text="\n\n".join(paragraphs),
                start_index=0,
                end_index=segments[-1].end_index,
                children=children,
            )
        ]

    def _partition(
        self, segments: list[Segment], lo: int, hi: int, min_level: int
    ) -> list[TreeNode]:
        """
        Recursively partition segments[lo:hi] into sibling nodes.

        Each segment takes the contiguous run of following segments with
        a strictly greater level as its children. Parents cover the
        index ranges of all their descendants.
        """
        nodes: list[TreeNode] = []
        i = lo

        while i < hi:
            segment = segments[i]
            level = segment.level or min_level

            j = i + 1
            while j < hi and segments[j].level > level:
                j += 1

            node_id = self.id_generator.next_id()
            children = self._partition(segments, i + 1, j, min_level + 1)
            end_index = children[-1].end_index if children else segment.end_index

            nodes.append(
                TreeNode(
                    node_id=node_id,
                    title=segment.title,
                    summary=summarize(segment.paragraphs, self.config.max_summary_length),
                    text=segment.text,
                    start_index=segment.start_index,
                    end_index=max(end_index, segment.end_index),
                    children=children,
                )
            )
            i = j

        return nodes


def count_nodes(nodes: list[TreeNode]) -> int:
    """Total number of nodes in a forest."""
    return sum(1 + count_nodes(node.children) for node in nodes)


def max_depth(nodes: list[TreeNode]) -> int:
    """Depth of the deepest node; top-level nodes have depth 1."""
    if not nodes:
        return 0
    return 1 + max(max_depth(node.children) for node in nodes)


def flatten_tree(nodes: list[TreeNode], depth_limit: int | None = None) -> list[TreeNode]:
    """
    Pre-order list of all nodes.

    Args:
        nodes: Root nodes
        depth_limit: Optional maximum depth to include (roots are depth 1)
    """
    result: list[TreeNode] = []

    def traverse(node_list: list[TreeNode], depth: int) -> None:
        if depth_limit is not None and depth > depth_limit:
            return
        for node in node_list:
            result.append(node)
            traverse(node.children, depth + 1)

    traverse(nodes, 1)
    return result


def find_node(nodes: list[TreeNode], node_id: str) -> TreeNode | None:
    """Find a node by id anywhere in the forest."""
    for node in flatten_tree(nodes):
        if node.node_id == node_id:
            return node
    return None


def find_nodes_by_title(nodes: list[TreeNode], title_query: str) -> list[TreeNode]:
    """Nodes whose title contains title_query (case-insensitive)."""
    query = title_query.lower()
    return [node for node in flatten_tree(nodes) if query in node.title.lower()]


def format_tree_structure(nodes: list[TreeNode]) -> str:
    """Indented outline of titles and ids, for inspection and debugging."""
    lines: list[str] = []

    def format_node(node: TreeNode, indent: int) -> None:
        lines.append(f"{'  ' * indent}- {node.title} [{node.node_id}]")
        for child in node.children:
            format_node(child, indent + 1)

    for node in nodes:
        format_node(node, 0)
    return "\n".join(lines)


def tree_stats(tree: TreeIndex) -> dict:
    """Summary statistics of a tree index."""
    return {
        "node_count": count_nodes(tree.nodes),
        "max_depth": max_depth(tree.nodes),
        "title": tree.title,
        "created_at": tree.created_at.isoformat(),
    }
