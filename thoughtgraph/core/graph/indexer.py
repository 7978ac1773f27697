"""
Graph indexer - document graphs with weighted relationships.

Builds one document root plus one section node per detected heading
paragraph. The graph is flat by construction (two tiers):

- parent-child edges (weight 0.8) from the root to every section
- semantic edges between section pairs whose keyword sets overlap
  (Jaccard similarity above min_edge_weight)

Centrality (normalized degree) is precomputed per node and feeds the
activation score of the bounded path search.
"""

import re
from collections import Counter
from collections.abc import Callable
from datetime import UTC, datetime
from itertools import combinations

from thoughtgraph.config import GraphConfig, SegmenterConfig
from thoughtgraph.core.hierarchy import flatten_tree
from thoughtgraph.core.segmenter import Segmenter, split_paragraphs
from thoughtgraph.core.tokenizer import extract_keywords, jaccard_similarity, summarize
from thoughtgraph.models.graph import (
    EdgeType,
    GraphEdge,
    GraphIndex,
    GraphIndexMetadata,
    GraphNode,
    GraphNodeType,
    NodeMetadata,
    Position,
)
from thoughtgraph.models.tree import TreeIndex, TreeNode
from thoughtgraph.utils.id_generator import IdGenerator, UuidIdGenerator
from thoughtgraph.utils.logger import get_logger

logger = get_logger(__name__)

PARENT_CHILD_WEIGHT = 0.8
CENTRALITY_DEGREE_CAP = 10

_NUMBERED_START = re.compile(r"\d+\.")


def _utc_now() -> datetime:
    return datetime.now(UTC)


class GraphIndexer:
    """
    Builds GraphIndex values from plain text or from an existing tree.

    Usage:
        indexer = GraphIndexer(GraphConfig(min_edge_weight=0.1))
        graph = indexer.build_graph(text, "User Guide")
    """

    def __init__(
        self,
        config: GraphConfig | None = None,
        segmenter_config: SegmenterConfig | None = None,
        id_generator: IdGenerator | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """
        Initialize graph indexer.

        Args:
            config: Graph configuration (edge threshold, feature toggles)
            segmenter_config: Heading patterns and summary length
            id_generator: Node id source
            clock: Timestamp source for index metadata
        """
        self.config = config or GraphConfig()
        self.segmenter_config = segmenter_config or SegmenterConfig()
        self.segmenter = Segmenter(self.segmenter_config)
        self.id_generator = id_generator or UuidIdGenerator()
        self.clock = clock

    def build_graph(self, text: str, title: str, description: str | None = None) -> GraphIndex:
        """
        Create a graph index from document text.

        Every heading paragraph becomes a section node; body paragraphs
        only contribute to the document root's content.

        Args:
            text: Plain document text
            title: Document title
            description: Optional description

        Returns:
            GraphIndex (without nodes for empty text)
        """
        paragraphs = split_paragraphs(text)
        if not paragraphs:
            return self._assemble(title, description, None, [])

        max_len = self.segmenter_config.max_summary_length
        root = GraphNode(
            node_id=self.id_generator.next_id(),
            title=title,
            content="\n\n".join(paragraphs),
            summary=summarize(paragraphs, max_len),
            type=GraphNodeType.DOCUMENT,
            position=Position(start=0, end=len(paragraphs) - 1),
            metadata=NodeMetadata(level=0),
        )

        sections: list[GraphNode] = []
        for index, paragraph in enumerate(paragraphs):
            heading = self.segmenter.classify(paragraph)
            if not heading.is_heading:
                continue
            sections.append(
                GraphNode(
                    node_id=self.id_generator.next_id(),
                    title=heading.title,
                    content=paragraph,
                    summary=summarize([paragraph], max_len),
                    type=GraphNodeType.SECTION,
                    position=Position(start=index, end=index),
                    metadata=NodeMetadata(
                        level=heading.level, keywords=extract_keywords(paragraph)
                    ),
                )
            )

        return self._assemble(title, description, root, sections)

    def build_graph_from_tree(self, tree: TreeIndex) -> GraphIndex:
        """
        Convert a tree index into the flat two-tier graph shape.

        Node ids are kept. Every tree node below the document root
        becomes a section node; nesting depth is kept as metadata level.

        Args:
            tree: Tree index to convert

        Returns:
            GraphIndex with the same edges rules as build_graph
        """
        if tree.is_empty:
            return self._assemble(tree.title, tree.description, None, [])

        if len(tree.nodes) == 1:
            top = tree.nodes[0]
            root_id, first_tier = top.node_id, top.children
            start, end = top.start_index, top.end_index
            content = top.text or top.summary
            summary = top.summary
        else:
            root_id, first_tier = self.id_generator.next_id(), tree.nodes
            start, end = tree.nodes[0].start_index, tree.nodes[-1].end_index
            content = "\n\n".join(n.text or n.summary for n in tree.nodes)
            summary = summarize(
                [n.summary for n in tree.nodes], self.segmenter_config.max_summary_length
            )

        root = GraphNode(
            node_id=root_id,
            title=tree.title,
            content=content,
            summary=summary,
            type=GraphNodeType.DOCUMENT,
            position=Position(start=start, end=end),
            metadata=NodeMetadata(level=0),
        )

        depths = _depths(first_tier)
        sections = [
            GraphNode(
                node_id=node.node_id,
                title=node.title,
                content=node.text or node.summary,
                summary=node.summary,
                type=GraphNodeType.SECTION,
                position=Position(start=node.start_index, end=node.end_index),
                metadata=NodeMetadata(
                    level=depths[node.node_id],
                    keywords=extract_keywords(node.text or node.summary),
                ),
            )
            for node in flatten_tree(first_tier)
        ]

        return self._assemble(tree.title, tree.description, root, sections)

    def _assemble(
        self,
        title: str,
        description: str | None,
        root: GraphNode | None,
        sections: list[GraphNode],
    ) -> GraphIndex:
        nodes = [root, *sections] if root is not None else []
        edges = self.identify_relationships(root, sections) if root is not None else []

        if self.config.precompute_relationships:
            nodes = self.precompute_centrality(nodes, edges)

        graph = GraphIndex(
            title=title,
            description=description,
            nodes=nodes,
            edges=edges,
            metadata=GraphIndexMetadata(
                created_at=self.clock(),
                node_count=len(nodes),
                edge_count=len(edges),
            ),
        )
        logger.info(f"Built graph '{title}': {len(nodes)} nodes, {len(edges)} edges")
        return graph

    def identify_relationships(self, root: GraphNode, sections: list[GraphNode]) -> list[GraphEdge]:
        """
        Create parent-child and semantic edges.

        Args:
            root: Document root node
            sections: Section nodes in document order

        Returns:
            Parent-child edges first, then semantic edges in pair order
        """
        edges = [
            GraphEdge(
                source=root.node_id,
                target=section.node_id,
                weight=PARENT_CHILD_WEIGHT,
                type=EdgeType.PARENT_CHILD,
            )
            for section in sections
        ]

        if not self.config.enable_cross_references:
            return edges

        keyword_sets = {s.node_id: frozenset(s.metadata.keywords) for s in sections}
        for first, second in combinations(sections, 2):
            weight = jaccard_similarity(keyword_sets[first.node_id], keyword_sets[second.node_id])
            if weight > self.config.min_edge_weight:
                edges.append(
                    GraphEdge(
                        source=first.node_id,
                        target=second.node_id,
                        weight=weight,
                        type=EdgeType.SEMANTIC,
                    )
                )

        return edges

    @staticmethod
    def precompute_centrality(nodes: list[GraphNode], edges: list[GraphEdge]) -> list[GraphNode]:
        """
        Attach normalized degree centrality, min(degree / 10, 1), to every node.
        """
        degree: Counter[str] = Counter()
        for edge in edges:
            degree[edge.source] += 1
            degree[edge.target] += 1

        return [
            node.model_copy(
                update={
                    "metadata": node.metadata.model_copy(
                        update={"centrality": min(degree[node.node_id] / CENTRALITY_DEGREE_CAP, 1.0)}
                    )
                }
            )
            for node in nodes
        ]


def _depths(nodes: list[TreeNode], depth: int = 1) -> dict[str, int]:
    result: dict[str, int] = {}
    for node in nodes:
        result[node.node_id] = depth
        result.update(_depths(node.children, depth + 1))
    return result


def graph_stats(graph: GraphIndex) -> dict:
    """
    Summary statistics of a graph index.

    Returns:
        node_count, edge_count, average_degree (2E/N), density (E / max edges), title
    """
    node_count = len(graph.nodes)
    edge_count = len(graph.edges)
    max_edges = node_count * (node_count - 1) / 2
    return {
        "node_count": node_count,
        "edge_count": edge_count,
        "average_degree": (2 * edge_count) / node_count if node_count else 0.0,
        "density": edge_count / max_edges if max_edges else 0.0,
        "title": graph.title,
    }


def analyze_document(text: str) -> dict:
    """
    Estimate how cross-referenced a document is.

    Used to pick between the graph indexer and the tree-conversion path.

    Returns:
        cross_reference_ratio, avg_section_length, section_count, complexity_score
    """
    paragraphs = split_paragraphs(text)
    if not paragraphs:
        return {
            "cross_reference_ratio": 0.0,
            "avg_section_length": 0.0,
            "section_count": 0,
            "complexity_score": 0.0,
        }

    sections = [
        p for p in paragraphs if p.startswith("#") or _NUMBERED_START.match(p) or len(p) < 100
    ]
    cross_references = sum(
        1 for p in paragraphs if "see" in p or "refer" in p or "section" in p
    )
    total = len(paragraphs)
    avg_length = sum(len(p) for p in paragraphs) / total
    xref_ratio = cross_references / total

    complexity = min(xref_ratio * 2 + (len(sections) / total) * 0.5 + min(avg_length / 500, 1), 1.0)

    return {
        "cross_reference_ratio": xref_ratio,
        "avg_section_length": avg_length,
        "section_count": len(sections),
        "complexity_score": complexity,
    }
