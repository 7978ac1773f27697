"""Graph index models: nodes, weighted edges and index metadata."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GraphNodeType(str, Enum):
    """Types of nodes in a graph index."""

    DOCUMENT = "document"  # exactly one per graph, the structural root
    SECTION = "section"
    PARAGRAPH = "paragraph"
    REFERENCE = "reference"


class EdgeType(str, Enum):
    """Types of relationships between graph nodes."""

    PARENT_CHILD = "parent-child"
    SEMANTIC = "semantic"
    REFERENCE = "reference"
    CROSS_LINK = "cross-link"


class Position(BaseModel):
    """Paragraph range covered by a node."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)


class NodeMetadata(BaseModel):
    """
    Per-node annotations.

    Known annotations are typed fields; anything else goes into `extra`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    level: int = Field(default=0, ge=0, description="Heading level (0 = document root)")
    keywords: list[str] = Field(default_factory=list)
    centrality: float | None = Field(default=None, ge=0.0, le=1.0)
    extra: dict[str, Any] = Field(default_factory=dict)


class GraphNode(BaseModel):
    """Node in a graph index."""

    model_config = ConfigDict(frozen=True)

    node_id: str
    title: str
    content: str = ""
    summary: str = ""
    type: GraphNodeType
    position: Position
    metadata: NodeMetadata = Field(default_factory=NodeMetadata)


class GraphEdge(BaseModel):
    """
    Weighted relationship between two nodes.

    Stored with a direction; traversal treats edges as undirected.
    """

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    weight: float = Field(..., ge=0.0, le=1.0)
    type: EdgeType

    def connects(self, a: str, b: str) -> bool:
        return (self.source == a and self.target == b) or (self.source == b and self.target == a)


class GraphIndexMetadata(BaseModel):
    """Build information for a graph index."""

    model_config = ConfigDict(frozen=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    version: str = "1.0.0"
    node_count: int = Field(default=0, ge=0)
    edge_count: int = Field(default=0, ge=0)
    index_type: str = "graph"


class GraphIndex(BaseModel):
    """Complete graph index for one document."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str | None = None
    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)
    metadata: GraphIndexMetadata = Field(default_factory=GraphIndexMetadata)

    @property
    def root(self) -> GraphNode | None:
        """The single document-type node, if the graph has any nodes."""
        for node in self.nodes:
            if node.type == GraphNodeType.DOCUMENT:
                return node
        return None

    def node_map(self) -> dict[str, GraphNode]:
        return {node.node_id: node for node in self.nodes}
