"""
Data models for ThoughtGraph.

Two index shapes are built from the same segmented text:
- TreeIndex / TreeNode: nested sections under a document root
- GraphIndex / GraphNode / GraphEdge: a document root, flat section
  nodes and weighted parent-child and semantic edges

Search models:
- PathResult, GraphSearchResult: bounded path search output
- TreeSearchResult: keyword or reasoning-based tree search output
- RetrievedContent, RetrievalResult: content pulled for a prompt

Engine events:
- EngineEvent, EngineEventType: index, search and retrieval lifecycle
"""

from thoughtgraph.models.event import EngineEvent, EngineEventType
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
from thoughtgraph.models.search import (
    ExpertKnowledge,
    GraphSearchResult,
    NodeSelection,
    PathResult,
    RetrievalResult,
    RetrievedContent,
    TreeSearchResult,
)
from thoughtgraph.models.tree import DocumentSource, Segment, SourceType, TreeIndex, TreeNode

__all__ = [
    # Tree models
    "Segment",
    "TreeNode",
    "TreeIndex",
    "DocumentSource",
    "SourceType",
    # Graph models
    "GraphNode",
    "GraphNodeType",
    "GraphEdge",
    "EdgeType",
    "GraphIndex",
    "GraphIndexMetadata",
    "NodeMetadata",
    "Position",
    # Search models
    "PathResult",
    "TreeSearchResult",
    "GraphSearchResult",
    "RetrievedContent",
    "RetrievalResult",
    "ExpertKnowledge",
    "NodeSelection",
    # Engine events
    "EngineEvent",
    "EngineEventType",
]
