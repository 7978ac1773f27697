"""
ThoughtGraph - reasoning-friendly document indexes without embeddings.

Turns document text into a nested section tree or a weighted section
graph and answers queries by selecting the nodes most likely to hold
the answer.
"""

from thoughtgraph.config import Config
from thoughtgraph.core.graph import GraphIndexer
from thoughtgraph.core.hierarchy import HierarchyBuilder, count_nodes, flatten_tree, max_depth
from thoughtgraph.core.search import (
    BoundedPathSearch,
    KeywordTreeSearch,
    PathSearchOptions,
    ReasoningTreeSearch,
)
from thoughtgraph.models import GraphIndex, TreeIndex
from thoughtgraph.services import IndexMode, Retriever, ThoughtGraphEngine

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ThoughtGraphEngine",
    "IndexMode",
    "HierarchyBuilder",
    "GraphIndexer",
    "KeywordTreeSearch",
    "ReasoningTreeSearch",
    "BoundedPathSearch",
    "PathSearchOptions",
    "Retriever",
    "TreeIndex",
    "GraphIndex",
    "count_nodes",
    "max_depth",
    "flatten_tree",
]
