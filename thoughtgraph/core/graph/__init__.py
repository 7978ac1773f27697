"""Graph index construction and statistics."""

from thoughtgraph.core.graph.indexer import (
    CENTRALITY_DEGREE_CAP,
    PARENT_CHILD_WEIGHT,
    GraphIndexer,
    analyze_document,
    graph_stats,
)

__all__ = [
    "GraphIndexer",
    "PARENT_CHILD_WEIGHT",
    "CENTRALITY_DEGREE_CAP",
    "analyze_document",
    "graph_stats",
]
