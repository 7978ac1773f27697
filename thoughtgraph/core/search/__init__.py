"""
Search over tree and graph indexes.

- KeywordTreeSearch: keyword scoring over a tree
- ReasoningTreeSearch: LLM-guided node selection with keyword fallback
- BoundedPathSearch: multi-source bounded path search over a graph
"""

from thoughtgraph.core.search.bmssp import (
    ACTIVATION_FLOOR,
    BoundedPathSearch,
    PathSearchOptions,
    activation_score,
    dynamic_edge_threshold,
    path_score,
    propagate_activation,
)
from thoughtgraph.core.search.keyword import KeywordTreeSearch
from thoughtgraph.core.search.reasoning import (
    EXPERT_KNOWLEDGE_PRESETS,
    ReasoningTreeSearch,
    parse_selection,
)
from thoughtgraph.core.search.sources import find_query_sources

__all__ = [
    "BoundedPathSearch",
    "PathSearchOptions",
    "ACTIVATION_FLOOR",
    "activation_score",
    "dynamic_edge_threshold",
    "propagate_activation",
    "path_score",
    "KeywordTreeSearch",
    "ReasoningTreeSearch",
    "EXPERT_KNOWLEDGE_PRESETS",
    "parse_selection",
    "find_query_sources",
]
