"""Section tree construction and tree utilities."""

from thoughtgraph.core.hierarchy.builder import (
    HierarchyBuilder,
    count_nodes,
    find_node,
    find_nodes_by_title,
    flatten_tree,
    format_tree_structure,
    max_depth,
    tree_stats,
)

__all__ = [
    "HierarchyBuilder",
    "count_nodes",
    "max_depth",
    "flatten_tree",
    "find_node",
    "find_nodes_by_title",
    "format_tree_structure",
    "tree_stats",
]
