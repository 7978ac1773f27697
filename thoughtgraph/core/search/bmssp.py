"""
Bounded multi-source path search (BMSSP) over graph indexes.

Starts from several source nodes at once and expands partial paths
from a priority worklist until maxResults paths are accepted or the
worklist runs dry. Two modes share the same worklist, duplicate-path
suppression and path scoring:

SELECTIVE (default):
    Entries are ordered by activation score (highest first, ties by
    lowest distance). Entries below the activation floor are dropped,
    and a neighbor is only reached through an edge at least as heavy
    as the dynamic threshold max(minEdgeWeight, 0.7 - 0.4 * parent
    activation). A neighbor's activation is its base score times the
    edge weight times the parent's activation, so activation never
    increases along a path and the search stays tree-shaped.

BASELINE:
    Plain bounded search ordered by cumulative distance, following
    every edge with weight >= minEdgeWeight.

Edges are traversed in both directions.
"""

import heapq
import time
from dataclasses import dataclass
from itertools import count

from pydantic import BaseModel, Field

from thoughtgraph.config import GraphConfig, SearchMode
from thoughtgraph.core.tokenizer import jaccard_similarity
from thoughtgraph.models.graph import GraphIndex, GraphNode, GraphNodeType
from thoughtgraph.models.search import GraphSearchResult, PathResult
from thoughtgraph.utils.exceptions import IndexIntegrityError
from thoughtgraph.utils.logger import get_logger

logger = get_logger(__name__)

ACTIVATION_FLOOR = 0.25
DEFAULT_CENTRALITY = 0.5
PATH_SEPARATOR = "->"


class PathSearchOptions(BaseModel):
    """Bounds and mode of one path search."""

    max_depth: float = Field(default=3.0, gt=0, description="Maximum cumulative edge weight")
    max_results: int = Field(default=10, ge=1)
    min_edge_weight: float = Field(default=0.1, ge=0.0, le=1.0)
    mode: SearchMode = SearchMode.SELECTIVE

    @classmethod
    def from_config(cls, config: GraphConfig) -> "PathSearchOptions":
        return cls(
            max_depth=config.max_depth,
            max_results=config.max_results,
            min_edge_weight=config.min_edge_weight,
            mode=config.search_mode,
        )


@dataclass(frozen=True)
class _WorkItem:
    node_id: str
    distance: float
    path: tuple[str, ...]
    visited: frozenset[str]
    activation: float
    parent_activation: float


def activation_score(node: GraphNode, source_nodes: list[GraphNode]) -> float:
    """
    Base relevance of a node for the current source set.

    Weighted sum of centrality (0.25), best keyword similarity to a
    source (0.30), having keywords (0.15), node type (0.15) and
    position in the document (0.15), clamped to [0, 1].
    """
    centrality = node.metadata.centrality
    if centrality is None:
        centrality = DEFAULT_CENTRALITY

    similarity = max(
        (jaccard_similarity(node.metadata.keywords, s.metadata.keywords) for s in source_nodes),
        default=0.0,
    )
    keyword_relevance = 0.4 if node.metadata.keywords else 0.0
    type_weight = 0.8 if node.type == GraphNodeType.SECTION else 0.3
    position_weight = max(0.7, 1.0 - node.position.start * 0.1)

    score = (
        centrality * 0.25
        + similarity * 0.30
        + keyword_relevance * 0.15
        + type_weight * 0.15
        + position_weight * 0.15
    )
    return min(max(score, 0.0), 1.0)


def propagate_activation(base_score: float, edge_weight: float, parent_activation: float) -> float:
    """Activation of a neighbor reached from a parent through one edge."""
    return base_score * edge_weight * parent_activation


def dynamic_edge_threshold(min_edge_weight: float, parent_activation: float) -> float:
    """Minimum edge weight a neighbor needs; strong parents accept weaker edges."""
    return max(min_edge_weight, 0.7 - parent_activation * 0.4)


class BoundedPathSearch:
    """
    Multi-source bounded path search over a GraphIndex.

    Usage:
        search = BoundedPathSearch(PathSearchOptions(max_depth=2.0))
        result = search.search_graph(graph, ["node_2", "node_5"])
    """

    def __init__(self, options: PathSearchOptions | None = None):
        """
        Initialize path search.

        Args:
            options: Default bounds and mode, overridable per call
        """
        self.options = options or PathSearchOptions()

    def search_graph(
        self,
        graph: GraphIndex,
        source_node_ids: list[str],
        options: PathSearchOptions | None = None,
    ) -> GraphSearchResult:
        """
        Find bounded paths starting from the given source nodes.

        Args:
            graph: Graph index to search
            source_node_ids: Ids of the nodes to start from
            options: Bounds and mode for this call (defaults to the instance options)

        Returns:
            Paths sorted by path score, plus the unique nodes they visit

        Raises:
            IndexIntegrityError: If a source id or edge endpoint is not a node of the graph
        """
        opts = options or self.options
        start = time.perf_counter()
        selective = opts.mode == SearchMode.SELECTIVE

        nodes = graph.node_map()
        adjacency = _build_adjacency(graph, nodes)
        edge_weights = _build_edge_weights(graph)

        source_ids = list(dict.fromkeys(source_node_ids))
        for source_id in source_ids:
            if source_id not in nodes:
                raise IndexIntegrityError(
                    f"Source node not in graph: {source_id}", context={"graph": graph.title}
                )
        source_nodes = [nodes[source_id] for source_id in source_ids]

        base_scores: dict[str, float] = {}

        def base_score(node_id: str) -> float:
            if node_id not in base_scores:
                base_scores[node_id] = activation_score(nodes[node_id], source_nodes)
            return base_scores[node_id]

        sequence = count()
        worklist: list[tuple] = []

        def push(item: _WorkItem) -> None:
            if selective:
                key = (-item.activation, item.distance, next(sequence))
            else:
                key = (item.distance, next(sequence))
            heapq.heappush(worklist, (*key, item))

        for source_id in source_ids:
            push(
                _WorkItem(
                    node_id=source_id,
                    distance=0.0,
                    path=(source_id,),
                    visited=frozenset((source_id,)),
                    activation=base_score(source_id) if selective else 1.0,
                    parent_activation=1.0,
                )
            )

        results: list[PathResult] = []
        seen_paths: set[str] = set()
        activated: set[str] = set()

        while worklist and len(results) < opts.max_results:
            current: _WorkItem = heapq.heappop(worklist)[-1]

            if current.distance > opts.max_depth:
                continue
            if selective and current.activation < ACTIVATION_FLOOR:
                continue

            signature = PATH_SEPARATOR.join(current.path)
            if signature in seen_paths:
                continue
            seen_paths.add(signature)
            activated.add(current.node_id)

            if len(current.path) >= 2:
                results.append(
                    PathResult(
                        node_ids=list(current.path),
                        distance=current.distance,
                        path_score=path_score(current.path, nodes, edge_weights),
                        reasoning=path_reasoning(current.path, nodes),
                    )
                )

            neighbors = [(n, w) for n, w in adjacency[current.node_id] if n not in current.visited]
            if selective:
                threshold = dynamic_edge_threshold(opts.min_edge_weight, current.activation)
                neighbors = sorted(
                    ((n, w) for n, w in neighbors if w >= threshold), key=lambda nw: -nw[1]
                )
            else:
                neighbors = [(n, w) for n, w in neighbors if w >= opts.min_edge_weight]

            for neighbor_id, weight in neighbors:
                if selective:
                    activation = propagate_activation(
                        base_score(neighbor_id), weight, current.activation
                    )
                else:
                    activation = current.activation
                push(
                    _WorkItem(
                        node_id=neighbor_id,
                        distance=current.distance + weight,
                        path=(*current.path, neighbor_id),
                        visited=current.visited | {neighbor_id},
                        activation=activation,
                        parent_activation=current.activation,
                    )
                )

        results.sort(key=lambda p: p.path_score, reverse=True)
        paths = results[: opts.max_results]
        node_list = list(dict.fromkeys(node_id for p in paths for node_id in p.node_ids))
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.debug(
            f"Path search ({opts.mode.value}): {len(source_ids)} sources, "
            f"{len(activated)}/{len(nodes)} nodes activated, {len(paths)} paths, "
            f"{elapsed_ms:.1f}ms"
        )

        return GraphSearchResult(
            paths=paths,
            node_list=node_list,
            activated_node_count=len(activated),
            search_time_ms=elapsed_ms,
        )


def _build_adjacency(
    graph: GraphIndex, nodes: dict[str, GraphNode]
) -> dict[str, list[tuple[str, float]]]:
    """Neighbors per node: stored-direction edges first, then reversed ones."""
    outgoing: dict[str, list[tuple[str, float]]] = {node_id: [] for node_id in nodes}
    incoming: dict[str, list[tuple[str, float]]] = {node_id: [] for node_id in nodes}

    for edge in graph.edges:
        for endpoint in (edge.source, edge.target):
            if endpoint not in nodes:
                raise IndexIntegrityError(
                    f"Edge references unknown node: {endpoint}",
                    context={"source": edge.source, "target": edge.target},
                )
        outgoing[edge.source].append((edge.target, edge.weight))
        incoming[edge.target].append((edge.source, edge.weight))

    return {node_id: outgoing[node_id] + incoming[node_id] for node_id in nodes}


def _build_edge_weights(graph: GraphIndex) -> dict[frozenset[str], float]:
    weights: dict[frozenset[str], float] = {}
    for edge in graph.edges:
        weights.setdefault(frozenset((edge.source, edge.target)), edge.weight)
    return weights


def path_score(
    path: tuple[str, ...] | list[str],
    nodes: dict[str, GraphNode],
    edge_weights: dict[frozenset[str], float],
) -> float:
    """
    Rank a path: 0.7 * average edge weight + 0.3 * average node centrality.

    Raises:
        IndexIntegrityError: If two consecutive path nodes are not connected
    """
    if len(path) < 2:
        return 0.0

    edge_total = 0.0
    for a, b in zip(path, path[1:]):
        weight = edge_weights.get(frozenset((a, b)))
        if weight is None:
            raise IndexIntegrityError(f"No edge between {a} and {b}")
        edge_total += weight

    centralities = []
    for node_id in path:
        centrality = nodes[node_id].metadata.centrality
        centralities.append(DEFAULT_CENTRALITY if centrality is None else centrality)

    score = (edge_total / (len(path) - 1)) * 0.7 + (sum(centralities) / len(path)) * 0.3
    return min(max(score, 0.0), 1.0)


def path_reasoning(path: tuple[str, ...] | list[str], nodes: dict[str, GraphNode]) -> str:
    """Human-readable explanation of a path."""
    titles = [nodes[node_id].title for node_id in path]
    if not titles:
        return "No path found"
    if len(titles) == 1:
        return f'Found relevant section: "{titles[0]}"'
    if len(titles) == 2:
        return f'Connected related sections: "{titles[0]}" and "{titles[1]}"'
    return f"Found connected path through sections: {' → '.join(titles)}"
