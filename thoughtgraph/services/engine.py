"""
ThoughtGraph Engine - indexing, search and retrieval in one place.

Brings together:
- HierarchyBuilder (tree indexes) and GraphIndexer (graph indexes)
- Keyword or reasoning-based tree search
- Query source discovery + bounded path search over graphs
- Content retrieval and context formatting
- Optional in-memory index cache
- Lifecycle event handlers (index, search, retrieval)

The algorithms are synchronous; the async methods are the boundary
callers await from request handlers. Building and searching run in a
worker thread so the event loop keeps serving other tasks.
"""

import asyncio
import time
from collections import defaultdict
from collections.abc import Callable
from enum import Enum

from thoughtgraph.config import Config, SearchMode
from thoughtgraph.core.cache import IndexCache
from thoughtgraph.core.factory import LLMFactory
from thoughtgraph.core.graph import GraphIndexer, analyze_document, graph_stats
from thoughtgraph.core.hierarchy import (
    HierarchyBuilder,
    find_node,
    find_nodes_by_title,
    format_tree_structure,
    tree_stats,
)
from thoughtgraph.core.llm.base import LLMProvider
from thoughtgraph.core.search import (
    BoundedPathSearch,
    KeywordTreeSearch,
    PathSearchOptions,
    ReasoningTreeSearch,
    find_query_sources,
)
from thoughtgraph.models.event import EngineEvent, EngineEventType
from thoughtgraph.models.graph import GraphIndex, GraphNode
from thoughtgraph.models.search import (
    ExpertKnowledge,
    GraphSearchResult,
    RetrievalResult,
    TreeSearchResult,
)
from thoughtgraph.models.tree import SourceType, TreeIndex, TreeNode
from thoughtgraph.services.retriever import Retriever
from thoughtgraph.utils.exceptions import ValidationError
from thoughtgraph.utils.id_generator import IdGenerator, UuidIdGenerator, compute_document_key
from thoughtgraph.utils.logger import get_logger

logger = get_logger(__name__)

ALL_EVENTS = "*"

EventHandler = Callable[[EngineEvent], None]


class IndexMode(str, Enum):
    """How a graph index is produced."""

    AUTO = "auto"  # pick by document complexity
    GRAPH = "graph"  # graph indexer over headings
    TREE = "tree"  # build a tree, then convert it


class ThoughtGraphEngine:
    """
    Document indexing and query engine.

    Features:
    - Tree and graph indexes from plain text
    - Keyword search, or LLM-guided search when a provider is given
    - Multi-source bounded path search over graphs
    - Retrieval of node content formatted as prompt context
    - TTL cache of built indexes keyed by document identity
    - Event handlers for index, search and retrieval lifecycle
    """

    def __init__(
        self,
        config: Config | None = None,
        llm: LLMProvider | None = None,
        cache: IndexCache | None = None,
        id_generator_factory: Callable[[], IdGenerator] = UuidIdGenerator,
        expert_knowledge: ExpertKnowledge | None = None,
    ):
        """
        Initialize the engine.

        Args:
            config: Configuration object
            llm: Optional reasoning engine for tree search
            cache: Index cache (one is created when caching is enabled)
            id_generator_factory: Creates the node id source for each build
            expert_knowledge: Domain rules for reasoning-based search
        """
        self.config = config or Config()
        self.llm = llm
        self.id_generator_factory = id_generator_factory

        if cache is None and self.config.cache.enabled:
            cache = IndexCache(default_ttl_seconds=self.config.cache.ttl_seconds)
        self.cache = cache

        self.keyword_search = KeywordTreeSearch(self.config.search)
        self.reasoning_search = (
            ReasoningTreeSearch(
                llm,
                self.config.search,
                expert_knowledge=expert_knowledge,
                fallback=self.keyword_search,
                max_tokens=self.config.llm.max_tokens,
            )
            if llm is not None
            else None
        )
        self.path_search = BoundedPathSearch(PathSearchOptions.from_config(self.config.graph))
        self.retriever = Retriever()
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

        logger.info(
            f"ThoughtGraph engine ready: tree search="
            f"{'reasoning' if self.reasoning_search else 'keyword'}, "
            f"graph mode={self.config.graph.search_mode.value}, "
            f"cache={'on' if self.cache else 'off'}"
        )

    @classmethod
    def from_config(cls, config: Config) -> "ThoughtGraphEngine":
        """Create an engine, building the LLM provider when it is enabled."""
        llm = LLMFactory.create(config.llm) if config.llm.enabled else None
        return cls(config=config, llm=llm)

    # EVENTS

    def on(self, event: EngineEventType | str, handler: EventHandler) -> None:
        """
        Register a handler for an event type, or "*" for every event.

        Handlers are called synchronously, in registration order.
        """
        key = ALL_EVENTS if event == ALL_EVENTS else EngineEventType(event).value
        self._handlers[key].append(handler)

    def off(self, event: EngineEventType | str, handler: EventHandler) -> bool:
        """Remove a handler. Returns True if it was registered."""
        key = ALL_EVENTS if event == ALL_EVENTS else EngineEventType(event).value
        handlers = self._handlers.get(key, [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def _emit(self, event_type: EngineEventType, **data) -> None:
        handlers = self._handlers.get(event_type.value, []) + self._handlers.get(ALL_EVENTS, [])
        if not handlers:
            return

        event = EngineEvent(type=event_type, data=data)
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                # Handler errors never reach the caller
                logger.warning(f"Event handler for {event_type.value} failed: {e}")

    # INDEXING

    async def index_tree(
        self,
        text: str,
        title: str,
        description: str | None = None,
        source_type: SourceType = SourceType.TEXT,
        source_path: str | None = None,
    ) -> TreeIndex:
        """
        Build (or fetch from cache) the tree index of a document.

        Raises:
            ValidationError: If title is empty
        """
        if not title or not title.strip():
            raise ValidationError("title is required")

        key = self.tree_key(title, text)
        cached = self._cache_get(key)
        if cached is not None:
            logger.debug(f"Tree index cache hit: {key}")
            return cached

        self._emit(
            EngineEventType.INDEX_BUILDING, title=title, index_type="tree", content_length=len(text)
        )
        start = time.perf_counter()
        builder = HierarchyBuilder(self.config.segmenter, self.id_generator_factory())
        tree = await asyncio.to_thread(
            builder.build_tree, text, title, description, source_type, source_path
        )
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Indexed tree '{title}' in {elapsed_ms:.1f}ms")

        self._cache_set(key, tree)
        self._emit(
            EngineEventType.INDEX_BUILT,
            title=title,
            index_type="tree",
            node_count=tree_stats(tree)["node_count"],
            build_time_ms=elapsed_ms,
        )
        return tree

    async def index_graph(
        self,
        text: str,
        title: str,
        description: str | None = None,
        mode: IndexMode = IndexMode.GRAPH,
    ) -> GraphIndex:
        """
        Build (or fetch from cache) the graph index of a document.

        Args:
            text: Plain document text
            title: Document title
            description: Optional description
            mode: GRAPH, TREE (tree conversion) or AUTO (by document complexity)

        Raises:
            ValidationError: If title is empty
        """
        if not title or not title.strip():
            raise ValidationError("title is required")

        mode = self.resolve_mode(text, mode)
        key = self.graph_key(title, text, mode)
        cached = self._cache_get(key)
        if cached is not None:
            logger.debug(f"Graph index cache hit: {key}")
            return cached

        self._emit(
            EngineEventType.INDEX_BUILDING,
            title=title,
            index_type="graph",
            mode=mode.value,
            content_length=len(text),
        )
        start = time.perf_counter()
        graph = await asyncio.to_thread(self._build_graph, text, title, description, mode)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Indexed graph '{title}' ({mode.value}) in {elapsed_ms:.1f}ms")

        self._cache_set(key, graph)
        self._emit(
            EngineEventType.INDEX_BUILT,
            title=title,
            index_type="graph",
            mode=mode.value,
            node_count=len(graph.nodes),
            edge_count=len(graph.edges),
            build_time_ms=elapsed_ms,
        )
        return graph

    def _build_graph(
        self, text: str, title: str, description: str | None, mode: IndexMode
    ) -> GraphIndex:
        id_generator = self.id_generator_factory()
        indexer = GraphIndexer(self.config.graph, self.config.segmenter, id_generator)
        if mode == IndexMode.TREE:
            builder = HierarchyBuilder(self.config.segmenter, id_generator)
            return indexer.build_graph_from_tree(builder.build_tree(text, title, description))
        return indexer.build_graph(text, title, description)

    @staticmethod
    def tree_key(title: str, text: str) -> str:
        """Cache key of a document's tree index."""
        return compute_document_key(title, text, kind="tree")

    def graph_key(self, title: str, text: str, mode: IndexMode = IndexMode.GRAPH) -> str:
        """Cache key of a document's graph index built in the given mode."""
        mode = self.resolve_mode(text, mode)
        kind = "graph" if mode == IndexMode.GRAPH else "graph-tree"
        return compute_document_key(title, text, kind=kind)

    def resolve_mode(self, text: str, mode: IndexMode | str) -> IndexMode:
        mode = IndexMode(mode)
        return self.select_mode(text) if mode == IndexMode.AUTO else mode

    def select_mode(self, text: str) -> IndexMode:
        """Pick GRAPH for cross-referenced documents, TREE otherwise."""
        analysis = analyze_document(text)
        complexity = analysis["complexity_score"]
        if complexity > self.config.hybrid.auto_switch_threshold:
            selected = IndexMode.GRAPH
        elif self.config.hybrid.fallback_to_tree:
            selected = IndexMode.TREE
        else:
            selected = IndexMode.GRAPH
        logger.debug(f"Document complexity {complexity:.2f}: using {selected.value} mode")
        return selected

    # SEARCH

    async def search_tree(self, tree: TreeIndex, query: str) -> TreeSearchResult:
        """Select tree nodes for a query (reasoning search when configured)."""
        self._emit(EngineEventType.SEARCH_STARTED, query=query, index_title=tree.title)

        if self.reasoning_search is not None:
            result = await self.reasoning_search.search_tree(tree, query)
        else:
            result = await asyncio.to_thread(self.keyword_search.search_tree, tree, query)

        self._emit(
            EngineEventType.SEARCH_COMPLETED,
            query=query,
            index_title=tree.title,
            node_count=len(result.node_list),
        )
        return result

    async def search_graph(
        self,
        graph: GraphIndex,
        query: str,
        options: PathSearchOptions | None = None,
    ) -> GraphSearchResult:
        """
        Find graph paths for a query.

        Nodes matching query terms become the sources of one bounded
        path search. No matching node gives an empty result. When a
        selective search finds no path and fallback_to_baseline is on,
        the baseline search answers instead.
        """
        self._emit(EngineEventType.SEARCH_STARTED, query=query, index_title=graph.title)
        result = await asyncio.to_thread(self._search_graph, graph, query, options)
        self._emit(
            EngineEventType.SEARCH_COMPLETED,
            query=query,
            index_title=graph.title,
            path_count=len(result.paths),
            node_count=len(result.node_list),
        )
        return result

    def _search_graph(
        self, graph: GraphIndex, query: str, options: PathSearchOptions | None
    ) -> GraphSearchResult:
        sources = find_query_sources(query, graph.nodes)
        if not sources:
            logger.debug(f"No query sources for '{query}' in '{graph.title}'")
            return GraphSearchResult()

        opts = options or self.path_search.options
        source_ids = [s.node_id for s in sources]
        logger.debug(f"Graph search '{query}': {len(sources)} source nodes")
        result = self.path_search.search_graph(graph, source_ids, opts)

        if (
            not result.paths
            and opts.mode == SearchMode.SELECTIVE
            and self.config.graph.fallback_to_baseline
        ):
            logger.info(f"Selective search found no path for '{query}', using baseline search")
            result = self.path_search.search_graph(
                graph, source_ids, opts.model_copy(update={"mode": SearchMode.BASELINE})
            )
        return result

    # RETRIEVAL

    async def retrieve_tree(self, tree: TreeIndex, query: str) -> RetrievalResult:
        """Search a tree and pull the selected content as prompt context."""
        self._emit(EngineEventType.RETRIEVAL_STARTED, query=query, index_title=tree.title)
        start = time.perf_counter()
        result = await self.search_tree(tree, query)
        contents = self.retriever.retrieve_content(tree, result.node_list)

        retrieval = RetrievalResult(
            context=self.retriever.format_context(contents),
            contents=contents,
            node_list=result.node_list,
            rationale=result.rationale,
            total_time_ms=(time.perf_counter() - start) * 1000,
        )
        self._emit(
            EngineEventType.RETRIEVAL_COMPLETED,
            query=query,
            result_length=len(retrieval.context),
            retrieval_time_ms=retrieval.total_time_ms,
        )
        return retrieval

    async def retrieve_graph(self, graph: GraphIndex, query: str) -> RetrievalResult:
        """Search a graph and pull the visited nodes' content as prompt context."""
        self._emit(EngineEventType.RETRIEVAL_STARTED, query=query, index_title=graph.title)
        start = time.perf_counter()
        result = await self.search_graph(graph, query)

        # Best path score per node
        scores: dict[str, float] = {}
        for path in result.paths:
            for node_id in path.node_ids:
                scores[node_id] = max(scores.get(node_id, 0.0), path.path_score)

        contents = self.retriever.retrieve_content(graph, result.node_list, scores)
        total_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Retrieved {len(contents)} nodes for '{query}' from '{graph.title}' "
            f"in {total_ms:.1f}ms"
        )

        retrieval = RetrievalResult(
            context=self.retriever.format_context(contents),
            contents=contents,
            node_list=result.node_list,
            rationale=result.rationale,
            total_time_ms=total_ms,
        )
        self._emit(
            EngineEventType.RETRIEVAL_COMPLETED,
            query=query,
            result_length=len(retrieval.context),
            retrieval_time_ms=total_ms,
        )
        return retrieval

    # INSPECTION

    def tree_stats(self, tree: TreeIndex) -> dict:
        return tree_stats(tree)

    def graph_stats(self, graph: GraphIndex) -> dict:
        return graph_stats(graph)

    def get_tree_structure(self, tree: TreeIndex) -> str:
        return format_tree_structure(tree.nodes)

    def find_nodes_by_title(self, tree: TreeIndex, title_query: str) -> list[TreeNode]:
        return find_nodes_by_title(tree.nodes, title_query)

    def get_node_by_id(
        self, index: TreeIndex | GraphIndex, node_id: str
    ) -> TreeNode | GraphNode | None:
        if isinstance(index, GraphIndex):
            return index.node_map().get(node_id)
        return find_node(index.nodes, node_id)

    def collect_all_text(self, index: TreeIndex | GraphIndex) -> str:
        return self.retriever.collect_all_text(index)

    # LIFECYCLE MANAGEMENT

    async def close(self) -> None:
        """Release the reasoning engine, if any."""
        if self.llm is not None:
            await self.llm.close()
        self._handlers.clear()
        logger.info("ThoughtGraph engine shut down")

    def _cache_get(self, key: str):
        return self.cache.get(key) if self.cache is not None else None

    def _cache_set(self, key: str, index: TreeIndex | GraphIndex) -> None:
        if self.cache is not None:
            self.cache.set(key, index)
