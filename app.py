"""
ThoughtGraph FastAPI Application

A REST API server for the ThoughtGraph engine.
Provides endpoints for building tree and graph indexes from document
text, searching them and retrieving prompt context.
"""

from contextlib import asynccontextmanager
from typing import Any, Literal

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from thoughtgraph.config import Config
from thoughtgraph.core.cache import IndexCache
from thoughtgraph.core.factory import LLMFactory
from thoughtgraph.models import GraphIndex, RetrievalResult, TreeIndex
from thoughtgraph.models.tree import SourceType
from thoughtgraph.services import IndexMode, ThoughtGraphEngine
from thoughtgraph.utils.exceptions import NotFoundError, ThoughtGraphError, ValidationError
from thoughtgraph.utils.logger import get_logger, setup_logging

# Global engine instance
engine: ThoughtGraphEngine | None = None
logger = get_logger(__name__)

IndexKind = Literal["tree", "graph"]


# Pydantic models for API
class IndexTreeRequest(BaseModel):
    """Request model for building a tree index."""

    text: str = Field(..., description="Plain document text")
    title: str = Field(..., min_length=1, description="Document title")
    description: str | None = None
    source_type: SourceType = SourceType.TEXT
    source_path: str | None = None


class IndexGraphRequest(BaseModel):
    """Request model for building a graph index."""

    text: str = Field(..., description="Plain document text")
    title: str = Field(..., min_length=1, description="Document title")
    description: str | None = None
    mode: IndexMode = IndexMode.GRAPH


class IndexResponse(BaseModel):
    """Response model for index creation."""

    index_id: str
    kind: IndexKind
    title: str
    stats: dict[str, Any]


class SearchRequest(BaseModel):
    """Request model for searching an index."""

    query: str = Field(..., description="Natural-language query")
    max_depth: float | None = Field(default=None, gt=0, description="Graph path bound")
    max_results: int | None = Field(default=None, ge=1, le=100)


class TreeSearchResponse(BaseModel):
    """Tree search result."""

    node_list: list[str]
    rationale: str
    search_time_ms: float


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    engine_initialized: bool
    tree_search: str
    graph_search_mode: str
    cached_indexes: int


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    global engine

    # Load configuration from environment or use defaults
    config = Config.from_env()

    # Initialize logging with config
    setup_logging(
        level=config.logging.level,
        log_to_file=config.logging.log_to_file,
        log_dir=config.logging.log_dir,
        file_rotation=config.logging.file_rotation,
        file_retention=config.logging.file_retention,
        compression=config.logging.compression,
        serialize=config.logging.serialize,
    )

    logger.info("Starting ThoughtGraph server")
    logger.info(
        f"Configuration: LLM={'on' if config.llm.enabled else 'off'} "
        f"({config.llm.provider}/{config.llm.model}), "
        f"graph search={config.graph.search_mode.value}, "
        f"cache ttl={config.cache.ttl_seconds}s"
    )

    llm = None
    if config.llm.enabled:
        logger.info("Creating LLM provider")
        llm = LLMFactory.create(config.llm)

    # Indexes served over HTTP always live in the cache
    engine = ThoughtGraphEngine(
        config=config,
        llm=llm,
        cache=IndexCache(default_ttl_seconds=config.cache.ttl_seconds),
    )
    logger.info("ThoughtGraph engine initialized")

    yield

    # Cleanup
    logger.info("Shutting down ThoughtGraph server")
    await engine.close()
    engine = None
    logger.info("Cleanup complete")


# Create FastAPI app
app = FastAPI(
    title="ThoughtGraph API",
    description="Document tree and graph indexes with reasoning-friendly retrieval",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _require_engine() -> ThoughtGraphEngine:
    if not engine:
        raise HTTPException(status_code=503, detail="Engine not initialized")
    return engine


def _to_http_error(e: ThoughtGraphError, operation: str) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ValidationError):
        return HTTPException(status_code=422, detail=str(e))
    logger.error(f"Error in {operation}: {e}")
    return HTTPException(status_code=500, detail=str(e))


def _get_index(current: ThoughtGraphEngine, kind: IndexKind, index_id: str):
    index = current.cache.get(index_id) if current.cache is not None else None
    expected = TreeIndex if kind == "tree" else GraphIndex
    if not isinstance(index, expected):
        raise NotFoundError(f"{kind.capitalize()} index not found: {index_id}")
    return index


# Health check endpoint
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy" if engine else "initializing",
        engine_initialized=engine is not None,
        tree_search="reasoning" if engine and engine.reasoning_search else "keyword",
        graph_search_mode=engine.config.graph.search_mode.value if engine else "unknown",
        cached_indexes=len(engine.cache.keys()) if engine and engine.cache else 0,
    )


# Index endpoints
@app.post("/indexes/tree", response_model=IndexResponse)
async def create_tree_index(request: IndexTreeRequest):
    """
    Build a tree index from document text.

    Headings are detected paragraph by paragraph and nested into a
    section tree under a document root. Indexing the same title and
    text again returns the cached index.
    """
    current = _require_engine()
    try:
        tree = await current.index_tree(
            request.text,
            request.title,
            description=request.description,
            source_type=request.source_type,
            source_path=request.source_path,
        )
        return IndexResponse(
            index_id=current.tree_key(request.title, request.text),
            kind="tree",
            title=tree.title,
            stats=current.tree_stats(tree),
        )
    except ThoughtGraphError as e:
        raise _to_http_error(e, "create_tree_index") from e


@app.post("/indexes/graph", response_model=IndexResponse)
async def create_graph_index(request: IndexGraphRequest):
    """
    Build a graph index from document text.

    Modes:
    - "graph": section nodes per heading with parent-child and semantic edges
    - "tree": build a tree first and flatten it into a graph
    - "auto": pick by how cross-referenced the document is
    """
    current = _require_engine()
    try:
        graph = await current.index_graph(
            request.text, request.title, description=request.description, mode=request.mode
        )
        return IndexResponse(
            index_id=current.graph_key(request.title, request.text, request.mode),
            kind="graph",
            title=graph.title,
            stats=current.graph_stats(graph),
        )
    except ThoughtGraphError as e:
        raise _to_http_error(e, "create_graph_index") from e


@app.get("/indexes/{kind}/{index_id}")
async def get_index(kind: IndexKind, index_id: str):
    """Return a cached index as JSON."""
    current = _require_engine()
    try:
        index = _get_index(current, kind, index_id)
        return index.model_dump(mode="json")
    except ThoughtGraphError as e:
        raise _to_http_error(e, "get_index") from e


@app.post("/indexes/{kind}/{index_id}/search")
async def search_index(kind: IndexKind, index_id: str, request: SearchRequest):
    """
    Search a cached index.

    Tree indexes use keyword (or reasoning) search; graph indexes use
    bounded path search from the nodes matching the query.
    """
    current = _require_engine()
    try:
        index = _get_index(current, kind, index_id)
        if kind == "tree":
            result = await current.search_tree(index, request.query)
            return TreeSearchResponse(
                node_list=result.node_list,
                rationale=result.rationale,
                search_time_ms=result.search_time_ms,
            )

        options = current.path_search.options.model_copy(
            update={
                k: v
                for k, v in {
                    "max_depth": request.max_depth,
                    "max_results": request.max_results,
                }.items()
                if v is not None
            }
        )
        result = await current.search_graph(index, request.query, options)
        return {**result.model_dump(), "rationale": result.rationale}
    except ThoughtGraphError as e:
        raise _to_http_error(e, "search_index") from e


@app.post("/indexes/{kind}/{index_id}/retrieve", response_model=RetrievalResult)
async def retrieve(kind: IndexKind, index_id: str, request: SearchRequest):
    """Search a cached index and return the selected content as prompt context."""
    current = _require_engine()
    try:
        index = _get_index(current, kind, index_id)
        if kind == "tree":
            return await current.retrieve_tree(index, request.query)
        return await current.retrieve_graph(index, request.query)
    except ThoughtGraphError as e:
        raise _to_http_error(e, "retrieve") from e


@app.delete("/indexes")
async def clear_indexes():
    """Drop every cached index."""
    current = _require_engine()
    removed = current.cache.clear() if current.cache is not None else 0
    return {"removed": removed}


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "ThoughtGraph API",
        "version": "0.1.0",
        "description": "Document tree and graph indexes with reasoning-friendly retrieval",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
