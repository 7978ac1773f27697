"""Search and retrieval result models."""

from pydantic import BaseModel, ConfigDict, Field


class PathResult(BaseModel):
    """One path discovered by the bounded path search."""

    node_ids: list[str] = Field(..., min_length=2)
    distance: float = Field(..., ge=0.0, description="Sum of traversed edge weights")
    path_score: float = Field(..., ge=0.0, le=1.0)
    reasoning: str = ""


class TreeSearchResult(BaseModel):
    """Nodes selected from a tree index, with the reasoning behind the selection."""

    node_list: list[str] = Field(default_factory=list)
    rationale: str = ""
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    search_time_ms: float = 0.0


class GraphSearchResult(BaseModel):
    """Paths found in a graph index and the nodes they visit."""

    paths: list[PathResult] = Field(default_factory=list)
    node_list: list[str] = Field(default_factory=list)
    activated_node_count: int = 0
    search_time_ms: float = 0.0

    @property
    def rationale(self) -> str:
        return "\n".join(path.reasoning for path in self.paths)


class RetrievedContent(BaseModel):
    """Content pulled from one index node."""

    node_id: str
    title: str
    text: str
    summary: str = ""
    relevance_score: float | None = None


class RetrievalResult(BaseModel):
    """Search plus content retrieval, formatted for a prompt."""

    context: str
    contents: list[RetrievedContent] = Field(default_factory=list)
    node_list: list[str] = Field(default_factory=list)
    rationale: str = ""
    total_time_ms: float = 0.0


class ExpertKnowledge(BaseModel):
    """Domain rules that steer reasoning-based node selection."""

    domain: str = "General"
    rules: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    priority_patterns: list[str] = Field(default_factory=list)


class NodeSelection(BaseModel):
    """Structured reply expected from a reasoning engine."""

    model_config = ConfigDict(extra="ignore")

    thinking: str = ""
    node_list: list[str] = Field(default_factory=list)
