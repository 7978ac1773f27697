"""
Tree index models.

A TreeIndex is a "table of contents" for one document: a synthetic
document root whose children are the outermost detected sections.
Segments are the transient output of the segmenter and never leave
the indexing step.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SourceType(str, Enum):
    """Formats the indexed text was extracted from."""

    TEXT = "text"
    MARKDOWN = "markdown"
    PDF = "pdf"
    HTML = "html"


class Segment(BaseModel):
    """
    Classified run of paragraphs produced by the segmenter.

    Index positions refer to the paragraph stream of the source text.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    paragraphs: list[str]
    start_index: int = Field(..., ge=0)
    end_index: int = Field(..., ge=0)
    level: int = Field(default=1, ge=0, description="Heading level (0 = body text)")

    @property
    def text(self) -> str:
        return "\n\n".join(self.paragraphs)


class TreeNode(BaseModel):
    """Section of a document with its nested subsections."""

    model_config = ConfigDict(frozen=True)

    node_id: str = Field(..., description="Unique within one index")
    title: str
    summary: str = ""
    text: str | None = None
    start_index: int = Field(..., ge=0)
    end_index: int = Field(..., ge=0)
    children: list["TreeNode"] = Field(default_factory=list)


class DocumentSource(BaseModel):
    """Where the indexed text came from."""

    model_config = ConfigDict(frozen=True)

    type: SourceType = SourceType.TEXT
    path: str | None = None


class TreeIndex(BaseModel):
    """
    Complete tree index for one document.

    Self-contained: serializing with model_dump(mode="json") and
    reloading with model_validate gives back an equal index.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    description: str | None = None
    nodes: list[TreeNode] = Field(default_factory=list, description="Root nodes")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    version: str = "1.0.0"
    source: DocumentSource = Field(default_factory=DocumentSource)

    @property
    def is_empty(self) -> bool:
        return not self.nodes
