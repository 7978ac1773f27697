"""Engine facade and retrieval services."""

from thoughtgraph.services.engine import IndexMode, ThoughtGraphEngine
from thoughtgraph.services.retriever import Retriever

__all__ = ["ThoughtGraphEngine", "IndexMode", "Retriever"]
