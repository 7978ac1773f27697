"""In-memory index cache."""

from thoughtgraph.core.cache.index_cache import IndexCache

__all__ = ["IndexCache"]
