"""
Index Cache - in-memory TTL store for built indexes.

Built tree and graph indexes are kept under a key derived from the
document identity (see compute_document_key), so re-indexing the same
document is a lookup. Entries expire after a TTL; expired entries are
dropped lazily on access and purged before stats are reported.

Usage:
    cache = IndexCache(default_ttl_seconds=3600)
    cache.set(key, tree)
    tree = cache.get(key)
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from thoughtgraph.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class _CacheEntry:
    value: Any
    expires_at: float


class IndexCache:
    """TTL-based in-memory cache for indexes."""

    def __init__(
        self,
        default_ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize index cache.

        Args:
            default_ttl_seconds: Entry lifetime used when set() gets no ttl
            clock: Time source in seconds
        """
        self.default_ttl_seconds = default_ttl_seconds
        self.clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        """
        Get a cached value.

        Returns:
            The value, or None if missing or expired
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() >= entry.expires_at:
            del self._entries[key]
            logger.debug(f"Cache entry expired: {key}")
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._entries[key] = _CacheEntry(value=value, expires_at=self.clock() + ttl)
        logger.debug(f"Cached {key} (ttl={ttl}s)")

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        """Remove an entry. Returns True if it existed."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        """Remove all entries. Returns how many were removed."""
        removed = len(self._entries)
        self._entries.clear()
        logger.info(f"Cleared index cache ({removed} entries)")
        return removed

    def purge_expired(self) -> int:
        now = self.clock()
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def keys(self) -> list[str]:
        self.purge_expired()
        return list(self._entries)

    def stats(self) -> dict[str, Any]:
        """Entry count and keys after dropping expired entries."""
        expired = self.purge_expired()
        return {
            "size": len(self._entries),
            "keys": list(self._entries),
            "expired_purged": expired,
            "default_ttl_seconds": self.default_ttl_seconds,
        }
