"""
ID generation utilities for ThoughtGraph.

Node ids only need to be unique within one index. Builders take an
IdGenerator so callers (and tests) can choose the scheme:
- UuidIdGenerator: node_xxxxxxxx (8 hex chars, default)
- SequentialIdGenerator: node_1, node_2, ...
"""

import hashlib
from abc import ABC, abstractmethod
from itertools import count
from uuid import uuid4


class IdGenerator(ABC):
    """Source of node ids for a single index build."""

    @abstractmethod
    def next_id(self) -> str:
        """Return a new id, unique for this generator."""


class UuidIdGenerator(IdGenerator):
    """Random UUID-backed ids."""

    def __init__(self, prefix: str = "node_", length: int = 8):
        self.prefix = prefix
        self.length = length

    def next_id(self) -> str:
        return f"{self.prefix}{uuid4().hex[: self.length]}"


class SequentialIdGenerator(IdGenerator):
    """Monotonic counter ids, deterministic across runs."""

    def __init__(self, prefix: str = "node_", start: int = 1):
        self.prefix = prefix
        self._counter = count(start)

    def next_id(self) -> str:
        return f"{self.prefix}{next(self._counter)}"


def compute_document_key(title: str, text: str, kind: str = "tree") -> str:
    """
    Compute a stable cache key for a document.

    The same title and (stripped) text always map to the same key, so
    re-indexing a document replaces its cached index.

    Args:
        title: Document title
        text: Document text
        kind: Index kind prefix ("tree" or "graph")

    Returns:
        Key in format "<kind>_<16 hex chars>"
    """
    digest = hashlib.sha256(f"{title}\x00{text.strip()}".encode()).hexdigest()
    return f"{kind}_{digest[:16]}"
