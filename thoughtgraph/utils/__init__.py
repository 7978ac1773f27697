"""Utility modules for ThoughtGraph."""

from thoughtgraph.utils.exceptions import (
    ConfigurationError,
    IndexIntegrityError,
    LLMError,
    NotFoundError,
    ResponseParseError,
    ThoughtGraphError,
    ValidationError,
)
from thoughtgraph.utils.id_generator import (
    IdGenerator,
    SequentialIdGenerator,
    UuidIdGenerator,
    compute_document_key,
)
from thoughtgraph.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "IdGenerator",
    "UuidIdGenerator",
    "SequentialIdGenerator",
    "compute_document_key",
    # Exceptions
    "ThoughtGraphError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    "LLMError",
    "ResponseParseError",
    "IndexIntegrityError",
]
