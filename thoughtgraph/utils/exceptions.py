"""
Custom exception hierarchy for ThoughtGraph.

Provides structured error types for indexing, search and retrieval.
All exceptions inherit from ThoughtGraphError for easy catching.
"""


class ThoughtGraphError(Exception):
    """
    Base exception for all ThoughtGraph errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize ThoughtGraph error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(ThoughtGraphError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class NotFoundError(ThoughtGraphError):
    """
    Resource not found errors.
    Raised when a requested node or index doesn't exist.
    """

    pass


class ConfigurationError(ThoughtGraphError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class LLMError(ThoughtGraphError):
    """
    LLM operation errors.
    Raised when LLM operations fail (API errors, timeouts, etc.).
    """

    pass


class ResponseParseError(LLMError):
    """
    Raised when an LLM reply cannot be parsed into a node selection.
    """

    pass


class IndexIntegrityError(ThoughtGraphError):
    """
    Broken index invariants.
    Raised when a search references a node or edge the index does not hold.
    """

    pass
