"""Core indexing and search components."""
