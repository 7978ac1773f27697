"""Factories for creating ThoughtGraph components from configuration."""

from thoughtgraph.core.factory.llm_factory import LLMFactory

__all__ = ["LLMFactory"]
