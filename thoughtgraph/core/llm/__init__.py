"""
Reasoning engine abstraction for LLM-guided tree search.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)
"""
from thoughtgraph.core.llm.base import LLMProvider
from thoughtgraph.core.llm.ollama import OllamaLLM
from thoughtgraph.core.llm.openai import OpenAILLM

__all__ = [
    "LLMProvider",
    "OllamaLLM",
    "OpenAILLM",
]
