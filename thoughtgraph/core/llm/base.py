"""
Abstract base class for reasoning engines.

A reasoning engine turns a prompt into text. ThoughtGraph only uses it
to pick tree nodes; parsing the reply is the caller's job.
"""

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """
    Abstract base for LLM text generation providers.

    Responsibilities:
    - Text completion
    - Optional JSON-only replies
    - Releasing client resources
    """

    name: str = "llm"

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        max_tokens: int = 1000,
        temperature: float = 0.0,
        json_mode: bool = False,
        **kwargs,
    ) -> str:
        """
        Generate completion from prompt.

        Args:
            prompt: The input prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0 = deterministic)
            json_mode: Ask the provider to constrain the reply to JSON
            **kwargs: Provider-specific parameters

        Returns:
            Generated text

        Raises:
            LLMError: If the provider call fails
        """

    async def close(self) -> None:
        """Close any open connections. Providers override when cleanup is needed."""
        return None
