"""
Ollama LLM provider using native ollama-python SDK.
"""

import ollama

from thoughtgraph.core.llm.base import LLMProvider
from thoughtgraph.utils.exceptions import LLMError, ValidationError
from thoughtgraph.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaLLM(LLMProvider):
    """
    Ollama LLM provider for text generation.

    Uses the async ollama client; JSON mode maps to format="json".
    """

    name = "ollama"

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        timeout: float = 120.0,
    ):
        """
        Initialize Ollama LLM provider.

        Args:
            host: Ollama server URL
            model: Model name for text generation (e.g., "llama3.1", "mistral")
            timeout: Request timeout in seconds
        """
        self.host = host
        self.model = model
        self.timeout = timeout

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def complete(
        self,
        prompt: str,
        max_tokens: int = 1000,
        temperature: float = 0.0,
        json_mode: bool = False,
        **kwargs,
    ) -> str:
        """
        Generate completion using Ollama chat.

        Args:
            prompt: Input prompt
            max_tokens: Maximum tokens to generate (num_predict)
            temperature: Sampling temperature
            json_mode: Constrain the reply to JSON
            **kwargs: Extra "options" merged into the Ollama options

        Returns:
            Reply text

        Raises:
            ValidationError: If the prompt is empty
            LLMError: If the Ollama call fails or returns nothing
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        options = {
            "temperature": temperature,
            "num_predict": max_tokens,
            **kwargs.get("options", {}),
        }

        try:
            response = await self.client.chat(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                format="json" if json_mode else None,
                options=options,
            )
        except Exception as e:
            logger.error(f"Ollama API error: {e}")
            raise LLMError(f"Ollama API error: {e}", context={"model": self.model}) from e

        content = response["message"]["content"]
        if not content:
            raise LLMError("Ollama returned empty content", context={"model": self.model})
        return content
