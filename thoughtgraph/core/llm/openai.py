"""
OpenAI LLM provider using official SDK.
"""

from openai import AsyncOpenAI

from thoughtgraph.core.llm.base import LLMProvider
from thoughtgraph.utils.exceptions import LLMError, ValidationError
from thoughtgraph.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAILLM(LLMProvider):
    """
    OpenAI LLM provider for text generation.

    JSON mode maps to response_format={"type": "json_object"}.
    """

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI LLM provider.

        Args:
            api_key: OpenAI API key
            model: Model name (e.g., "gpt-4o", "gpt-4o-mini")
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
        """
        self.model = model

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

    async def complete(
        self,
        prompt: str,
        max_tokens: int = 1000,
        temperature: float = 0.0,
        json_mode: bool = False,
        **kwargs,
    ) -> str:
        """
        Generate completion using OpenAI chat completions.

        Args:
            prompt: Input prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            json_mode: Constrain the reply to a JSON object
            **kwargs: Additional parameters (e.g., stop, presence_penalty)
        Returns:
            Reply text
        Raises:
            ValidationError: If the prompt is empty
            LLMError: If the OpenAI API call fails or returns nothing
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        params = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }
        if json_mode:
            params["response_format"] = {"type": "json_object"}

        try:
            response = await self.client.chat.completions.create(**params)
        except Exception as e:
            logger.bind(model=self.model).error(f"OpenAI API error ({type(e).__name__}): {e}")
            raise LLMError(f"OpenAI API error: {e}", context={"model": self.model}) from e

        content = response.choices[0].message.content
        if not content:
            raise LLMError("OpenAI returned empty content", context={"model": self.model})
        return content

    async def close(self) -> None:
        """Close OpenAI client."""
        await self.client.close()
