"""
Tests for the LLM factory.

Tests the creation of reasoning engines from configuration.
"""

import pytest

from thoughtgraph.config import LLMConfig
from thoughtgraph.core.factory import LLMFactory
from thoughtgraph.core.llm.base import LLMProvider
from thoughtgraph.core.llm.ollama import OllamaLLM
from thoughtgraph.core.llm.openai import OpenAILLM
from thoughtgraph.utils.exceptions import ConfigurationError


@pytest.mark.unit
class TestLLMFactory:
    """Test LLM factory."""

    def test_create_ollama_llm(self):
        """Test creating Ollama LLM provider."""
        config = LLMConfig(provider="ollama", model="llama3.1:8b", base_url="http://ollama:11434")

        llm = LLMFactory.create(config)

        assert isinstance(llm, OllamaLLM)
        assert isinstance(llm, LLMProvider)
        assert llm.model == "llama3.1:8b"
        assert llm.host == "http://ollama:11434"

    def test_ollama_default_host(self):
        """Test Ollama falls back to the local server."""
        llm = LLMFactory.create(LLMConfig(provider="ollama"))
        assert llm.host == "http://localhost:11434"

    def test_create_openai_llm(self):
        """Test creating OpenAI LLM provider."""
        config = LLMConfig(provider="openai", model="gpt-4o-mini", api_key="sk-test-key")

        llm = LLMFactory.create(config)

        assert isinstance(llm, OpenAILLM)
        assert llm.model == "gpt-4o-mini"

    def test_create_openai_without_api_key_raises_error(self):
        """Test that OpenAI without API key raises error."""
        config = LLMConfig(provider="openai", model="gpt-4o", api_key=None)

        with pytest.raises(ConfigurationError, match="API key is required"):
            LLMFactory.create(config)

    def test_unsupported_provider(self):
        """Test unknown providers raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Unsupported LLM provider"):
            LLMFactory.create(LLMConfig(provider="carrier-pigeon"))
