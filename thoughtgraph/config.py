"""
Configuration for ThoughtGraph.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class SearchMode(str, Enum):
    """Graph search strategies."""

    SELECTIVE = "selective"  # activation-ordered, dynamic edge threshold
    BASELINE = "baseline"  # distance-ordered bounded search


class SegmenterConfig(BaseModel):
    """Paragraph segmentation and summary configuration."""

    heading_patterns: list[str] = Field(default_factory=list)
    max_summary_length: int = Field(default=200, ge=4)


class GraphConfig(BaseModel):
    """Graph indexing and bounded path search configuration."""

    max_depth: float = Field(default=3.0, gt=0)
    max_results: int = Field(default=10, ge=1)
    min_edge_weight: float = Field(default=0.1, ge=0.0, le=1.0)
    enable_cross_references: bool = True
    precompute_relationships: bool = True
    search_mode: SearchMode = SearchMode.SELECTIVE
    fallback_to_baseline: bool = True  # rerun baseline when selective finds no path


class SearchConfig(BaseModel):
    """Tree search configuration."""

    max_results: int = Field(default=10, ge=1)
    max_depth: int = Field(default=5, ge=1)
    temperature: float = 0.1
    timeout: float = 30.0


class LLMConfig(BaseModel):
    """Optional reasoning engine configuration."""

    enabled: bool = False
    provider: str = "ollama"  # ollama, openai
    model: str = "llama3.1:8b"
    base_url: str | None = None  # provider default when unset
    api_key: str | None = None
    max_tokens: int = 1000
    timeout: float = 120.0


class CacheConfig(BaseModel):
    """Index cache configuration."""

    enabled: bool = True
    ttl_seconds: float = 3600.0


class HybridConfig(BaseModel):
    """Automatic tree/graph mode selection."""

    auto_switch_threshold: float = 0.2
    fallback_to_tree: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    segmenter: SegmenterConfig = Field(default_factory=SegmenterConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    hybrid: HybridConfig = Field(default_factory=HybridConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)

        Returns:
            Config instance

        Environment variables:
            TGRAPH_HEADING_PATTERNS: Custom heading regexes, separated by "||"
            TGRAPH_MAX_SUMMARY_LENGTH: Summary length in characters
            TGRAPH_GRAPH_MAX_DEPTH: Maximum cumulative path distance
            TGRAPH_GRAPH_MAX_RESULTS: Maximum paths returned
            TGRAPH_GRAPH_MIN_EDGE_WEIGHT: Minimum edge weight
            TGRAPH_GRAPH_CROSS_REFERENCES: Build semantic edges (true/false)
            TGRAPH_GRAPH_PRECOMPUTE: Compute centrality (true/false)
            TGRAPH_GRAPH_SEARCH_MODE: selective or baseline
            TGRAPH_GRAPH_FALLBACK_TO_BASELINE: Rerun baseline search when selective finds nothing
            TGRAPH_SEARCH_MAX_RESULTS: Maximum tree search results
            TGRAPH_SEARCH_MAX_DEPTH: Maximum tree depth considered
            TGRAPH_LLM_ENABLED: Use the reasoning engine for tree search
            TGRAPH_LLM_PROVIDER: LLM provider (ollama, openai)
            TGRAPH_LLM_MODEL: LLM model name
            TGRAPH_LLM_BASE_URL: LLM base URL
            TGRAPH_LLM_API_KEY: LLM API key (for OpenAI)
            TGRAPH_CACHE_ENABLED: Keep built indexes in memory
            TGRAPH_CACHE_TTL_SECONDS: Cache entry lifetime
            TGRAPH_LOG_LEVEL: Log level
        """
        # Load .env file if provided or exists
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            # If value is empty string, return default
            if value == "":
                return default
            # Convert boolean strings
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            # Convert numeric strings
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        patterns = get_env("TGRAPH_HEADING_PATTERNS")

        return cls(
            segmenter=SegmenterConfig(
                heading_patterns=[p for p in patterns.split("||") if p] if patterns else [],
                max_summary_length=get_env("TGRAPH_MAX_SUMMARY_LENGTH", 200),
            ),
            graph=GraphConfig(
                max_depth=get_env("TGRAPH_GRAPH_MAX_DEPTH", 3.0),
                max_results=get_env("TGRAPH_GRAPH_MAX_RESULTS", 10),
                min_edge_weight=get_env("TGRAPH_GRAPH_MIN_EDGE_WEIGHT", 0.1),
                enable_cross_references=get_env("TGRAPH_GRAPH_CROSS_REFERENCES", True),
                precompute_relationships=get_env("TGRAPH_GRAPH_PRECOMPUTE", True),
                search_mode=get_env("TGRAPH_GRAPH_SEARCH_MODE", "selective"),
                fallback_to_baseline=get_env("TGRAPH_GRAPH_FALLBACK_TO_BASELINE", True),
            ),
            search=SearchConfig(
                max_results=get_env("TGRAPH_SEARCH_MAX_RESULTS", 10),
                max_depth=get_env("TGRAPH_SEARCH_MAX_DEPTH", 5),
                temperature=get_env("TGRAPH_SEARCH_TEMPERATURE", 0.1),
                timeout=get_env("TGRAPH_SEARCH_TIMEOUT", 30.0),
            ),
            llm=LLMConfig(
                enabled=get_env("TGRAPH_LLM_ENABLED", False),
                provider=get_env("TGRAPH_LLM_PROVIDER", "ollama"),
                model=get_env("TGRAPH_LLM_MODEL", "llama3.1:8b"),
                base_url=get_env("TGRAPH_LLM_BASE_URL"),
                api_key=get_env("TGRAPH_LLM_API_KEY"),
                max_tokens=get_env("TGRAPH_LLM_MAX_TOKENS", 1000),
                timeout=get_env("TGRAPH_LLM_TIMEOUT", 120.0),
            ),
            cache=CacheConfig(
                enabled=get_env("TGRAPH_CACHE_ENABLED", True),
                ttl_seconds=get_env("TGRAPH_CACHE_TTL_SECONDS", 3600.0),
            ),
            hybrid=HybridConfig(
                auto_switch_threshold=get_env("TGRAPH_HYBRID_THRESHOLD", 0.2),
                fallback_to_tree=get_env("TGRAPH_HYBRID_FALLBACK_TO_TREE", True),
            ),
            logging=LoggingConfig(
                level=get_env("TGRAPH_LOG_LEVEL", "INFO"),
                log_to_file=get_env("TGRAPH_LOG_TO_FILE", False),
                log_dir=get_env("TGRAPH_LOG_DIR", "logs"),
                file_rotation=get_env("TGRAPH_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("TGRAPH_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("TGRAPH_LOG_COMPRESSION", "zip"),
                serialize=get_env("TGRAPH_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        return cls(**(data or {}))

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file)

        # Merge: env vars override YAML (only sections that differ from defaults)
        final_dict = {**config_dict}
        default = cls()
        for section in ("segmenter", "graph", "search", "llm", "cache", "hybrid", "logging"):
            env_section = getattr(env_config, section)
            if env_section != getattr(default, section):
                final_dict[section] = env_section.model_dump()

        return cls(**final_dict) if final_dict else env_config


# Default config instance
default_config = Config()
