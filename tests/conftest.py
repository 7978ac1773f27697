"""
Shared test fixtures for all test modules.
"""

from datetime import UTC, datetime

import pytest

from thoughtgraph.models import (
    EdgeType,
    GraphEdge,
    GraphIndex,
    GraphNode,
    GraphNodeType,
    NodeMetadata,
    Position,
)
from thoughtgraph.utils.id_generator import SequentialIdGenerator

FIXED_TIME = datetime(2024, 1, 1, tzinfo=UTC)

SAMPLE_DOCUMENT = """# Getting Started

This guide explains the product installation and basic usage.

## Installation

Download the installer package and run the installation wizard.

## Configuration

Edit the configuration file to change server settings.

# API Reference

The server exposes endpoints for search and retrieval.

## Endpoints

Each endpoint accepts JSON requests and returns JSON responses."""


def fixed_clock() -> datetime:
    return FIXED_TIME


@pytest.fixture
def id_generator():
    """Deterministic node ids: node_1, node_2, ..."""
    return SequentialIdGenerator()


@pytest.fixture
def sample_document():
    return SAMPLE_DOCUMENT


def _make_node(
    node_id: str,
    title: str | None = None,
    keywords: list[str] | None = None,
    centrality: float | None = 0.5,
    node_type: GraphNodeType = GraphNodeType.SECTION,
    position: int = 0,
) -> GraphNode:
    """Build a graph node for hand-made test graphs."""
    return GraphNode(
        node_id=node_id,
        title=title or node_id.upper(),
        content=f"Content of {node_id}",
        summary=f"Summary of {node_id}",
        type=node_type,
        position=Position(start=position, end=position),
        metadata=NodeMetadata(level=1, keywords=keywords or [], centrality=centrality),
    )


def _make_edge(source: str, target: str, weight: float, edge_type=EdgeType.SEMANTIC) -> GraphEdge:
    return GraphEdge(source=source, target=target, weight=weight, type=edge_type)


@pytest.fixture
def chain_graph():
    """
    Small graph: a - b - c - d with one heavy shortcut a - c.

        a --0.9-- b --0.8-- c --0.7-- d
        a ---------0.5--------- c
    """
    nodes = [
        _make_node("a", keywords=["alpha", "shared"], position=0),
        _make_node("b", keywords=["beta", "shared"], position=1),
        _make_node("c", keywords=["gamma", "shared"], position=2),
        _make_node("d", keywords=["delta"], position=3),
    ]
    edges = [
        _make_edge("a", "b", 0.9),
        _make_edge("b", "c", 0.8),
        _make_edge("c", "d", 0.7),
        _make_edge("a", "c", 0.5),
    ]
    return GraphIndex(title="Chain", nodes=nodes, edges=edges)


@pytest.fixture
def make_node():
    """Factory for graph nodes."""
    return _make_node


@pytest.fixture
def make_edge():
    """Factory for graph edges."""
    return _make_edge


@pytest.fixture
def clock():
    """Fixed creation timestamp source."""
    return fixed_clock
