"""
Tests for the FastAPI application.

Uses the Starlette TestClient as a context manager so the lifespan
creates (and closes) the engine.
"""

import pytest
from fastapi.testclient import TestClient

import app as app_module


@pytest.fixture
def client(monkeypatch):
    """Provide a TestClient with the reasoning engine disabled."""
    monkeypatch.setenv("TGRAPH_LLM_ENABLED", "false")
    monkeypatch.setenv("TGRAPH_LOG_SERIALIZE", "false")
    with TestClient(app_module.app) as c:
        yield c


@pytest.fixture
def create(client, sample_document):
    """Create an index of the sample document and return the response body."""

    def _create(kind: str, **extra) -> dict:
        payload = {"text": sample_document, "title": "User Guide", **extra}
        response = client.post(f"/indexes/{kind}", json=payload)
        assert response.status_code == 200
        return response.json()

    return _create


@pytest.mark.unit
class TestHealth:
    """Tests for health and info endpoints."""

    def test_health(self, client):
        """Test the engine is initialized by the lifespan."""
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["engine_initialized"] is True
        assert data["tree_search"] == "keyword"
        assert data["graph_search_mode"] == "selective"
        assert data["cached_indexes"] == 0

    def test_root(self, client):
        """Test API information."""
        assert client.get("/").json()["name"] == "ThoughtGraph API"

    def test_engine_available_in_lifespan(self, client):
        """Test the engine is only available inside the lifespan."""
        assert app_module.engine is not None


@pytest.mark.unit
class TestIndexes:
    """Tests for index creation and lookup."""

    def test_create_tree(self, client, create):
        """Test tree creation returns an id and statistics."""
        data = create("tree")

        assert data["kind"] == "tree"
        assert data["title"] == "User Guide"
        assert data["stats"]["node_count"] == 6
        assert client.get("/health").json()["cached_indexes"] == 1

    def test_create_graph(self, client, create):
        """Test graph creation returns graph statistics."""
        data = create("graph")

        assert data["kind"] == "graph"
        assert data["stats"]["node_count"] == 6

    def test_graph_modes_have_distinct_ids(self, client, create):
        """Test tree-converted graphs are stored separately."""
        graph = create("graph", mode="graph")
        converted = create("graph", mode="tree")
        assert graph["index_id"] != converted["index_id"]

    def test_same_document_same_id(self, client, create):
        """Test indexing the same document twice reuses the index."""
        assert create("tree")["index_id"] == create("tree")["index_id"]

    def test_get_index(self, client, create):
        """Test a created index can be fetched as JSON."""
        index_id = create("tree")["index_id"]
        data = client.get(f"/indexes/tree/{index_id}").json()

        assert data["title"] == "User Guide"
        assert data["nodes"][0]["children"][0]["title"] == "Getting Started"

    def test_unknown_index(self, client):
        """Test unknown ids return 404."""
        assert client.get("/indexes/tree/missing").status_code == 404

    def test_wrong_kind(self, client, create):
        """Test a tree id is not found as a graph."""
        index_id = create("tree")["index_id"]
        assert client.get(f"/indexes/graph/{index_id}").status_code == 404

    def test_invalid_kind(self, client):
        """Test unknown index kinds are rejected by validation."""
        assert client.get("/indexes/forest/abc").status_code == 422

    def test_empty_title_rejected(self, client):
        """Test request validation rejects empty titles."""
        response = client.post("/indexes/tree", json={"text": "x", "title": ""})
        assert response.status_code == 422

    def test_clear(self, client, create):
        """Test deleting drops every cached index."""
        create("tree")
        create("graph")

        assert client.delete("/indexes").json() == {"removed": 2}
        assert client.get("/health").json()["cached_indexes"] == 0


@pytest.mark.unit
class TestSearchAndRetrieve:
    """Tests for search and retrieval endpoints."""

    def test_tree_search(self, client, create):
        """Test tree search returns node ids and a rationale."""
        index_id = create("tree")["index_id"]
        data = client.post(
            f"/indexes/tree/{index_id}/search", json={"query": "installation"}
        ).json()

        assert data["node_list"]
        assert "Installation" in data["rationale"]

    def test_graph_search(self, client, create):
        """Test graph search returns paths with a combined rationale."""
        index_id = create("graph")["index_id"]
        response = client.post(
            f"/indexes/graph/{index_id}/search",
            json={"query": "installation", "max_results": 3},
        )

        assert response.status_code == 200
        data = response.json()
        assert 1 <= len(data["paths"]) <= 3
        assert data["node_list"]
        assert set(data) >= {"paths", "node_list", "activated_node_count", "rationale"}

    def test_tree_retrieve(self, client, create):
        """Test retrieval formats the best section first."""
        index_id = create("tree")["index_id"]
        data = client.post(
            f"/indexes/tree/{index_id}/retrieve", json={"query": "installation"}
        ).json()

        assert data["context"].startswith("### Installation\n")
        assert len(data["contents"]) == len(data["node_list"])

    def test_graph_retrieve(self, client, create):
        """Test graph retrieval over a built graph returns context."""
        index_id = create("graph")["index_id"]
        data = client.post(
            f"/indexes/graph/{index_id}/retrieve", json={"query": "installation"}
        ).json()

        assert data["context"]
        assert "### Installation\n" in data["context"]
        assert len(data["contents"]) == len(data["node_list"])

    def test_search_unknown_index(self, client):
        """Test searching an unknown index returns 404."""
        response = client.post("/indexes/graph/missing/search", json={"query": "x"})
        assert response.status_code == 404

    def test_invalid_search_bounds(self, client, create):
        """Test non-positive bounds are rejected."""
        index_id = create("graph")["index_id"]
        response = client.post(
            f"/indexes/graph/{index_id}/search", json={"query": "x", "max_depth": 0}
        )
        assert response.status_code == 422
