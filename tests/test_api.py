"""
HTTP API: health, record ingest, FAQ load and search, with error mapping.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from faqsearch.api import main
from faqsearch.core.errors import EmbeddingProviderError, StorageError
from faqsearch.vector.embeddings import DeterministicHashEmbedding
from faqsearch.vector.store import SQLiteVectorStore


@pytest.fixture
def store(tmp_path):
    store = SQLiteVectorStore(str(tmp_path / "embeddings.db"))
    store.initialize()
    return store


@pytest.fixture
def embedder():
    return DeterministicHashEmbedding(dimension=32)


@pytest.fixture
def client(store, embedder):
    main.app.dependency_overrides[main.get_store] = lambda: store
    main.app.dependency_overrides[main.get_provider] = lambda: embedder
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


def test_health(client, store):
    store.append("cat", [1.0, 0.0])

    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["db_health"] is True
    assert data["record_count"] == 1


def test_create_record_then_search(client, store):
    response = client.post("/records", json={"label": "Q: refunds?\nA: 30 days"})
    assert response.status_code == 200
    assert response.json()["dimension"] == 32
    assert store.count() == 1

    response = client.post("/search", json={"query": "Q: refunds?\nA: 30 days", "limit": 5})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["results"][0]["label"] == "Q: refunds?\nA: 30 days"
    assert data["results"][0]["distance"] == pytest.approx(0.0, abs=1e-6)
    assert data["results"][0]["strong_match"] is True


def test_search_empty_corpus_is_not_an_error(client):
    response = client.post("/search", json={"query": "anything"})

    assert response.status_code == 200
    assert response.json() == {"query": "anything", "results": [], "total": 0}


def test_search_reports_corrupt_distance_as_null(client, store, embedder):
    store.append("corrupt", [float("nan")] * 32)

    response = client.post("/search", json={"query": "q"})

    assert response.status_code == 200
    result = response.json()["results"][0]
    assert result["distance"] is None
    assert result["similarity"] is None


def test_search_validation(client):
    assert client.post("/search", json={"query": "   "}).status_code == 422
    assert client.post("/search", json={"query": "q", "limit": 0}).status_code == 422
    assert client.post("/records", json={"label": ""}).status_code == 422


def test_load_faq(client, store, tmp_path):
    faq = tmp_path / "faq.txt"
    faq.write_text("Q: One?\nA: First.\nQ: Two?\nA: Second.\n", encoding="utf-8")

    response = client.post("/faq/load", json={"path": str(faq)})

    assert response.status_code == 200
    assert response.json()["loaded"] == 2
    assert store.count() == 2


def test_load_faq_missing_file_is_bad_request(client, tmp_path):
    response = client.post("/faq/load", json={"path": str(tmp_path / "missing.txt")})
    assert response.status_code == 400


def test_storage_error_maps_to_503(embedder):
    failing_store = MagicMock(spec=SQLiteVectorStore)
    failing_store.enumerate.side_effect = StorageError("database is locked", operation="enumerate")
    main.app.dependency_overrides[main.get_store] = lambda: failing_store
    main.app.dependency_overrides[main.get_provider] = lambda: embedder
    try:
        with TestClient(main.app) as client:
            response = client.post("/search", json={"query": "q"})
    finally:
        main.app.dependency_overrides.clear()

    assert response.status_code == 503
    assert "Storage unavailable" in response.json()["detail"]


def test_provider_error_maps_to_502(store):
    provider = MagicMock()
    provider.embed_text.side_effect = EmbeddingProviderError("quota", provider="gemini", status_code=429)
    main.app.dependency_overrides[main.get_store] = lambda: store
    main.app.dependency_overrides[main.get_provider] = lambda: provider
    try:
        with TestClient(main.app) as client:
            response = client.post("/records", json={"label": "x"})
    finally:
        main.app.dependency_overrides.clear()

    assert response.status_code == 502
    assert store.count() == 0
