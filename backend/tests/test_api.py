"""API integration tests."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from fakes import FakeAsyncOpenAI, FakeOpenAI, FakePinecone
from fastapi.testclient import TestClient

from corpus_gpt.api import dependencies as deps
from corpus_gpt.api.routes_query import _relay
from corpus_gpt.app import app
from corpus_gpt.ingest.embeddings import EmbeddingClient
from corpus_gpt.retrieval import CompletionStreamer, VectorIndexClient
from corpus_gpt.retrieval.stream import TokenStream


@pytest.fixture
def client(fake_pinecone: FakePinecone, fake_openai: FakeOpenAI, fake_chat: FakeAsyncOpenAI) -> TestClient:
    settings = deps.get_app_settings()
    EmbeddingClient._instances[settings.embedding_model] = EmbeddingClient(
        settings.embedding_model, client=fake_openai
    )
    deps._INDEX_CLIENT = VectorIndexClient(client=fake_pinecone)
    deps._STREAMER = CompletionStreamer(client=fake_chat)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True


def test_setup_and_ask_flow(client: TestClient, corpus_dir: Path, fake_pinecone: FakePinecone) -> None:
    setup_resp = client.post("/setup", json={})
    assert setup_resp.status_code == 200
    payload = setup_resp.json()
    assert payload["index_name"] == "test-index"
    assert payload["created_index"] is True
    assert payload["vectors"] == 2

    indexes_resp = client.get("/indexes")
    assert indexes_resp.json() == {"indexes": ["test-index"]}

    ask_resp = client.post("/ask", json={"question": "How are routes defined?"})
    assert ask_resp.status_code == 200
    assert ask_resp.text == "Next.js is a framework."
    assert ask_resp.headers["content-type"].startswith("text/plain")


def test_ask_without_matches_returns_no_content(client: TestClient, fake_chat: FakeAsyncOpenAI) -> None:
    resp = client.post("/ask", json={"question": "Is anything indexed?", "index": "empty-index"})
    assert resp.status_code == 204
    assert resp.headers["X-Answer"] == "none"
    assert fake_chat.completions.calls == []


def test_ingest_rejects_missing_paths(client: TestClient, tmp_path: Path) -> None:
    resp = client.post("/ingest", json={"paths": [str(tmp_path / "nowhere")]})
    assert resp.status_code == 400


def test_ingest_explicit_file_into_named_index(
    client: TestClient, corpus_dir: Path, fake_pinecone: FakePinecone
) -> None:
    target = corpus_dir / "data.txt"
    resp = client.post("/ingest", json={"paths": [str(target)], "index": "notes"})
    assert resp.status_code == 200
    assert resp.json()["documents"][0]["vector_ids"] == [f"{target}_0"]
    assert list(fake_pinecone.indexes) == ["notes"]


def test_stream_error_breaks_the_response(client: TestClient, corpus_dir: Path) -> None:
    deps._STREAMER = CompletionStreamer(client=FakeAsyncOpenAI(tokens=["partial "], error=RuntimeError("boom")))
    deps._QUERY_SERVICE = None
    client.post("/setup")
    with pytest.raises(RuntimeError, match="boom"):
        client.post("/ask", json={"question": "What fails?"})


def test_relay_reraises_abort_after_partial_answer() -> None:
    async def scenario() -> list[str]:
        stream = TokenStream()
        stream.push("partial ")
        stream.abort(RuntimeError("boom"))
        received = []
        with pytest.raises(RuntimeError, match="boom"):
            async for token in _relay(stream):
                received.append(token)
        return received

    assert asyncio.run(scenario()) == ["partial "]


def test_setup_accepts_missing_body(client: TestClient, corpus_dir: Path) -> None:
    resp = client.post("/setup")
    assert resp.status_code == 200
    assert resp.json()["vectors"] == 2


def test_setup_with_explicit_paths(client: TestClient, corpus_dir: Path, fake_pinecone: FakePinecone) -> None:
    resp = client.post("/setup", json={"paths": [str(corpus_dir / "routing.md")], "index": "routing"})
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["index_name"] == "routing"
    assert [doc["source"] for doc in payload["documents"]] == [str(corpus_dir / "routing.md")]
    assert list(fake_pinecone.indexes) == ["routing"]


def test_app_settings_follow_environment(client: TestClient, tmp_path: Path) -> None:
    settings = deps.get_app_settings()
    assert settings.index_name == "test-index"
    assert settings.vector_dimension == 3
    assert settings.docs_path == tmp_path / "documents"


def test_metrics_endpoint(client: TestClient) -> None:
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "cgpt_requests" in resp.text
