"""Test fixtures for Corpus GPT."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from fakes import FakeAsyncOpenAI, FakeOpenAI, FakePinecone  # noqa: E402


def _reset_singletons() -> None:
    from corpus_gpt.api import dependencies as deps
    from corpus_gpt.core.config import get_settings
    from corpus_gpt.ingest.embeddings import EmbeddingClient

    EmbeddingClient._instances.clear()
    get_settings.cache_clear()
    deps._INDEX_CLIENT = None
    deps._STREAMER = None
    deps._PIPELINE = None
    deps._QUERY_SERVICE = None


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset global singletons and environment between tests."""
    monkeypatch.setenv("CGPT_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("CGPT_INDEX_NAME", "test-index")
    monkeypatch.setenv("CGPT_VECTOR_DIMENSION", "3")
    monkeypatch.setenv("CGPT_INDEX_READY_TIMEOUT", "0")
    monkeypatch.setenv("CGPT_DOCS_PATH", str(tmp_path / "documents"))
    _reset_singletons()
    yield
    _reset_singletons()


@pytest.fixture
def fake_pinecone() -> FakePinecone:
    return FakePinecone()


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def fake_chat() -> FakeAsyncOpenAI:
    return FakeAsyncOpenAI(tokens=["Next", ".js ", "is ", "a ", "framework."])


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    docs = tmp_path / "documents"
    docs.mkdir()
    (docs / "routing.md").write_text(
        "---\ntitle: Routing\nurl: https://nextjs.org/docs/routing\n---\n"
        "# Routing\n\nThe app directory defines routes with folders.\n",
        encoding="utf-8",
    )
    (docs / "data.txt").write_text("Data fetching happens in server components.\n", encoding="utf-8")
    (docs / "image.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    return docs


@pytest.fixture(scope="session")
def sample_text() -> str:
    return "Title\n\nParagraph one.\n\nParagraph two is here."
