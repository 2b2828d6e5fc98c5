"""Ingest pipeline orchestration."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Sequence

import orjson

from corpus_gpt.core.config import Settings
from corpus_gpt.core.errors import IndexNotReadyError
from corpus_gpt.core.logging import get_logger
from corpus_gpt.core.metrics import INGEST_DURATION, UPSERTED_VECTORS
from corpus_gpt.ingest.chunker import chunk_document
from corpus_gpt.ingest.embeddings import EmbeddingClient
from corpus_gpt.ingest.loaders import LoaderRegistry
from corpus_gpt.ingest.types import Chunk, Document, DocumentSummary, IngestSummary, VectorRecord
from corpus_gpt.retrieval.vector_index import IndexHandle, VectorIndexClient

logger = get_logger(__name__)


def vector_id(source: str, ordinal: int) -> str:
    return f"{source}_{ordinal}"


def build_vector_records(source: str, chunks: Sequence[Chunk], vectors: Sequence[Sequence[float]]) -> list[VectorRecord]:
    """Pair chunks with their embeddings under deterministic ids."""
    if len(chunks) != len(vectors):
        raise ValueError(f"Got {len(vectors)} embeddings for {len(chunks)} chunks")
    records = []
    for ordinal, (chunk, values) in enumerate(zip(chunks, vectors)):
        metadata = {
            **chunk.metadata,
            "loc": orjson.dumps(chunk.metadata.get("loc")).decode("utf-8"),
            "pageContent": chunk.page_content,
            "txtPath": source,
        }
        records.append(VectorRecord(id=vector_id(source, ordinal), values=list(values), metadata=metadata))
    return records


class IngestPipeline:
    """Coordinate loaders, chunking, embeddings, and index upserts."""

    def __init__(
        self,
        settings: Settings,
        index_client: VectorIndexClient,
        embedding_client: EmbeddingClient,
        loader_registry: LoaderRegistry | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = settings
        self.index_client = index_client
        self.embedding_client = embedding_client
        self.loader_registry = loader_registry or LoaderRegistry()
        self._sleep = sleep
        self._clock = clock

    def ensure_index(self, index_name: str | None = None, dimension: int | None = None) -> bool:
        """Create the index if it is missing; return whether it was created."""
        name = index_name or self.settings.index_name
        logger.info("Checking index %s", name, extra={"ctx_index": name})
        if name in self.index_client.list_indexes():
            logger.info("Index %s already exists", name, extra={"ctx_index": name})
            return False
        self.index_client.create_index(
            name,
            dimension=dimension or self.settings.vector_dimension,
            metric=self.settings.index_metric,
        )
        self._wait_until_ready(name)
        return True

    def update_index(self, documents: Sequence[Document], index_name: str | None = None) -> IngestSummary:
        """Chunk, embed and upsert every document; the first failure aborts the run."""
        name = index_name or self.settings.index_name
        index = self.index_client.index(name)
        summary = IngestSummary(index_name=name)
        for document in documents:
            started = time.perf_counter()
            summary.documents.append(self._ingest_document(index, document))
            INGEST_DURATION.observe(time.perf_counter() - started)
        logger.info(
            "Index %s updated with %s vectors",
            name,
            summary.vectors,
            extra={"ctx_index": name, "ctx_vectors": summary.vectors},
        )
        return summary

    def ingest_paths(self, paths: Sequence[Path], index_name: str | None = None) -> IngestSummary:
        documents = self.loader_registry.load_paths(paths)
        logger.info("Loaded %s documents", len(documents), extra={"ctx_documents": len(documents)})
        created = self.ensure_index(index_name)
        summary = self.update_index(documents, index_name)
        summary.created_index = created
        return summary

    # Internal helpers -------------------------------------------------

    def _ingest_document(self, index: IndexHandle, document: Document) -> DocumentSummary:
        source = document.source
        logger.info("Processing document %s", source, extra={"ctx_source": source})
        chunks = chunk_document(
            document,
            chunk_size=self.settings.chunk_size,
            chunk_overlap=self.settings.chunk_overlap,
        )
        if not chunks:
            logger.warning("Document %s produced no chunks", source, extra={"ctx_source": source})
            return DocumentSummary(source=source, chunks=0)

        logger.info(
            "Embedding %s chunks",
            len(chunks),
            extra={"ctx_source": source, "ctx_chunks": len(chunks)},
        )
        vectors = self.embedding_client.embed_documents([chunk.page_content for chunk in chunks])
        records = build_vector_records(source, chunks, vectors)

        batch_size = self.settings.batch_size
        for start in range(0, len(records), batch_size):
            written = index.upsert(records[start : start + batch_size])
            UPSERTED_VECTORS.labels(index=index.name).inc(written)
        return DocumentSummary(source=source, chunks=len(records), vector_ids=[record.id for record in records])

    def _wait_until_ready(self, name: str) -> bool:
        timeout = self.settings.index_ready_timeout
        interval = self.settings.index_poll_interval
        logger.info("Waiting up to %.0fs for index %s to initialize", timeout, name, extra={"ctx_index": name})
        started = self._clock()
        deadline = started + timeout
        while True:
            if self.index_client.is_ready(name):
                return True
            now = self._clock()
            if now >= deadline:
                break
            self._sleep(min(interval, deadline - now))
        waited = self._clock() - started
        if self.settings.index_ready_strict:
            raise IndexNotReadyError(name, waited)
        logger.warning(
            "Index %s not ready after %.1fs; continuing",
            name,
            waited,
            extra={"ctx_index": name},
        )
        return False


__all__ = ["IngestPipeline", "build_vector_records", "vector_id"]
