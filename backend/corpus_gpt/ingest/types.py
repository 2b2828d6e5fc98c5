"""Common ingestion data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Document:
    """Raw text read from a corpus file; ``metadata["source"]`` names the file."""

    content: str
    metadata: dict[str, Any]

    @property
    def source(self) -> str:
        return str(self.metadata["source"])


@dataclass(slots=True)
class Chunk:
    """Bounded slice of a document produced by the chunker."""

    page_content: str
    metadata: dict[str, Any]


@dataclass(slots=True)
class VectorRecord:
    """Vector ready to be upserted into the index."""

    id: str
    values: list[float]
    metadata: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "values": self.values, "metadata": self.metadata}


@dataclass(slots=True)
class DocumentSummary:
    source: str
    chunks: int
    vector_ids: list[str] = field(default_factory=list)


@dataclass(slots=True)
class IngestSummary:
    """Aggregated outcome of an ingest run."""

    index_name: str
    created_index: bool = False
    documents: list[DocumentSummary] = field(default_factory=list)

    @property
    def vectors(self) -> int:
        return sum(item.chunks for item in self.documents)

    def to_dict(self) -> dict[str, Any]:
        return {
            "index_name": self.index_name,
            "created_index": self.created_index,
            "vectors": self.vectors,
            "documents": [
                {"source": item.source, "chunks": item.chunks, "vector_ids": list(item.vector_ids)}
                for item in self.documents
            ],
        }


__all__ = [
    "Document",
    "Chunk",
    "VectorRecord",
    "DocumentSummary",
    "IngestSummary",
]
