"""Vector index abstraction over Pinecone."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from pinecone import Pinecone, ServerlessSpec

from corpus_gpt.ingest.types import VectorRecord

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QueryMatch:
    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)
    values: list[float] | None = None

    @property
    def page_content(self) -> str:
        return str(self.metadata.get("pageContent", ""))


class IndexHandle:
    """Operations on one named index."""

    def __init__(self, name: str, index: Any) -> None:
        self.name = name
        self._index = index

    def upsert(self, records: Sequence[VectorRecord]) -> int:
        if not records:
            return 0
        self._index.upsert(vectors=[record.to_dict() for record in records])
        return len(records)

    def query(
        self,
        vector: Sequence[float],
        top_k: int = 10,
        include_metadata: bool = True,
        include_values: bool = False,
    ) -> list[QueryMatch]:
        response = self._index.query(
            vector=list(vector),
            top_k=top_k,
            include_metadata=include_metadata,
            include_values=include_values,
        )
        return [_to_match(match) for match in (response.matches or [])]


class VectorIndexClient:
    """Manage Pinecone indexes: listing, creation, readiness and handles."""

    def __init__(
        self,
        api_key: str | None = None,
        cloud: str = "aws",
        region: str = "us-east-1",
        client: Any | None = None,
    ) -> None:
        self._api_key = api_key
        self.cloud = cloud
        self.region = region
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = Pinecone(api_key=self._api_key)
        return self._client

    def list_indexes(self) -> list[str]:
        return list(self.client.list_indexes().names())

    def create_index(self, name: str, dimension: int, metric: str = "cosine") -> None:
        logger.info("Creating index %s", name, extra={"ctx_index": name, "ctx_dimension": dimension})
        self.client.create_index(
            name=name,
            dimension=dimension,
            metric=metric,
            spec=ServerlessSpec(cloud=self.cloud, region=self.region),
        )

    def is_ready(self, name: str) -> bool:
        status = self.client.describe_index(name).status
        return bool(status["ready"])

    def index(self, name: str) -> IndexHandle:
        return IndexHandle(name, self.client.Index(name))


def _to_match(match: Any) -> QueryMatch:
    if isinstance(match, Mapping):
        return QueryMatch(
            id=str(match["id"]),
            score=float(match.get("score") or 0.0),
            metadata=dict(match.get("metadata") or {}),
            values=list(match["values"]) if match.get("values") else None,
        )
    return QueryMatch(
        id=str(match.id),
        score=float(match.score or 0.0),
        metadata=dict(match.metadata or {}),
        values=list(match.values) if getattr(match, "values", None) else None,
    )


__all__ = ["VectorIndexClient", "IndexHandle", "QueryMatch"]
