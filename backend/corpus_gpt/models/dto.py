"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SetupRequest(BaseModel):
    index: str | None = Field(default=None, description="Index name; defaults to the configured one")
    paths: list[str] | None = Field(default=None, description="Override the configured corpus directory")


class IngestRequest(BaseModel):
    paths: list[str] = Field(min_length=1, description="Files or directories to ingest")
    index: str | None = None


class DocumentResult(BaseModel):
    source: str
    chunks: int
    vector_ids: list[str]


class IngestResponse(BaseModel):
    index_name: str
    created_index: bool
    vectors: int
    documents: list[DocumentResult]


class AskRequest(BaseModel):
    question: str = Field(min_length=1)
    index: str | None = Field(default=None, description="Corpus (index) to answer from")


class IndexListResponse(BaseModel):
    indexes: list[str]


__all__ = [
    "SetupRequest",
    "IngestRequest",
    "DocumentResult",
    "IngestResponse",
    "AskRequest",
    "IndexListResponse",
]
