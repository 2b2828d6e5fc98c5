"""Shared FastAPI dependencies."""

from __future__ import annotations

from corpus_gpt.core.config import Settings, get_settings
from corpus_gpt.ingest.embeddings import EmbeddingClient
from corpus_gpt.ingest.pipeline import IngestPipeline
from corpus_gpt.retrieval import CompletionStreamer, QueryService, VectorIndexClient

_INDEX_CLIENT: VectorIndexClient | None = None
_STREAMER: CompletionStreamer | None = None
_PIPELINE: IngestPipeline | None = None
_QUERY_SERVICE: QueryService | None = None


def get_app_settings() -> Settings:
    return get_settings()


def get_embedding_client() -> EmbeddingClient:
    settings = get_app_settings()
    return EmbeddingClient.get(settings.embedding_model, api_key=settings.openai_api_key)


def get_index_client() -> VectorIndexClient:
    global _INDEX_CLIENT
    if _INDEX_CLIENT is None:
        settings = get_app_settings()
        _INDEX_CLIENT = VectorIndexClient(
            api_key=settings.pinecone_api_key,
            cloud=settings.pinecone_cloud,
            region=settings.pinecone_region,
        )
    return _INDEX_CLIENT


def get_completion_streamer() -> CompletionStreamer:
    global _STREAMER
    if _STREAMER is None:
        settings = get_app_settings()
        _STREAMER = CompletionStreamer(
            model_name=settings.completion_model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            api_key=settings.openai_api_key,
        )
    return _STREAMER


def get_ingest_pipeline() -> IngestPipeline:
    global _PIPELINE
    if _PIPELINE is None:
        _PIPELINE = IngestPipeline(
            settings=get_app_settings(),
            index_client=get_index_client(),
            embedding_client=get_embedding_client(),
        )
    return _PIPELINE


def get_query_service() -> QueryService:
    global _QUERY_SERVICE
    if _QUERY_SERVICE is None:
        _QUERY_SERVICE = QueryService(
            settings=get_app_settings(),
            index_client=get_index_client(),
            embedding_client=get_embedding_client(),
            streamer=get_completion_streamer(),
        )
    return _QUERY_SERVICE


__all__ = [
    "get_app_settings",
    "get_embedding_client",
    "get_index_client",
    "get_completion_streamer",
    "get_ingest_pipeline",
    "get_query_service",
]
