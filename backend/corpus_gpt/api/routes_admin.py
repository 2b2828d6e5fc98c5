"""Administrative routes for Corpus GPT."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from corpus_gpt.api.dependencies import get_index_client
from corpus_gpt.core.metrics import metrics_response
from corpus_gpt.models.dto import IndexListResponse
from corpus_gpt.retrieval.vector_index import VectorIndexClient

router = APIRouter()


@router.get("/indexes", response_model=IndexListResponse, summary="List vector indexes")
def list_indexes(client: VectorIndexClient = Depends(get_index_client)) -> IndexListResponse:
    return IndexListResponse(indexes=client.list_indexes())


@router.get("/metrics", summary="Prometheus metrics")
async def get_metrics():
    return metrics_response()


__all__ = ["router"]
