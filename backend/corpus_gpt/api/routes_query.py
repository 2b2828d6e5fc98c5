"""Query API routes."""

from __future__ import annotations

from typing import AsyncIterator

from fastapi import APIRouter, Depends, Response
from fastapi.responses import StreamingResponse

from corpus_gpt.api.dependencies import get_query_service
from corpus_gpt.core.logging import get_logger
from corpus_gpt.core.metrics import REQUEST_COUNT
from corpus_gpt.models.dto import AskRequest
from corpus_gpt.retrieval.search import QueryService
from corpus_gpt.retrieval.stream import TokenStream

router = APIRouter()
logger = get_logger(__name__)

NO_ANSWER_HEADER = "X-Answer"


@router.post(
    "/ask",
    summary="Stream an answer built from the indexed corpus",
    response_class=StreamingResponse,
    responses={204: {"description": "No indexed chunk matched the question"}},
)
async def ask(
    request: AskRequest,
    service: QueryService = Depends(get_query_service),
) -> Response:
    stream = await service.ask(request.question, index_name=request.index)
    if stream is None:
        REQUEST_COUNT.labels(endpoint="ask", status="204").inc()
        return Response(status_code=204, headers={NO_ANSWER_HEADER: "none"})
    REQUEST_COUNT.labels(endpoint="ask", status="200").inc()
    return StreamingResponse(_relay(stream), media_type="text/plain; charset=utf-8")


async def _relay(stream: TokenStream) -> AsyncIterator[str]:
    try:
        async for token in stream:
            yield token
    except Exception:
        # Headers are already sent; re-raising cuts the chunked body off so the
        # client sees a broken transfer instead of a clean end.
        logger.exception("Answer stream aborted")
        raise


__all__ = ["router", "NO_ANSWER_HEADER"]
