"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

REQUEST_COUNT = Counter(
    "cgpt_requests_total",
    "Total HTTP requests",
    labelnames=("endpoint", "status"),
    registry=REGISTRY,
)

INGEST_DURATION = Histogram(
    "cgpt_ingest_duration_seconds",
    "Duration of a single document ingest",
    registry=REGISTRY,
)

UPSERTED_VECTORS = Counter(
    "cgpt_upserted_vectors_total",
    "Vectors upserted into the index",
    labelnames=("index",),
    registry=REGISTRY,
)

STREAMED_TOKENS = Counter(
    "cgpt_streamed_tokens_total",
    "Completion tokens written to answer streams",
    registry=REGISTRY,
)

UNANSWERED_QUESTIONS = Counter(
    "cgpt_unanswered_questions_total",
    "Questions that matched no indexed chunks",
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "REQUEST_COUNT",
    "INGEST_DURATION",
    "UPSERTED_VECTORS",
    "STREAMED_TOKENS",
    "UNANSWERED_QUESTIONS",
    "metrics_response",
]
