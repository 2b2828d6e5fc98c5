"""Ingest API routes."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from fastapi import APIRouter, Depends, HTTPException

from corpus_gpt.api.dependencies import get_app_settings, get_ingest_pipeline
from corpus_gpt.core.config import Settings
from corpus_gpt.core.metrics import REQUEST_COUNT
from corpus_gpt.ingest.pipeline import IngestPipeline
from corpus_gpt.models.dto import IngestRequest, IngestResponse, SetupRequest

router = APIRouter()

# Plain ``def`` handlers: the pipeline blocks on network calls and FastAPI
# runs these in its threadpool.


@router.post("/setup", response_model=IngestResponse, summary="Create the index and load the corpus")
def setup(
    request: SetupRequest | None = None,
    pipeline: IngestPipeline = Depends(get_ingest_pipeline),
    settings: Settings = Depends(get_app_settings),
) -> IngestResponse:
    request = request or SetupRequest()
    paths = _resolve_paths(request.paths or [str(settings.docs_path)])
    summary = pipeline.ingest_paths(paths, index_name=request.index)
    REQUEST_COUNT.labels(endpoint="setup", status="200").inc()
    return IngestResponse(**summary.to_dict())


@router.post("/ingest", response_model=IngestResponse, summary="Ingest explicit paths")
def trigger_ingest(
    request: IngestRequest,
    pipeline: IngestPipeline = Depends(get_ingest_pipeline),
) -> IngestResponse:
    summary = pipeline.ingest_paths(_resolve_paths(request.paths), index_name=request.index)
    REQUEST_COUNT.labels(endpoint="ingest", status="200").inc()
    return IngestResponse(**summary.to_dict())


def _resolve_paths(raw_paths: Sequence[str]) -> list[Path]:
    paths = [Path(path).expanduser() for path in raw_paths]
    missing = [str(path) for path in paths if not path.exists()]
    if missing:
        raise HTTPException(status_code=400, detail=f"Paths not found: {', '.join(missing)}")
    return paths


__all__ = ["router"]
