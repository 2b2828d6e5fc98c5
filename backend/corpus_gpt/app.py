"""FastAPI application setup for Corpus GPT."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from corpus_gpt.api.dependencies import get_app_settings
from corpus_gpt.api.routes_admin import router as admin_router
from corpus_gpt.api.routes_ingest import router as ingest_router
from corpus_gpt.api.routes_query import router as query_router
from corpus_gpt.core.logging import configure_from_settings

configure_from_settings(get_app_settings())

app = FastAPI(
    title="Corpus GPT",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
    expose_headers=["X-Answer"],
)

app.include_router(ingest_router, prefix="", tags=["ingest"])
app.include_router(query_router, prefix="", tags=["query"])
app.include_router(admin_router, prefix="", tags=["admin"])


@app.get("/health", tags=["admin"])
def health() -> dict[str, bool]:
    """Simple liveness check."""
    return {"ok": True}
