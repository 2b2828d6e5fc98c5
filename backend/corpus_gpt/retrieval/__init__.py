"""Retrieval orchestration components."""

from .vector_index import IndexHandle, QueryMatch, VectorIndexClient
from .stream import StreamState, TokenStream
from .completion import CompletionCallbacks, CompletionStreamer
from .search import QueryService

__all__ = [
    "VectorIndexClient",
    "IndexHandle",
    "QueryMatch",
    "StreamState",
    "TokenStream",
    "CompletionCallbacks",
    "CompletionStreamer",
    "QueryService",
]
