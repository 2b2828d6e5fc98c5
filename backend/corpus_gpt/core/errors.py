"""Local exception types.

Errors raised by the OpenAI and Pinecone SDKs are not wrapped; they reach the
caller unchanged.
"""

from __future__ import annotations


class CorpusGPTError(Exception):
    """Base class for errors raised by this package itself."""


class StreamClosedError(CorpusGPTError):
    """A token was pushed into a stream that already closed or aborted."""


class IndexNotReadyError(CorpusGPTError):
    """A freshly created index did not report ready before the timeout."""

    def __init__(self, index_name: str, waited: float) -> None:
        self.index_name = index_name
        self.waited = waited
        super().__init__(f"Index {index_name!r} not ready after {waited:.1f}s")


__all__ = ["CorpusGPTError", "StreamClosedError", "IndexNotReadyError"]
