"""Chunking utilities.

Text is split with LangChain's recursive character splitter: separators are
tried coarsest first and the pieces are merged back into chunks no longer than
``chunk_size`` characters. Each chunk records the lines it came from.
"""

from __future__ import annotations

from typing import Sequence

from langchain_text_splitters import RecursiveCharacterTextSplitter

from corpus_gpt.ingest.types import Chunk, Document

DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", " ", "")


def build_splitter(
    chunk_size: int = 1000,
    chunk_overlap: int = 0,
    separators: Sequence[str] = DEFAULT_SEPARATORS,
) -> RecursiveCharacterTextSplitter:
    if chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be smaller than chunk_size")
    return RecursiveCharacterTextSplitter(
        separators=list(separators),
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        keep_separator=False,
        add_start_index=True,
        length_function=len,
    )


def split_text(
    text: str,
    chunk_size: int = 1000,
    chunk_overlap: int = 0,
    separators: Sequence[str] = DEFAULT_SEPARATORS,
) -> list[str]:
    """Split text into pieces of at most ``chunk_size`` characters."""
    return build_splitter(chunk_size, chunk_overlap, separators).split_text(text)


def chunk_document(
    document: Document,
    chunk_size: int = 1000,
    chunk_overlap: int = 0,
) -> list[Chunk]:
    """Split a document into ordered chunks carrying ``source`` and line ``loc``."""
    text = document.content
    if not text.strip():
        return []

    splitter = build_splitter(chunk_size, chunk_overlap)
    chunks: list[Chunk] = []
    previous = 0
    for piece in splitter.create_documents([text], metadatas=[dict(document.metadata)]):
        metadata = dict(piece.metadata)
        start = metadata.pop("start_index", -1)
        # Pieces joined across collapsed whitespace are not substrings of the text.
        if start < 0:
            start = previous
        first_line = text.count("\n", 0, start) + 1
        metadata["loc"] = {"lines": {"from": first_line, "to": first_line + piece.page_content.count("\n")}}
        chunks.append(Chunk(page_content=piece.page_content, metadata=metadata))
        previous = start
    return chunks


__all__ = ["DEFAULT_SEPARATORS", "build_splitter", "split_text", "chunk_document"]
