"""Question answering orchestration."""

from __future__ import annotations

import asyncio

from corpus_gpt.core.config import Settings
from corpus_gpt.core.logging import get_logger
from corpus_gpt.core.metrics import UNANSWERED_QUESTIONS
from corpus_gpt.ingest.embeddings import EmbeddingClient
from corpus_gpt.retrieval.completion import CompletionStreamer
from corpus_gpt.retrieval.stream import TokenStream
from corpus_gpt.retrieval.vector_index import QueryMatch, VectorIndexClient

logger = get_logger(__name__)

QA_PROMPT = (
    "Use the following pieces of context to answer the question at the end. "
    "If you don't know the answer, just say that you don't know, don't try to make up an answer.\n\n"
    "{context}\n\n"
    "Question: {question}\n"
    "Helpful Answer:"
)

SOURCE_CONDITION = (
    "Condition: End with a URL on where to find more information about the question, "
    "only if you know the answer."
)


def augment_question(question: str) -> str:
    return f"Question: {question}\n{SOURCE_CONDITION}"


def build_context(matches: list[QueryMatch]) -> str:
    return " ".join(match.page_content for match in matches)


def build_prompt(question: str, matches: list[QueryMatch]) -> str:
    """Stuff every matched chunk into a single QA prompt."""
    return QA_PROMPT.format(context=build_context(matches), question=augment_question(question))


class QueryService:
    """Embed a question, look up similar chunks and stream an answer."""

    def __init__(
        self,
        settings: Settings,
        index_client: VectorIndexClient,
        embedding_client: EmbeddingClient,
        streamer: CompletionStreamer,
    ) -> None:
        self.settings = settings
        self.index_client = index_client
        self.embedding_client = embedding_client
        self.streamer = streamer

    def retrieve(self, question: str, index_name: str | None = None) -> list[QueryMatch]:
        name = index_name or self.settings.index_name
        logger.info("Querying vector index", extra={"ctx_index": name})
        index = self.index_client.index(name)
        vector = self.embedding_client.embed_query(question)
        matches = index.query(
            vector,
            top_k=self.settings.top_k,
            include_metadata=True,
            include_values=True,
        )
        logger.info("Found %s matches", len(matches), extra={"ctx_index": name, "ctx_matches": len(matches)})
        return matches

    async def ask(self, question: str, index_name: str | None = None) -> TokenStream | None:
        """Return a stream of answer tokens, or ``None`` when nothing matched."""
        matches = await asyncio.to_thread(self.retrieve, question, index_name)
        if not matches:
            UNANSWERED_QUESTIONS.inc()
            logger.info("No matches; completion model not queried")
            return None
        logger.debug("Asking question: %s", question)
        return self.streamer.stream(build_prompt(question, matches))


__all__ = ["QA_PROMPT", "QueryService", "augment_question", "build_context", "build_prompt"]
