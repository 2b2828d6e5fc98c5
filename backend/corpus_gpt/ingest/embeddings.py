"""Embedding client backed by the OpenAI embeddings API."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import openai

logger = logging.getLogger(__name__)

# Inputs accepted by a single embeddings request.
_OPENAI_BATCH_LIMIT = 2048


class EmbeddingClient:
    """Turn chunk texts and questions into vectors.

    The underlying ``openai.OpenAI`` client is built on first use so that the
    app can start without credentials; pass ``client`` to inject a fake.
    """

    _instances: dict[str, "EmbeddingClient"] = {}

    def __init__(
        self,
        model_name: str,
        api_key: str | None = None,
        client: Any | None = None,
        strip_new_lines: bool = True,
    ) -> None:
        self.model_name = model_name
        self._api_key = api_key
        self._client = client
        self.strip_new_lines = strip_new_lines

    @classmethod
    def get(cls, model_name: str, api_key: str | None = None) -> "EmbeddingClient":
        if model_name not in cls._instances:
            cls._instances[model_name] = EmbeddingClient(model_name=model_name, api_key=api_key)
        return cls._instances[model_name]

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = openai.OpenAI(api_key=self._api_key)
        return self._client

    def embed_documents(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed ``texts`` in order, one vector per input."""
        if not texts:
            return []
        prepared = [self._prepare(text) for text in texts]
        vectors: list[list[float]] = []
        for start in range(0, len(prepared), _OPENAI_BATCH_LIMIT):
            batch = prepared[start : start + _OPENAI_BATCH_LIMIT]
            response = self.client.embeddings.create(model=self.model_name, input=batch)
            ordered = sorted(response.data, key=lambda item: item.index)
            vectors.extend(list(item.embedding) for item in ordered)
            logger.debug(
                "Embedded batch of %s texts",
                len(batch),
                extra={"ctx_model": self.model_name, "ctx_batch": len(batch)},
            )
        return vectors

    def embed_query(self, text: str) -> list[float]:
        return self.embed_documents([text])[0]

    def _prepare(self, text: str) -> str:
        return text.replace("\n", " ") if self.strip_new_lines else text


__all__ = ["EmbeddingClient"]
