"""Streaming completions from the OpenAI chat API."""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import openai

from corpus_gpt.core.logging import get_logger
from corpus_gpt.core.metrics import STREAMED_TOKENS
from corpus_gpt.retrieval.stream import TokenStream

logger = get_logger(__name__)


@dataclass(slots=True)
class CompletionCallbacks:
    """Lifecycle hooks invoked while a completion is generated."""

    on_token: Callable[[str], Awaitable[None] | None]
    on_end: Callable[[], Awaitable[Any] | Any]
    on_error: Callable[[BaseException], Awaitable[Any] | Any]


async def _call(result: Any) -> None:
    if inspect.isawaitable(result):
        await result


class CompletionStreamer:
    """Send a prompt to the completion model and relay tokens as they arrive."""

    def __init__(
        self,
        model_name: str = "gpt-3.5-turbo",
        temperature: float = 0.9,
        max_tokens: int = 1024,
        api_key: str | None = None,
        client: Any | None = None,
    ) -> None:
        self.model_name = model_name
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._api_key = api_key
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = openai.AsyncOpenAI(api_key=self._api_key)
        return self._client

    async def generate(self, prompt: str, callbacks: CompletionCallbacks) -> None:
        """Run one completion, reporting through ``callbacks``.

        Exactly one of ``on_end`` or ``on_error`` is called.
        """
        tokens = 0
        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                stream=True,
            )
            async for event in response:
                if not event.choices:
                    continue
                token = event.choices[0].delta.content
                if token:
                    tokens += 1
                    await _call(callbacks.on_token(token))
        except Exception as exc:
            logger.exception("Completion failed after %s tokens", tokens, extra={"ctx_model": self.model_name})
            await _call(callbacks.on_error(exc))
            return
        STREAMED_TOKENS.inc(tokens)
        logger.info("Completion finished", extra={"ctx_model": self.model_name, "ctx_tokens": tokens})
        await _call(callbacks.on_end())

    def stream(self, prompt: str) -> TokenStream:
        """Start generating in the background and return the stream it feeds.

        Must be called from a running event loop.
        """
        stream = TokenStream()
        callbacks = CompletionCallbacks(on_token=stream.push, on_end=stream.close, on_error=stream.abort)
        task = asyncio.get_running_loop().create_task(self.generate(prompt, callbacks))
        stream.attach(task)
        return stream


__all__ = ["CompletionCallbacks", "CompletionStreamer"]
