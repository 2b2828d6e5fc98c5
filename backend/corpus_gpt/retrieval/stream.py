"""Single-use token channel between a completion producer and a reader."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any

from corpus_gpt.core.errors import StreamClosedError

_END = object()


class StreamState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    CLOSED = "closed"
    ABORTED = "aborted"


class TokenStream:
    """Async iterator of generated tokens.

    The producer calls :meth:`push` for every token and finishes with exactly
    one of :meth:`close` or :meth:`abort`; whichever comes first wins and the
    other becomes a no-op. Readers receive tokens in push order. After an
    abort, the reader gets every token pushed before it and then the abort
    exception.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._state = StreamState.IDLE
        self._error: BaseException | None = None
        self._error_raised = False
        self._producer: asyncio.Task[Any] | None = None

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state in (StreamState.CLOSED, StreamState.ABORTED)

    @property
    def error(self) -> BaseException | None:
        return self._error

    def push(self, token: str) -> None:
        if self.done:
            raise StreamClosedError(f"Cannot write to a {self._state.value} stream")
        self._state = StreamState.STREAMING
        self._queue.put_nowait(token)

    def close(self) -> bool:
        if self.done:
            return False
        self._state = StreamState.CLOSED
        self._queue.put_nowait(_END)
        return True

    def abort(self, error: BaseException) -> bool:
        if self.done:
            return False
        self._state = StreamState.ABORTED
        self._error = error
        self._queue.put_nowait(_END)
        return True

    def attach(self, producer: asyncio.Task[Any]) -> None:
        """Hold a reference to the task feeding this stream."""
        self._producer = producer

    def __aiter__(self) -> "TokenStream":
        return self

    async def __anext__(self) -> str:
        item = await self._queue.get()
        if item is _END:
            # Leave the marker in place so further reads also terminate.
            self._queue.put_nowait(_END)
            if self._error is not None and not self._error_raised:
                self._error_raised = True
                raise self._error
            raise StopAsyncIteration
        return item

    async def read_all(self) -> str:
        return "".join([token async for token in self])


__all__ = ["StreamState", "TokenStream"]
