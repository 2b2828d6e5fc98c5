"""Tests for the token stream and completion streamer."""

from __future__ import annotations

import asyncio

import pytest
from fakes import FakeAsyncOpenAI

from corpus_gpt.core.errors import StreamClosedError
from corpus_gpt.retrieval.completion import CompletionCallbacks, CompletionStreamer
from corpus_gpt.retrieval.stream import StreamState, TokenStream


def test_tokens_are_read_in_push_order() -> None:
    async def scenario() -> str:
        stream = TokenStream()
        for token in ["a", "b", "c"]:
            stream.push(token)
        stream.close()
        return await stream.read_all()

    assert asyncio.run(scenario()) == "abc"


def test_reader_and_producer_interleave() -> None:
    tokens = [f"t{idx} " for idx in range(50)]

    async def produce(stream: TokenStream) -> None:
        for token in tokens:
            stream.push(token)
            await asyncio.sleep(0)
        stream.close()

    async def scenario() -> list[str]:
        stream = TokenStream()
        producer = asyncio.create_task(produce(stream))
        received = [token async for token in stream]
        await producer
        return received

    assert asyncio.run(scenario()) == tokens


def test_state_moves_from_idle_to_closed() -> None:
    stream = TokenStream()
    assert stream.state is StreamState.IDLE
    stream.push("x")
    assert stream.state is StreamState.STREAMING
    assert stream.close() is True
    assert stream.state is StreamState.CLOSED
    assert stream.close() is False
    assert stream.abort(RuntimeError("late")) is False
    assert stream.state is StreamState.CLOSED
    with pytest.raises(StreamClosedError):
        stream.push("y")


def test_abort_delivers_pending_tokens_then_error() -> None:
    async def scenario() -> list[str]:
        stream = TokenStream()
        stream.push("partial")
        stream.abort(RuntimeError("boom"))
        received: list[str] = []
        with pytest.raises(RuntimeError, match="boom"):
            async for token in stream:
                received.append(token)
        # A second pass terminates without re-raising.
        assert [token async for token in stream] == []
        return received

    assert asyncio.run(scenario()) == ["partial"]


def test_completion_streamer_relays_tokens(fake_chat: FakeAsyncOpenAI) -> None:
    streamer = CompletionStreamer(client=fake_chat)

    async def scenario() -> tuple[str, StreamState]:
        stream = streamer.stream("What is Next.js?")
        text = await stream.read_all()
        return text, stream.state

    text, state = asyncio.run(scenario())
    assert text == "Next.js is a framework."
    assert state is StreamState.CLOSED
    call = fake_chat.completions.calls[0]
    assert call["stream"] is True
    assert call["model"] == "gpt-3.5-turbo"
    assert call["temperature"] == 0.9
    assert call["max_tokens"] == 1024
    assert call["messages"] == [{"role": "user", "content": "What is Next.js?"}]


def test_completion_error_aborts_stream() -> None:
    fake = FakeAsyncOpenAI(tokens=["one ", "two "], error=RuntimeError("model overloaded"))
    streamer = CompletionStreamer(client=fake)

    async def scenario() -> tuple[list[str], TokenStream]:
        stream = streamer.stream("prompt")
        received: list[str] = []
        with pytest.raises(RuntimeError, match="model overloaded"):
            async for token in stream:
                received.append(token)
        return received, stream

    received, stream = asyncio.run(scenario())
    assert received == ["one ", "two "]
    assert stream.state is StreamState.ABORTED


def test_generate_invokes_exactly_one_terminal_callback(fake_chat: FakeAsyncOpenAI) -> None:
    events: list[str] = []
    callbacks = CompletionCallbacks(
        on_token=events.append,
        on_end=lambda: events.append("<end>"),
        on_error=lambda exc: events.append("<error>"),
    )
    asyncio.run(CompletionStreamer(client=fake_chat).generate("prompt", callbacks))
    assert events == ["Next", ".js ", "is ", "a ", "framework.", "<end>"]
