"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator
from types import SimpleNamespace

import httpx
import pytest

TEST_URL = "https://example.sourcegraph.com/.api/search/stream"


@pytest.fixture(autouse=True)
def _env_setup(monkeypatch):
    """Keep the developer's Sourcegraph environment out of the tests."""
    for name in ("SRC_ENDPOINT", "SRC_ACCESS_TOKEN", "SRC_OAUTH_TOKEN", "SRC_THROW_ON_ERROR", "SRC_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FORMAT", "console")


class ChunkedStream(httpx.AsyncByteStream):
    """Response body that hands out pre-cut chunks and records what was pulled."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = chunks
        self.pulled = 0
        self.closed = False

    @property
    def total(self) -> int:
        return len(self._chunks)

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for chunk in self._chunks:
            self.pulled += 1
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


def split_bytes(body: str, size: int) -> list[bytes]:
    raw = body.encode("utf-8")
    return [raw[i:i + size] for i in range(0, len(raw), size)]


@pytest.fixture
def sse_transport():
    """Factory for a mock transport serving ``body`` in ``chunk_size``-byte chunks.

    ``chunks`` overrides the cut when a test needs exact chunk boundaries.
    """

    def factory(
        body: str = "",
        chunk_size: int = 10,
        chunks: list[str] | None = None,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
    ) -> SimpleNamespace:
        raw_chunks = [c.encode("utf-8") for c in chunks] if chunks is not None else split_bytes(body, chunk_size)
        stream = ChunkedStream(raw_chunks)
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                status_code,
                headers=headers if headers is not None else {"Content-Type": "text/event-stream; charset=utf-8"},
                stream=stream,
            )

        return SimpleNamespace(transport=httpx.MockTransport(handler), stream=stream, requests=requests)

    return factory


@pytest.fixture
def make_client():
    from sgstream.client import SourcegraphClient

    def factory(transport: httpx.AsyncBaseTransport, **kwargs) -> SourcegraphClient:
        kwargs.setdefault("access_token", "test")
        return SourcegraphClient.from_tokens(TEST_URL, transport=transport, **kwargs)

    return factory

