"""Async client for the Sourcegraph search streaming API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import aclosing, asynccontextmanager
from typing import TypeVar

import httpx
from structlog.stdlib import BoundLogger

from sgstream.config import ClientConfig, Settings, credential_from_tokens, get_settings
from sgstream.models.schemas import RawEvent, SearchOptions, SearchResult
from sgstream.streaming.consumer import iter_routed
from sgstream.streaming.policy import ErrorPolicy, policy_for
from sgstream.streaming.router import EventRouter, MatchesRouter, RawRouter
from sgstream.utils.exceptions import TransportError
from sgstream.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

EVENT_STREAM = "text/event-stream"
_BODYLESS_STATUSES = (204, 205, 304)


class SourcegraphClient:
    """Query Sourcegraph's ``/.api/search/stream`` endpoint.

    Each call opens its own HTTP stream and frame buffer. Results are
    produced lazily; closing the iterator early (``aclose()``, ``break``
    inside ``contextlib.aclosing``, or task cancellation) closes the
    response instead of draining it.

    Example::

        client = SourcegraphClient.from_tokens(
            "https://example.sourcegraph.com/.api/search/stream",
            access_token="your-token",
        )
        async for result in client.search("search-term"):
            print(result.path)
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._policy: ErrorPolicy = policy_for(config.throw_on_error)
        self._transport = transport

        headers = httpx.Headers(config.headers)
        headers["Accept"] = EVENT_STREAM
        headers["Authorization"] = config.credential.authorization()
        self.headers = headers

    @classmethod
    def from_tokens(
        cls,
        url: str,
        *,
        access_token: str | None = None,
        oauth_token: str | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        throw_on_error: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> SourcegraphClient:
        """Build a client from exactly one of ``access_token`` / ``oauth_token``."""
        config = ClientConfig(
            url=url,
            credential=credential_from_tokens(access_token, oauth_token),
            headers=headers or {},
            timeout=timeout,
            throw_on_error=throw_on_error,
        )
        return cls(config, transport=transport)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> SourcegraphClient:
        return cls(ClientConfig.from_settings(settings or get_settings()), transport=transport)

    async def search(self, query: str, options: SearchOptions | None = None) -> AsyncIterator[SearchResult]:
        """Yield search results as ``matches`` events arrive.

        Ends on the ``done`` event or when the server closes the stream.
        """
        async with aclosing(self._iter_stream(query, options, MatchesRouter(self._policy), "search")) as results:
            async for result in results:
                yield result

    async def raw(self, query: str, options: SearchOptions | None = None) -> AsyncIterator[RawEvent]:
        """Yield every SSE event of the stream, with JSON payloads decoded where possible."""
        async with aclosing(self._iter_stream(query, options, RawRouter(self._policy), "raw")) as events:
            async for event in events:
                yield event

    async def _iter_stream(
        self,
        query: str,
        options: SearchOptions | None,
        router: EventRouter[T],
        operation: str,
    ) -> AsyncIterator[T]:
        log = logger.bind(query=query, operation=operation)
        count = 0
        try:
            async with self._open_stream(query, options, log) as response:
                async with aclosing(iter_routed(response.aiter_text(), router)) as items:
                    async for item in items:
                        count += 1
                        yield item
            log.info("search_stream_done", items=count)
        finally:
            log.debug("search_stream_closed", items=count)

    @asynccontextmanager
    async def _open_stream(
        self,
        query: str,
        options: SearchOptions | None,
        log: BoundLogger,
    ) -> AsyncIterator[httpx.Response]:
        params = (options or SearchOptions()).to_params(query)
        async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as client:
            async with client.stream("GET", self.config.url, params=params, headers=self.headers) as response:
                if not response.is_success:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    log.warning(
                        "search_stream_rejected",
                        status=response.status_code,
                        body=body[:200],
                    )
                    raise TransportError(
                        f"Unable to fetch from Sourcegraph: {response.status_code} {response.reason_phrase}",
                        status_code=response.status_code,
                    )
                if _missing_body(response):
                    raise TransportError(
                        "Missing body in Sourcegraph response",
                        status_code=response.status_code,
                    )

                log.info("search_stream_opened", status=response.status_code, url=str(response.url))
                yield response


def _missing_body(response: httpx.Response) -> bool:
    if response.status_code in _BODYLESS_STATUSES:
        return True
    return response.headers.get("Content-Length") == "0"
