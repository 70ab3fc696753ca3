"""Driving loop: pull text chunks, frame them, and yield routed items lazily."""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator
from typing import TypeVar

from sgstream.streaming.classifier import classify_frame
from sgstream.streaming.frame_buffer import FrameBuffer
from sgstream.streaming.router import EventRouter
from sgstream.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def iter_routed(chunks: AsyncIterable[str], router: EventRouter[T]) -> AsyncIterator[T]:
    """Yield items produced by ``router`` for the frames in ``chunks``.

    Ends when the chunk source is exhausted or the router reaches its
    terminal state; in the latter case no further chunk is pulled.
    """
    buffer = FrameBuffer()
    async for chunk in chunks:
        for frame in buffer.append(chunk):
            for item in router.route(classify_frame(frame)):
                yield item
            if router.done:
                logger.debug("sse_stream_terminal_event", pending=buffer.pending)
                return

    if buffer.pending:
        logger.debug("sse_stream_unterminated_frame", pending=buffer.pending)
