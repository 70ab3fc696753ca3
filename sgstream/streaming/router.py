"""Route classified frames to the caller according to the operation being served."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, TypeVar

from pydantic import ValidationError

from sgstream.models.schemas import RawEvent, SearchResult
from sgstream.streaming.classifier import MalformedFrame, SSEEvent
from sgstream.streaming.decoder import DecodeFailure, decode_payload
from sgstream.streaming.policy import ErrorPolicy
from sgstream.utils.exceptions import FrameError, PayloadDecodeError
from sgstream.utils.logging import get_logger

logger = get_logger(__name__)

MATCHES_EVENT = "matches"
DONE_EVENT = "done"

T_co = TypeVar("T_co", covariant=True)


class RouterState(Enum):
    STREAMING = "streaming"
    DONE = "done"


class EventRouter(Protocol[T_co]):
    @property
    def done(self) -> bool: ...

    def route(self, item: SSEEvent | MalformedFrame) -> list[T_co]: ...


class MatchesRouter:
    """Yield search results from ``matches`` events; stop on ``done``.

    Other well-formed events (progress, filters, alerts ...) are absorbed.
    Malformed frames and undecodable ``matches`` payloads go to the policy.
    """

    def __init__(self, policy: ErrorPolicy) -> None:
        self._policy = policy
        self.state = RouterState.STREAMING

    @property
    def done(self) -> bool:
        return self.state is RouterState.DONE

    def route(self, item: SSEEvent | MalformedFrame) -> list[SearchResult]:
        if self.done:
            return []
        if isinstance(item, MalformedFrame):
            self._policy.handle(FrameError(f"Malformed SSE frame: {item.reason}", frame=item.frame))
            return []

        if item.name == DONE_EVENT:
            self.state = RouterState.DONE
            return []
        if item.name != MATCHES_EVENT:
            logger.debug("sse_event_ignored", sse_event=item.name)
            return []

        decoded = decode_payload(item.raw_payload)
        if isinstance(decoded, DecodeFailure) or not isinstance(decoded, list):
            self._policy.handle(
                PayloadDecodeError(
                    "Error parsing Sourcegraph search result",
                    event=item.name,
                    payload=item.raw_payload,
                )
            )
            return []

        try:
            return [SearchResult.model_validate(entry) for entry in decoded]
        except ValidationError as exc:
            self._policy.handle(
                PayloadDecodeError(
                    f"Error parsing Sourcegraph search result: {exc.error_count()} invalid field(s)",
                    event=item.name,
                    payload=item.raw_payload,
                )
            )
            return []


class RawRouter:
    """Forward every well-formed event, decoding JSON payloads when possible.

    Never finishes early: only the end of the byte stream ends a raw call.
    """

    done = False

    def __init__(self, policy: ErrorPolicy) -> None:
        self._policy = policy

    def route(self, item: SSEEvent | MalformedFrame) -> list[RawEvent]:
        if isinstance(item, MalformedFrame):
            self._policy.handle(FrameError(f"Malformed SSE frame: {item.reason}", frame=item.frame))
            return []

        decoded = decode_payload(item.raw_payload)
        data = item.raw_payload if isinstance(decoded, DecodeFailure) else decoded
        return [RawEvent(event=item.name, data=data)]
