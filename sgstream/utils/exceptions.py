"""Exception hierarchy for the search stream client."""

from __future__ import annotations


class SourcegraphStreamError(Exception):
    """Base exception for all client errors."""


class ConfigurationError(SourcegraphStreamError):
    """Invalid or contradictory client configuration (e.g. credentials)."""


class TransportError(SourcegraphStreamError):
    """The stream never started: non-success HTTP status or no response body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StreamDecodeError(SourcegraphStreamError):
    """Base for per-frame failures that are subject to the error policy."""


class FrameError(StreamDecodeError):
    """A frame lacks a valid event line or data line."""

    def __init__(self, message: str, frame: str = "") -> None:
        super().__init__(message)
        self.frame = frame


class PayloadDecodeError(StreamDecodeError):
    """A payload is not valid JSON or does not have the expected shape."""

    def __init__(self, message: str, event: str = "", payload: str = "") -> None:
        super().__init__(message)
        self.event = event
        self.payload = payload
