"""Streaming client for the Sourcegraph search API."""

from __future__ import annotations

from sgstream.client import SourcegraphClient
from sgstream.config import AccessToken, ClientConfig, OAuthToken, Settings, get_settings
from sgstream.models.schemas import LineMatch, RawEvent, ResultKind, SearchOptions, SearchResult
from sgstream.utils.exceptions import (
    ConfigurationError,
    FrameError,
    PayloadDecodeError,
    SourcegraphStreamError,
    StreamDecodeError,
    TransportError,
)

__all__ = [
    "AccessToken",
    "ClientConfig",
    "ConfigurationError",
    "FrameError",
    "LineMatch",
    "OAuthToken",
    "PayloadDecodeError",
    "RawEvent",
    "ResultKind",
    "SearchOptions",
    "SearchResult",
    "Settings",
    "SourcegraphClient",
    "SourcegraphStreamError",
    "StreamDecodeError",
    "TransportError",
    "get_settings",
]
