"""Error policies for per-frame framing and decoding failures."""

from __future__ import annotations

from typing import Protocol

from sgstream.utils.exceptions import FrameError, PayloadDecodeError, StreamDecodeError
from sgstream.utils.logging import get_logger

logger = get_logger(__name__)


class ErrorPolicy(Protocol):
    def handle(self, error: StreamDecodeError) -> None:
        """Raise ``error`` or record it; returning means the frame is skipped."""


class RaiseOnError:
    """Escalate the first bad frame; the iteration ends with the error."""

    def handle(self, error: StreamDecodeError) -> None:
        raise error


class LogAndSkip:
    """Report the bad frame through the log and keep iterating."""

    def handle(self, error: StreamDecodeError) -> None:
        context: dict[str, str] = {}
        if isinstance(error, FrameError):
            context["frame"] = error.frame[:200]
        elif isinstance(error, PayloadDecodeError):
            context["sse_event"] = error.event
            context["payload"] = error.payload[:200]
        logger.warning(
            "sse_frame_skipped",
            error_type=type(error).__name__,
            reason=str(error),
            **context,
        )


def policy_for(throw_on_error: bool) -> ErrorPolicy:
    return RaiseOnError() if throw_on_error else LogAndSkip()
