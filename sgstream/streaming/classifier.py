"""Split a complete SSE frame into its event name and raw payload."""

from __future__ import annotations

from dataclasses import dataclass

EVENT_PREFIX = "event:"
DATA_PREFIX = "data:"


@dataclass(frozen=True, slots=True)
class SSEEvent:
    """A classified frame: event name plus the untouched data payload."""

    name: str
    raw_payload: str


@dataclass(frozen=True, slots=True)
class MalformedFrame:
    """Classification outcome for a frame that is not a valid event."""

    reason: str
    frame: str


def classify_frame(frame: str) -> SSEEvent | MalformedFrame:
    """Classify one frame.

    The first line must start with ``event:`` and the second with ``data:``.
    Lines after the second (``id:``, ``retry:`` ...) are ignored. Never raises;
    invalid input comes back as a :class:`MalformedFrame`.
    """
    lines = frame.strip().split("\n", 2)
    if len(lines) < 2:
        return MalformedFrame(reason="frame has no data line", frame=frame)

    event_line, data_line = lines[0], lines[1]
    if not event_line.startswith(EVENT_PREFIX):
        return MalformedFrame(reason="frame does not start with an event line", frame=frame)
    if not data_line.startswith(DATA_PREFIX):
        return MalformedFrame(reason="second line of frame is not a data line", frame=frame)

    return SSEEvent(
        name=event_line[len(EVENT_PREFIX):].strip(),
        raw_payload=data_line[len(DATA_PREFIX):].strip(),
    )
