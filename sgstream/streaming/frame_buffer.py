"""Incremental SSE framing over arbitrarily chunked text."""

from __future__ import annotations

FRAME_DELIMITER = "\n\n"


class FrameBuffer:
    """Accumulate decoded text and cut it into blank-line-delimited frames.

    Chunk boundaries carry no meaning: a frame, a line, or the delimiter
    itself may be split across any number of appends. Whatever follows the
    last delimiter is kept until a later append terminates it.
    """

    def __init__(self) -> None:
        self._buffer = ""

    @property
    def pending(self) -> int:
        """Number of characters held for a frame that is not yet terminated."""
        return len(self._buffer)

    def append(self, chunk: str) -> list[str]:
        """Add a chunk and return the frames it completes, in arrival order."""
        if not chunk:
            return []

        # Normalise over the whole buffer so a CR/LF pair split between
        # two chunks is still folded into a single newline.
        self._buffer = (self._buffer + chunk).replace("\r\n", "\n")

        *complete, self._buffer = self._buffer.split(FRAME_DELIMITER)
        # Keep-alive blocks (blank or whitespace only) are not frames.
        return [frame for frame in complete if frame.strip()]
