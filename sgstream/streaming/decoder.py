"""Strict JSON decoding of event payloads."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    reason: str
    raw: str


def decode_payload(raw: str) -> Any | DecodeFailure:
    """Parse ``raw`` as JSON. Failure is returned, not raised; callers apply policy."""
    try:
        return json.loads(raw)
    # ValueError covers JSONDecodeError and the int digit limit; deep nesting hits the recursion limit.
    except (ValueError, RecursionError) as exc:
        return DecodeFailure(reason=f"{type(exc).__name__}: {exc}", raw=raw)
