"""Pydantic models for search options, results and raw stream events."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ── Search results ───────────────────────────────────────────────────


class ResultKind(StrEnum):
    CONTENT = "content"
    PATH = "path"
    REPO = "repo"


class LineMatch(BaseModel):
    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)

    line: str | None = None
    line_number: int | None = None
    # Usually [offset, length] pairs; kept as sent so odd entries do not drop the record.
    offset_and_lengths: list[Any] | None = None


class SearchResult(BaseModel):
    """One match record from a ``matches`` event.

    The server adds fields over time, so the record is open: every known
    field is optional and anything else is kept in ``model_extra`` and
    returned by :meth:`to_dict`.
    """

    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)

    type: str | None = None
    path: str | None = None
    repository_id: int | None = Field(default=None, alias="repositoryID")
    repository: str | None = None
    repo_last_fetched: str | None = None
    branches: list[str] | None = None
    commit: str | None = None
    hunks: Any = None
    repo_stars: int | None = None
    line_matches: list[LineMatch] | None = None
    language: str | None = None

    @property
    def kind(self) -> ResultKind | None:
        """The result type as a :class:`ResultKind`, or None for kinds this client does not know."""
        try:
            return ResultKind(self.type)
        except ValueError:
            return None

    @property
    def extra(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    def to_dict(self) -> dict[str, Any]:
        """Wire-shaped dict: server field names, unset fields omitted, extras kept."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


# ── Raw events ───────────────────────────────────────────────────────


class RawEvent(BaseModel):
    """An SSE event forwarded as-is; ``data`` is decoded JSON or the original string."""

    model_config = ConfigDict(frozen=True)

    event: str
    data: Any = None


# ── Search options ───────────────────────────────────────────────────


class SearchOptions(BaseModel):
    """Per-call query options of the stream API."""

    model_config = ConfigDict(frozen=True)

    version: str | None = Field(default=None, description="Query syntax version, e.g. 'V3'")
    pattern_type: Literal["keyword", "standard", "regexp"] | None = None
    max_line_length: int | None = None
    enable_chunk_matches: bool | None = None
    display_limit: int | None = None
    context_lines: int | None = Field(default=None, description="Only sent with chunk matches enabled")

    def to_params(self, query: str) -> list[tuple[str, str]]:
        """Query parameters for ``query``; optional ones only when set."""
        params: list[tuple[str, str]] = [("q", query)]
        if self.version:
            params.append(("v", self.version))
        if self.pattern_type:
            params.append(("t", self.pattern_type))
        if self.max_line_length:
            params.append(("max-line-len", str(self.max_line_length)))
        if self.enable_chunk_matches:
            params.append(("cm", "true"))
        if self.display_limit:
            params.append(("display", str(self.display_limit)))
        if self.context_lines and self.enable_chunk_matches:
            params.append(("cl", str(self.context_lines)))
        return params
