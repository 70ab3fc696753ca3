"""Unit tests for the matches-only and raw event routers."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from sgstream.models.schemas import RawEvent, SearchResult
from sgstream.streaming.classifier import MalformedFrame, SSEEvent
from sgstream.streaming.policy import LogAndSkip, RaiseOnError, policy_for
from sgstream.streaming.router import MatchesRouter, RawRouter, RouterState
from sgstream.utils.exceptions import FrameError, PayloadDecodeError


def test_policy_for_flag():
    assert isinstance(policy_for(True), RaiseOnError)
    assert isinstance(policy_for(False), LogAndSkip)


# ── Matches router ───────────────────────────────────────────────────


def test_matches_yields_each_result_in_order():
    router = MatchesRouter(LogAndSkip())
    results = router.route(
        SSEEvent("matches", '[{"type": "content", "path": "a.py"}, {"type": "path", "path": "b.py"}]')
    )
    assert [r.path for r in results] == ["a.py", "b.py"]
    assert all(isinstance(r, SearchResult) for r in results)


def test_other_events_are_absorbed_without_policy():
    router = MatchesRouter(RaiseOnError())
    assert router.route(SSEEvent("progress", '{"done": 10}')) == []
    assert router.route(SSEEvent("filters", "not json")) == []
    assert router.state is RouterState.STREAMING


def test_ignored_event_is_logged_at_debug():
    with capture_logs() as logs:
        assert MatchesRouter(LogAndSkip()).route(SSEEvent("progress", '{"done": 10}')) == []
    assert logs == [{"event": "sse_event_ignored", "sse_event": "progress", "log_level": "debug"}]


def test_done_event_is_terminal():
    router = MatchesRouter(LogAndSkip())
    assert router.route(SSEEvent("done", "{}")) == []
    assert router.done
    assert router.route(SSEEvent("matches", "[{}]")) == []


def test_invalid_json_is_skipped_and_logged():
    router = MatchesRouter(LogAndSkip())
    with capture_logs() as logs:
        assert router.route(SSEEvent("matches", "invalid json")) == []
    assert logs[0]["event"] == "sse_frame_skipped"
    assert logs[0]["log_level"] == "warning"
    assert logs[0]["error_type"] == "PayloadDecodeError"
    assert logs[0]["sse_event"] == "matches"
    assert logs[0]["payload"] == "invalid json"
    assert not router.done


def test_invalid_json_raises_under_strict_policy():
    router = MatchesRouter(RaiseOnError())
    with pytest.raises(PayloadDecodeError, match="Error parsing Sourcegraph search result"):
        router.route(SSEEvent("matches", "invalid json"))


def test_non_array_matches_payload():
    assert MatchesRouter(LogAndSkip()).route(SSEEvent("matches", '{"not": "an array"}')) == []
    with pytest.raises(PayloadDecodeError):
        MatchesRouter(RaiseOnError()).route(SSEEvent("matches", '{"not": "an array"}'))


def test_non_record_elements_reject_the_frame():
    assert MatchesRouter(LogAndSkip()).route(SSEEvent("matches", "[1, 2]")) == []
    with pytest.raises(PayloadDecodeError):
        MatchesRouter(RaiseOnError()).route(SSEEvent("matches", '[{"type": "repo"}, "oops"]'))


def test_malformed_frame_follows_policy():
    malformed = MalformedFrame(reason="frame has no data line", frame="event: ping")
    with capture_logs() as logs:
        assert MatchesRouter(LogAndSkip()).route(malformed) == []
    assert logs[0]["error_type"] == "FrameError"
    assert logs[0]["frame"] == "event: ping"

    with pytest.raises(FrameError) as excinfo:
        MatchesRouter(RaiseOnError()).route(malformed)
    assert excinfo.value.frame == "event: ping"


# ── Raw router ───────────────────────────────────────────────────────


def test_raw_forwards_every_event():
    router = RawRouter(LogAndSkip())
    assert router.route(SSEEvent("progress", '{"done": 10}')) == [RawEvent(event="progress", data={"done": 10})]
    assert router.route(SSEEvent("done", "{}")) == [RawEvent(event="done", data={})]
    assert not router.done


def test_raw_keeps_undecodable_payload_as_string():
    router = RawRouter(RaiseOnError())
    assert router.route(SSEEvent("custom", "not valid json")) == [RawEvent(event="custom", data="not valid json")]


def test_raw_malformed_frame_follows_policy():
    malformed = MalformedFrame(reason="second line of frame is not a data line", frame="event: x\nno: data")
    assert RawRouter(LogAndSkip()).route(malformed) == []
    with pytest.raises(FrameError):
        RawRouter(RaiseOnError()).route(malformed)


def test_raw_keeps_oversized_number_as_string():
    payload = "1" * 5000
    assert RawRouter(LogAndSkip()).route(SSEEvent("custom", payload)) == [RawEvent(event="custom", data=payload)]
