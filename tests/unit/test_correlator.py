from __future__ import annotations

import json
import asyncio
import logging

import pytest

from ncalayer_client.errors import ProtocolMisuseError
from ncalayer_client.handlers.correlator import Correlator
from ncalayer_client.protocol.envelope import ResponseEnvelope
from ncalayer_client.state.validation import ValidationCategory
from ncalayer_client.transport.channel import TransportChannel
from ncalayer_client.state.operations import OperationTag, CorrelatorState


def _recording_correlator(*tags: OperationTag, timeout_s: float = 0.0) -> tuple[Correlator, dict]:
    correlator = Correlator(timeout_s=timeout_s)
    calls: dict[OperationTag, list[ResponseEnvelope]] = {tag: [] for tag in tags}
    for tag in tags:
        correlator.register(tag, calls[tag].append)
    return correlator, calls


def test_matching_frame_invokes_callback_once() -> None:
    correlator, calls = _recording_correlator(OperationTag.GET_KEYS)
    correlator.issue(OperationTag.GET_KEYS)
    assert correlator.state is CorrelatorState.AWAITING
    assert correlator.pending_tag is OperationTag.GET_KEYS

    correlator.handle_frame(json.dumps({"result": "k1", "errorCode": 0}))
    correlator.handle_frame(json.dumps({"result": "k2", "errorCode": 0}))

    assert len(calls[OperationTag.GET_KEYS]) == 1
    assert calls[OperationTag.GET_KEYS][0].is_ok()
    assert correlator.state is CorrelatorState.IDLE
    assert correlator.pending_count == 0


def test_failed_reply_still_clears_pending() -> None:
    correlator, calls = _recording_correlator(OperationTag.GET_NOT_AFTER)
    correlator.issue(OperationTag.GET_NOT_AFTER)
    correlator.handle_frame(json.dumps({"result": None, "errorCode": 3}))
    assert not calls[OperationTag.GET_NOT_AFTER][0].is_ok()
    assert correlator.pending_tag is OperationTag.NONE


def test_frames_while_idle_are_dropped() -> None:
    correlator, calls = _recording_correlator(OperationTag.GET_KEYS)
    correlator.handle_frame(json.dumps({"result": "stray", "errorCode": 0}))
    assert calls[OperationTag.GET_KEYS] == []
    assert correlator.dispatch(ResponseEnvelope(error_code=0)) is False


def test_malformed_frame_keeps_call_pending() -> None:
    correlator, calls = _recording_correlator(OperationTag.SET_LOCALE)
    correlator.issue(OperationTag.SET_LOCALE)
    correlator.handle_frame("{not json")
    assert calls[OperationTag.SET_LOCALE] == []
    assert correlator.pending_tag is OperationTag.SET_LOCALE


def test_back_to_back_issue_is_rejected_and_only_first_callback_fires() -> None:
    correlator, calls = _recording_correlator(OperationTag.GET_KEYS, OperationTag.GET_NOT_BEFORE)
    correlator.issue(OperationTag.GET_KEYS)

    with pytest.raises(ProtocolMisuseError) as exc:
        correlator.issue(OperationTag.GET_NOT_BEFORE)
    assert exc.value.pending is OperationTag.GET_KEYS
    assert exc.value.requested is OperationTag.GET_NOT_BEFORE
    assert correlator.pending_count == 1

    correlator.handle_frame(json.dumps({"result": "k", "errorCode": 0}))
    assert len(calls[OperationTag.GET_KEYS]) == 1
    assert calls[OperationTag.GET_NOT_BEFORE] == []


def test_reset_discards_pending_without_callback() -> None:
    correlator, calls = _recording_correlator(OperationTag.SIGN_PLAIN_DATA)
    correlator.issue(OperationTag.SIGN_PLAIN_DATA)
    correlator.reset()
    correlator.handle_frame(json.dumps({"result": "sig", "errorCode": 0}))
    assert calls[OperationTag.SIGN_PLAIN_DATA] == []
    assert correlator.state is CorrelatorState.IDLE


def test_issue_rejects_none_and_unregistered_tags() -> None:
    correlator, _ = _recording_correlator(OperationTag.GET_KEYS)
    with pytest.raises(ValueError):
        correlator.issue(OperationTag.NONE)
    with pytest.raises(ValueError):
        correlator.issue(OperationTag.GET_ISSUER_DN)
    assert correlator.state is CorrelatorState.IDLE


def test_callback_may_issue_follow_up_call() -> None:
    correlator = Correlator()
    follow_ups: list[ResponseEnvelope] = []

    def _on_browse(envelope: ResponseEnvelope) -> None:
        correlator.issue(OperationTag.GET_KEYS)

    correlator.register(OperationTag.BROWSE_KEY_STORE, _on_browse)
    correlator.register(OperationTag.GET_KEYS, follow_ups.append)
    correlator.issue(OperationTag.BROWSE_KEY_STORE)
    correlator.handle_frame(json.dumps({"result": "/a.p12", "errorCode": 0}))
    assert correlator.pending_tag is OperationTag.GET_KEYS


def test_failing_callback_does_not_break_correlator() -> None:
    correlator = Correlator()

    def _boom(envelope: ResponseEnvelope) -> None:
        raise RuntimeError("boom")

    correlator.register(OperationTag.SET_LOCALE, _boom)
    correlator.issue(OperationTag.SET_LOCALE)
    correlator.handle_frame(json.dumps({"errorCode": 0}))
    assert correlator.state is CorrelatorState.IDLE


def test_heartbeat_never_reaches_pending_callback() -> None:
    correlator, calls = _recording_correlator(OperationTag.GET_KEYS)
    channel = TransportChannel(on_frame=correlator.handle_frame)
    correlator.issue(OperationTag.GET_KEYS)

    channel._deliver("--heartbeat--")
    channel._deliver(b"--heartbeat--")

    assert calls[OperationTag.GET_KEYS] == []
    assert correlator.pending_tag is OperationTag.GET_KEYS


@pytest.mark.asyncio
async def test_timeout_returns_to_idle_and_reports_timeout() -> None:
    correlator, calls = _recording_correlator(OperationTag.GET_SUBJECT_DN, timeout_s=0.01)
    correlator.issue(OperationTag.GET_SUBJECT_DN)

    await asyncio.sleep(0.1)

    assert correlator.state is CorrelatorState.IDLE
    (envelope,) = calls[OperationTag.GET_SUBJECT_DN]
    assert envelope.classify_error(frozenset()).category is ValidationCategory.TIMEOUT

    # A late reply is now unattributable.
    correlator.handle_frame(json.dumps({"result": "CN=late", "errorCode": 0}))
    assert len(calls[OperationTag.GET_SUBJECT_DN]) == 1


@pytest.mark.asyncio
async def test_reply_before_timeout_cancels_timer() -> None:
    correlator, calls = _recording_correlator(OperationTag.GET_ISSUER_DN, timeout_s=0.05)
    correlator.issue(OperationTag.GET_ISSUER_DN)
    correlator.handle_frame(json.dumps({"result": "CN=CA", "errorCode": 0}))

    await asyncio.sleep(0.1)

    assert len(calls[OperationTag.GET_ISSUER_DN]) == 1
    assert calls[OperationTag.GET_ISSUER_DN][0].get_result() == "CN=CA"


def test_timeout_skipped_without_running_loop(caplog: pytest.LogCaptureFixture) -> None:
    correlator, _ = _recording_correlator(OperationTag.GET_KEYS, timeout_s=1.0)
    with caplog.at_level(logging.DEBUG, logger="ncalayer_client.handlers.correlator"):
        correlator.issue(OperationTag.GET_KEYS)
    assert "without a timeout" in caplog.text
    assert correlator.pending_tag is OperationTag.GET_KEYS
