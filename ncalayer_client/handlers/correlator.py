"""Single-outstanding-call correlation of middleware replies.

The wire protocol carries no request identifier, so a reply can only be
attributed to a call if at most one call is in flight. The correlator holds
that single pending record and refuses to issue a second call until the first
one is answered, timed out, or dropped with the connection.
"""

from __future__ import annotations

import asyncio
import logging

from ncalayer_client.protocol.envelope import ResponseEnvelope
from ncalayer_client.errors import MalformedFrameError, ProtocolMisuseError
from ncalayer_client.state.operations import PendingCall, OperationTag, ReplyCallback, CorrelatorState

logger = logging.getLogger(__name__)

_LOG_FRAME_CHARS = 200


class Correlator:
    def __init__(self, *, timeout_s: float = 0.0) -> None:
        self._callbacks: dict[OperationTag, ReplyCallback] = {}
        self._pending: PendingCall | None = None
        # Disabled if timeout_s <= 0.
        self._timeout_s = max(0.0, float(timeout_s))

    @property
    def state(self) -> CorrelatorState:
        return CorrelatorState.IDLE if self._pending is None else CorrelatorState.AWAITING

    @property
    def pending_tag(self) -> OperationTag:
        return OperationTag.NONE if self._pending is None else self._pending.tag

    @property
    def pending_count(self) -> int:
        return 0 if self._pending is None else 1

    def register(self, tag: OperationTag, callback: ReplyCallback) -> None:
        if tag is OperationTag.NONE:
            raise ValueError("cannot register a reply callback for OperationTag.NONE")
        self._callbacks[tag] = callback

    def issue(self, tag: OperationTag) -> None:
        if tag is OperationTag.NONE:
            raise ValueError("cannot issue OperationTag.NONE")
        if self._pending is not None:
            raise ProtocolMisuseError(pending=self._pending.tag, requested=tag)
        callback = self._callbacks.get(tag)
        if callback is None:
            raise ValueError(f"no reply callback registered for {tag.value}")

        pending = PendingCall(tag=tag, callback=callback)
        pending.timer = self._schedule_timeout(pending)
        self._pending = pending

    def withdraw(self, tag: OperationTag) -> None:
        """Drop the pending record for a call whose frame never left the client."""
        pending = self._pending
        if pending is None or pending.tag is not tag:
            return
        pending.cancel_timer()
        self._pending = None

    def handle_frame(self, raw: str) -> None:
        try:
            envelope = ResponseEnvelope.parse(raw)
        except MalformedFrameError as exc:
            logger.warning("dropping %s: %.*s", exc, _LOG_FRAME_CHARS, raw)
            return

        if self._pending is None:
            logger.info("dropping reply with no pending call: %.*s", _LOG_FRAME_CHARS, raw)
            return
        self.dispatch(envelope)

    def dispatch(self, envelope: ResponseEnvelope) -> bool:
        pending = self._pending
        if pending is None:
            logger.info("dropping envelope with no pending call (errorCode=%r)", envelope.error_code)
            return False

        # Cleared before the callback runs so it may issue a follow-up call.
        self._pending = None
        pending.cancel_timer()
        self._invoke(pending, envelope)
        return True

    def reset(self) -> None:
        pending = self._pending
        if pending is None:
            return
        self._pending = None
        pending.cancel_timer()
        logger.info("discarding pending %s: connection closed", pending.tag.value)

    def _schedule_timeout(self, pending: PendingCall) -> asyncio.TimerHandle | None:
        if self._timeout_s <= 0:
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("no running event loop; %s issued without a timeout", pending.tag.value)
            return None
        return loop.call_later(self._timeout_s, self._expire, pending)

    def _expire(self, pending: PendingCall) -> None:
        if self._pending is not pending:
            return
        self._pending = None
        pending.timer = None
        logger.warning("%s timed out after %.1fs without a reply", pending.tag.value, self._timeout_s)
        self._invoke(pending, ResponseEnvelope.timed_out())

    @staticmethod
    def _invoke(pending: PendingCall, envelope: ResponseEnvelope) -> None:
        try:
            pending.callback(envelope)
        except Exception:
            logger.exception("reply callback for %s failed", pending.tag.value)


__all__ = ["Correlator"]
