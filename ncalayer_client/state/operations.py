"""Operation tags and the correlator's pending-call record (dataclasses only)."""

from __future__ import annotations

import asyncio
from enum import Enum
from dataclasses import dataclass
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ncalayer_client.protocol.envelope import ResponseEnvelope


class CorrelatorState(str, Enum):
    IDLE = "idle"
    AWAITING = "awaiting"


class OperationTag(str, Enum):
    """One member per remote operation; the value is the wire method name."""

    NONE = "None"
    BROWSE_KEY_STORE = "BrowseKeyStore"
    GET_KEYS = "GetKeys"
    SET_LOCALE = "SetLocale"
    GET_NOT_BEFORE = "GetNotBefore"
    GET_NOT_AFTER = "GetNotAfter"
    GET_SUBJECT_DN = "GetSubjectDN"
    GET_ISSUER_DN = "GetIssuerDN"
    GET_RDN_BY_OID = "GetRdnByOid"
    SIGN_PLAIN_DATA = "SignPlainData"
    VERIFY_PLAIN_DATA = "VerifyPlainData"


ReplyCallback = Callable[["ResponseEnvelope"], None]


@dataclass(slots=True)
class PendingCall:
    tag: OperationTag
    callback: ReplyCallback
    timer: asyncio.TimerHandle | None = None

    def cancel_timer(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None


__all__ = ["CorrelatorState", "OperationTag", "PendingCall", "ReplyCallback"]
