"""Connection readiness states owned by the transport channel."""

from __future__ import annotations

from enum import Enum


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"


__all__ = ["ConnectionState"]
