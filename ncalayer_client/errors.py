"""Shared error types for the NCALayer client."""

from __future__ import annotations

from dataclasses import dataclass

from ncalayer_client.state.connection import ConnectionState
from ncalayer_client.state.operations import OperationTag


@dataclass(frozen=True, slots=True)
class ProtocolMisuseError(Exception):
    """Raised when an operation is issued while another reply is still pending."""

    pending: OperationTag
    requested: OperationTag

    def __str__(self) -> str:
        return f"cannot issue {self.requested.value} while {self.pending.value} is awaiting a reply"


@dataclass(frozen=True, slots=True)
class MissingArgumentError(Exception):
    """Raised before any I/O when a required operation argument is empty."""

    operation: OperationTag
    argument: str

    def __str__(self) -> str:
        return f"{self.operation.value}: '{self.argument}' is required"


@dataclass(frozen=True, slots=True)
class MalformedFrameError(Exception):
    reason: str
    raw: str

    def __str__(self) -> str:
        return f"malformed frame: {self.reason}"


@dataclass(frozen=True, slots=True)
class ResultUnavailableError(Exception):
    """Raised when a result is read from an envelope that carries an error."""

    error_code: int | str | None

    def __str__(self) -> str:
        return f"envelope has no result (errorCode={self.error_code!r})"


@dataclass(frozen=True, slots=True)
class ChannelNotReadyError(Exception):
    state: ConnectionState

    def __str__(self) -> str:
        return f"channel is not ready (state={self.state.value})"


@dataclass(frozen=True, slots=True)
class CallAbortedError(Exception):
    """Raised to an awaiting caller when the connection drops before the reply."""

    tag: OperationTag

    def __str__(self) -> str:
        return f"{self.tag.value} aborted: connection closed before a reply arrived"


__all__ = [
    "CallAbortedError",
    "ChannelNotReadyError",
    "MalformedFrameError",
    "MissingArgumentError",
    "ProtocolMisuseError",
    "ResultUnavailableError",
]
