"""Client for the NCALayer signing middleware over a single WebSocket."""

from .client import NCALayerClient
from .handlers import Correlator
from .protocol import RequestFrame, OperationCatalog, ResponseEnvelope
from .transport import TransportChannel
from .state import FormState, FormUpdate, OperationTag, ConnectionState, ValidationCategory
from .errors import (
    CallAbortedError,
    MalformedFrameError,
    ChannelNotReadyError,
    MissingArgumentError,
    ProtocolMisuseError,
    ResultUnavailableError,
)

__all__ = [
    "CallAbortedError",
    "ChannelNotReadyError",
    "ConnectionState",
    "Correlator",
    "FormState",
    "FormUpdate",
    "MalformedFrameError",
    "MissingArgumentError",
    "NCALayerClient",
    "OperationCatalog",
    "OperationTag",
    "ProtocolMisuseError",
    "RequestFrame",
    "ResponseEnvelope",
    "ResultUnavailableError",
    "TransportChannel",
    "ValidationCategory",
]
