from .connection import ConnectionState
from .form import FormState, FormUpdate
from .validation import Classification, ValidationCategory
from .operations import PendingCall, OperationTag, ReplyCallback, CorrelatorState
from .settings import TlsSettings, ClientSettings, ConnectionSettings

__all__ = [
    "Classification",
    "ClientSettings",
    "ConnectionSettings",
    "ConnectionState",
    "CorrelatorState",
    "FormState",
    "FormUpdate",
    "OperationTag",
    "PendingCall",
    "ReplyCallback",
    "TlsSettings",
    "ValidationCategory",
]
