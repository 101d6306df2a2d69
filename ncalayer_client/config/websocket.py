"""WebSocket transport configuration and constants."""

from __future__ import annotations

from pathlib import Path

# Frame keys
WS_KEY_METHOD = "method"
WS_KEY_ARGS = "args"
WS_KEY_RESULT = "result"
WS_KEY_SECOND_RESULT = "secondResult"
WS_KEY_ERROR_CODE = "errorCode"

# Keep-alive text the middleware interleaves with replies.
WS_HEARTBEAT = "--heartbeat--"

WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_INTERNAL_ERROR_CODE = 1011

ENV_NCALAYER_URL = "NCALAYER_URL"
ENV_NCALAYER_OPEN_TIMEOUT_S = "NCALAYER_OPEN_TIMEOUT_S"
ENV_NCALAYER_CALL_TIMEOUT_S = "NCALAYER_CALL_TIMEOUT_S"
ENV_NCALAYER_MAX_MESSAGE_BYTES = "NCALAYER_MAX_MESSAGE_BYTES"
ENV_NCALAYER_CA_FILE = "NCALAYER_CA_FILE"
ENV_NCALAYER_TLS_VERIFY = "NCALAYER_TLS_VERIFY"

DEFAULT_NCALAYER_URL = "wss://127.0.0.1:13579/"
DEFAULT_NCALAYER_OPEN_TIMEOUT_S = 10.0
# Browsing and password prompts block inside the middleware until the user answers.
DEFAULT_NCALAYER_CALL_TIMEOUT_S = 300.0
DEFAULT_NCALAYER_MAX_MESSAGE_BYTES = 16 * 1024 * 1024
DEFAULT_NCALAYER_CA_FILE: Path | None = None
DEFAULT_NCALAYER_TLS_VERIFY = True

__all__ = [
    "WS_KEY_METHOD",
    "WS_KEY_ARGS",
    "WS_KEY_RESULT",
    "WS_KEY_SECOND_RESULT",
    "WS_KEY_ERROR_CODE",
    "WS_HEARTBEAT",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_INTERNAL_ERROR_CODE",
    "ENV_NCALAYER_URL",
    "ENV_NCALAYER_OPEN_TIMEOUT_S",
    "ENV_NCALAYER_CALL_TIMEOUT_S",
    "ENV_NCALAYER_MAX_MESSAGE_BYTES",
    "ENV_NCALAYER_CA_FILE",
    "ENV_NCALAYER_TLS_VERIFY",
    "DEFAULT_NCALAYER_URL",
    "DEFAULT_NCALAYER_OPEN_TIMEOUT_S",
    "DEFAULT_NCALAYER_CALL_TIMEOUT_S",
    "DEFAULT_NCALAYER_MAX_MESSAGE_BYTES",
    "DEFAULT_NCALAYER_CA_FILE",
    "DEFAULT_NCALAYER_TLS_VERIFY",
]
