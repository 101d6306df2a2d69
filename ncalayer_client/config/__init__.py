"""Configuration module exports (env names, defaults and protocol constants only)."""

from .websocket import WS_HEARTBEAT, DEFAULT_NCALAYER_URL
from .protocol import SUCCESS_CODES, ERROR_CODE_CATEGORIES

__all__ = [
    "DEFAULT_NCALAYER_URL",
    "ERROR_CODE_CATEGORIES",
    "SUCCESS_CODES",
    "WS_HEARTBEAT",
]
