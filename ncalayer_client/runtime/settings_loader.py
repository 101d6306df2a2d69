"""Environment parsing for client settings."""

from __future__ import annotations

import os
from pathlib import Path

from ncalayer_client.state.settings import TlsSettings, ClientSettings, ConnectionSettings
from ncalayer_client.config.protocol import ENV_NCALAYER_STORE_TYPE, DEFAULT_NCALAYER_STORE_TYPE
from ncalayer_client.config.websocket import (
    ENV_NCALAYER_URL,
    DEFAULT_NCALAYER_URL,
    ENV_NCALAYER_CA_FILE,
    ENV_NCALAYER_TLS_VERIFY,
    DEFAULT_NCALAYER_CA_FILE,
    DEFAULT_NCALAYER_TLS_VERIFY,
    ENV_NCALAYER_OPEN_TIMEOUT_S,
    ENV_NCALAYER_CALL_TIMEOUT_S,
    DEFAULT_NCALAYER_OPEN_TIMEOUT_S,
    DEFAULT_NCALAYER_CALL_TIMEOUT_S,
    ENV_NCALAYER_MAX_MESSAGE_BYTES,
    DEFAULT_NCALAYER_MAX_MESSAGE_BYTES,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _path_env(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return Path(raw.strip()).expanduser()


def _load_connection_settings() -> ConnectionSettings:
    open_timeout = _float_env(ENV_NCALAYER_OPEN_TIMEOUT_S, DEFAULT_NCALAYER_OPEN_TIMEOUT_S)
    if open_timeout <= 0:
        open_timeout = DEFAULT_NCALAYER_OPEN_TIMEOUT_S
    max_bytes = _int_env(ENV_NCALAYER_MAX_MESSAGE_BYTES, DEFAULT_NCALAYER_MAX_MESSAGE_BYTES)

    return ConnectionSettings(
        url=_str_env(ENV_NCALAYER_URL, DEFAULT_NCALAYER_URL),
        open_timeout_s=open_timeout,
        # <= 0 disables the per-call timeout.
        call_timeout_s=max(0.0, _float_env(ENV_NCALAYER_CALL_TIMEOUT_S, DEFAULT_NCALAYER_CALL_TIMEOUT_S)),
        max_message_bytes=max(1, max_bytes),
    )


def _load_tls_settings() -> TlsSettings:
    return TlsSettings(
        ca_file=_path_env(ENV_NCALAYER_CA_FILE, DEFAULT_NCALAYER_CA_FILE),
        verify=_bool_env(ENV_NCALAYER_TLS_VERIFY, DEFAULT_NCALAYER_TLS_VERIFY),
    )


def load_settings() -> ClientSettings:
    return ClientSettings(
        connection=_load_connection_settings(),
        tls=_load_tls_settings(),
        store_type=_str_env(ENV_NCALAYER_STORE_TYPE, DEFAULT_NCALAYER_STORE_TYPE),
    )


__all__ = ["load_settings"]
