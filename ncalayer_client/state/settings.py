"""Client settings (dataclasses only)."""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ConnectionSettings:
    url: str
    open_timeout_s: float
    call_timeout_s: float
    max_message_bytes: int


@dataclass(frozen=True, slots=True)
class TlsSettings:
    ca_file: Path | None
    verify: bool


@dataclass(frozen=True, slots=True)
class ClientSettings:
    connection: ConnectionSettings
    tls: TlsSettings
    store_type: str


__all__ = [
    "ClientSettings",
    "ConnectionSettings",
    "TlsSettings",
]
