"""Outbound request frames."""

from __future__ import annotations

from dataclasses import dataclass

import orjson

from ncalayer_client.config.websocket import WS_KEY_ARGS, WS_KEY_METHOD


@dataclass(frozen=True, slots=True)
class RequestFrame:
    method: str
    args: tuple[str | int, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {WS_KEY_METHOD: self.method, WS_KEY_ARGS: list(self.args)}

    def encode(self) -> str:
        return orjson.dumps(self.to_dict()).decode("utf-8")


__all__ = ["RequestFrame"]
