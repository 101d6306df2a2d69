"""Parsed form of an inbound middleware reply."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass
from collections.abc import Iterable

import orjson

from ncalayer_client.state.validation import Classification, ValidationCategory
from ncalayer_client.config.protocol import TIMEOUT_CODE, SUCCESS_CODES
from ncalayer_client.errors import MalformedFrameError, ResultUnavailableError
from ncalayer_client.config.websocket import WS_KEY_RESULT, WS_KEY_ERROR_CODE, WS_KEY_SECOND_RESULT

from .classifier import classify_error


def _normalize_error_code(value: Any, raw: str) -> int | str | None:
    if value is None:
        return None
    # bool is an int subclass; a boolean errorCode is not a code.
    if isinstance(value, bool):
        raise MalformedFrameError("errorCode must be an integer or a string", raw)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            return text
    raise MalformedFrameError("errorCode must be an integer or a string", raw)


@dataclass(frozen=True, slots=True)
class ResponseEnvelope:
    primary_result: Any = None
    secondary_result: Any = None
    error_code: int | str | None = None

    @classmethod
    def parse(cls, raw: str | bytes) -> ResponseEnvelope:
        text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes | bytearray) else raw
        try:
            data = orjson.loads(text)
        except orjson.JSONDecodeError as exc:
            raise MalformedFrameError(f"invalid JSON: {exc}", text) from exc

        if not isinstance(data, dict):
            raise MalformedFrameError("reply must be a JSON object", text)

        return cls(
            primary_result=data.get(WS_KEY_RESULT),
            secondary_result=data.get(WS_KEY_SECOND_RESULT),
            error_code=_normalize_error_code(data.get(WS_KEY_ERROR_CODE), text),
        )

    @classmethod
    def timed_out(cls) -> ResponseEnvelope:
        return cls(error_code=TIMEOUT_CODE)

    def is_ok(self) -> bool:
        return self.error_code is None or self.error_code in SUCCESS_CODES

    def _require_ok(self) -> None:
        if not self.is_ok():
            raise ResultUnavailableError(self.error_code)

    def get_result(self) -> str:
        self._require_ok()
        value = self.primary_result
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        return value if isinstance(value, str) else str(value)

    def get_bool(self) -> bool:
        self._require_ok()
        value = self.primary_result
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes"}
        return bool(value)

    def get_lines(self) -> list[str]:
        return [line for line in self.get_result().splitlines() if line.strip()]

    def classify_error(self, accepted: Iterable[ValidationCategory]) -> Classification:
        return classify_error(self.error_code, accepted, result=self.primary_result)


__all__ = ["ResponseEnvelope"]
