"""The single WebSocket connection to the signing middleware."""

from __future__ import annotations

import ssl
import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException, ConnectionClosedError

from ncalayer_client.errors import ChannelNotReadyError
from ncalayer_client.state.connection import ConnectionState
from ncalayer_client.config.websocket import (
    WS_HEARTBEAT,
    WS_CLOSE_CLIENT_REQUEST_CODE,
    WS_CLOSE_INTERNAL_ERROR_CODE,
    DEFAULT_NCALAYER_OPEN_TIMEOUT_S,
    DEFAULT_NCALAYER_MAX_MESSAGE_BYTES,
)

logger = logging.getLogger(__name__)

FrameHandler = Callable[[str], None]
ReadyListener = Callable[[ConnectionState], None]


class TransportChannel:
    """Own the socket, report readiness, and deliver non-heartbeat text frames.

    Transport failures never raise out of the channel: ``connect`` returns
    ``False`` and listeners observe the transition to ``DISCONNECTED``.
    """

    def __init__(
        self,
        *,
        on_frame: FrameHandler | None = None,
        open_timeout_s: float = DEFAULT_NCALAYER_OPEN_TIMEOUT_S,
        max_message_bytes: int = DEFAULT_NCALAYER_MAX_MESSAGE_BYTES,
        ssl_context: ssl.SSLContext | None = None,
        heartbeat: str = WS_HEARTBEAT,
    ) -> None:
        self._on_frame = on_frame
        self._open_timeout_s = float(open_timeout_s)
        self._max_message_bytes = int(max_message_bytes)
        self._ssl_context = ssl_context
        self._heartbeat = heartbeat
        self._listeners: list[ReadyListener] = []
        self._state = ConnectionState.DISCONNECTED
        self._ws: Any = None
        self._recv_task: asyncio.Task | None = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ConnectionState.READY

    def set_frame_handler(self, handler: FrameHandler | None) -> None:
        self._on_frame = handler

    def add_ready_listener(self, listener: ReadyListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _remove

    def _get_ws_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {
            "open_timeout": self._open_timeout_s,
            "max_size": self._max_message_bytes,
            # The middleware sends its own heartbeat text; disable protocol-level pings.
            "ping_interval": None,
            "ping_timeout": None,
        }
        if self._ssl_context is not None:
            options["ssl"] = self._ssl_context
        return options

    async def connect(self, url: str) -> bool:
        if self._state is not ConnectionState.DISCONNECTED:
            logger.debug("connect ignored; channel is %s", self._state.value)
            return self.is_ready

        self._set_state(ConnectionState.CONNECTING)
        try:
            ws = await websockets.connect(url, **self._get_ws_options())
        except (OSError, TimeoutError, WebSocketException) as exc:
            logger.warning("connection to %s failed: %s", url, exc)
            self._set_state(ConnectionState.DISCONNECTED)
            return False

        self._ws = ws
        logger.info("connection opened: %s", url)
        self._set_state(ConnectionState.READY)
        self._recv_task = asyncio.create_task(self._recv_loop(ws))
        return True

    async def send(self, text: str) -> None:
        if not self.is_ready or self._ws is None:
            raise ChannelNotReadyError(self._state)
        try:
            await self._ws.send(text)
        except ConnectionClosed as exc:
            logger.warning("send failed, connection closed: %s", exc)
            self._set_state(ConnectionState.DISCONNECTED)
            raise ChannelNotReadyError(self._state) from exc

    async def close(self) -> None:
        ws, task = self._ws, self._recv_task
        if ws is not None:
            with contextlib.suppress(Exception):
                await ws.close(code=WS_CLOSE_CLIENT_REQUEST_CODE)
        if task is not None and task is not asyncio.current_task():
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await task
        self._ws = None
        self._recv_task = None
        self._set_state(ConnectionState.DISCONNECTED)

    def _deliver(self, raw: str | bytes) -> None:
        if isinstance(raw, bytes | bytearray):
            raw = raw.decode("utf-8", errors="replace")
        if raw == self._heartbeat:
            return
        if self._on_frame is None:
            logger.debug("no frame handler; dropping frame")
            return
        self._on_frame(raw)

    async def _recv_loop(self, ws: Any) -> None:
        try:
            async for raw in ws:
                self._deliver(raw)
        except ConnectionClosedError:
            logger.warning("connection error: [code]=%s, [reason]=%s", ws.close_code, ws.close_reason)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("receive loop failed")
            with contextlib.suppress(Exception):
                await ws.close(code=WS_CLOSE_INTERNAL_ERROR_CODE)
        else:
            logger.info("connection closed")
        finally:
            if self._ws is ws:
                self._ws = None
                self._recv_task = None
            self._set_state(ConnectionState.DISCONNECTED)

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("readiness listener failed")


__all__ = ["FrameHandler", "ReadyListener", "TransportChannel"]
