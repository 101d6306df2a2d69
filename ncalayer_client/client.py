"""Client session: one channel, one correlator, one form state."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from collections.abc import Callable, Awaitable

from ncalayer_client.handlers import HANDLERS, Correlator
from ncalayer_client.handlers.replies import ReplyHandler
from ncalayer_client.protocol.envelope import ResponseEnvelope
from ncalayer_client.protocol.catalog import OperationCatalog
from ncalayer_client.protocol.keys import extract_key_alias
from ncalayer_client.runtime.settings_loader import load_settings
from ncalayer_client.errors import CallAbortedError, ProtocolMisuseError, ChannelNotReadyError
from ncalayer_client.transport import TransportChannel, build_ssl_context
from ncalayer_client.state import FormState, FormUpdate, OperationTag, ClientSettings, ConnectionState

logger = logging.getLogger(__name__)


class NCALayerClient:
    """Issue middleware operations from the current form state and await their replies.

    Reply handlers return deltas; the session is the only place that applies
    them, so ``form`` always reflects the last completed reply.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        channel: TransportChannel | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.form = FormState()

        conn = self.settings.connection
        self.channel = channel or TransportChannel(
            open_timeout_s=conn.open_timeout_s,
            max_message_bytes=conn.max_message_bytes,
            ssl_context=build_ssl_context(self.settings.tls, conn.url),
        )
        self.correlator = Correlator(timeout_s=conn.call_timeout_s)
        self.catalog = OperationCatalog(self.channel, self.correlator)
        self._waiter: asyncio.Future[FormUpdate] | None = None

        for tag, handler in HANDLERS.items():
            self.correlator.register(tag, self._make_callback(tag, handler))
        self.channel.set_frame_handler(self.correlator.handle_frame)
        self.channel.add_ready_listener(self._on_state_change)

    @property
    def ready(self) -> bool:
        return self.channel.is_ready

    async def connect(self) -> bool:
        return await self.channel.connect(self.settings.connection.url)

    async def close(self) -> None:
        await self.channel.close()

    async def __aenter__(self) -> NCALayerClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def update(self, **changes: Any) -> FormState:
        self.form = self.form.with_input(**changes)
        return self.form

    def select_key(self, line: str) -> FormState:
        return self.update(key_alias=extract_key_alias(line))

    def _make_callback(self, tag: OperationTag, handler: ReplyHandler) -> Callable[[ResponseEnvelope], None]:
        def _callback(envelope: ResponseEnvelope) -> None:
            update = handler(envelope)
            self.form = self.form.apply(update)
            if update.error is not None:
                logger.info("%s failed: %s", tag.value, update.error.message)
            waiter = self._waiter
            if waiter is not None and not waiter.done():
                waiter.set_result(update)

        return _callback

    def _on_state_change(self, state: ConnectionState) -> None:
        if state is not ConnectionState.DISCONNECTED:
            return
        tag = self.correlator.pending_tag
        self.correlator.reset()
        waiter = self._waiter
        if waiter is not None and not waiter.done():
            waiter.set_exception(CallAbortedError(tag))

    async def _call(self, tag: OperationTag, issue: Callable[[], Awaitable[OperationTag]]) -> FormUpdate:
        pending = self.correlator.pending_tag
        if pending is not OperationTag.NONE:
            raise ProtocolMisuseError(pending=pending, requested=tag)

        waiter: asyncio.Future[FormUpdate] = asyncio.get_running_loop().create_future()
        self._waiter = waiter
        try:
            try:
                await issue()
            except ChannelNotReadyError:
                # A send that found the socket dead has already aborted the waiter.
                if waiter.done():
                    return await waiter
                raise
            return await waiter
        finally:
            if self._waiter is waiter:
                self._waiter = None

    async def browse_key_store(self, alias: str | None = None) -> FormUpdate:
        if alias is not None:
            self.update(alias=alias)
        f = self.form
        return await self._call(
            OperationTag.BROWSE_KEY_STORE,
            lambda: self.catalog.browse_key_store(f.alias, self.settings.store_type, f.path),
        )

    async def get_keys(self) -> FormUpdate:
        f = self.form
        return await self._call(
            OperationTag.GET_KEYS,
            lambda: self.catalog.get_keys(f.alias, f.path, f.password, f.key_type),
        )

    async def set_locale(self) -> FormUpdate:
        f = self.form
        return await self._call(OperationTag.SET_LOCALE, lambda: self.catalog.set_locale(f.lang))

    async def get_not_before(self) -> FormUpdate:
        f = self.form
        return await self._call(
            OperationTag.GET_NOT_BEFORE,
            lambda: self.catalog.get_not_before(f.alias, f.path, f.key_alias, f.password),
        )

    async def get_not_after(self) -> FormUpdate:
        f = self.form
        return await self._call(
            OperationTag.GET_NOT_AFTER,
            lambda: self.catalog.get_not_after(f.alias, f.path, f.key_alias, f.password),
        )

    async def get_subject_dn(self) -> FormUpdate:
        f = self.form
        return await self._call(
            OperationTag.GET_SUBJECT_DN,
            lambda: self.catalog.get_subject_dn(f.alias, f.path, f.key_alias, f.password),
        )

    async def get_issuer_dn(self) -> FormUpdate:
        f = self.form
        return await self._call(
            OperationTag.GET_ISSUER_DN,
            lambda: self.catalog.get_issuer_dn(f.alias, f.path, f.key_alias, f.password),
        )

    async def get_rdn_by_oid(self, index: int = 0) -> FormUpdate:
        f = self.form
        return await self._call(
            OperationTag.GET_RDN_BY_OID,
            lambda: self.catalog.get_rdn_by_oid(f.alias, f.path, f.key_alias, f.password, f.oid, index),
        )

    async def sign_plain_data(self) -> FormUpdate:
        f = self.form
        return await self._call(
            OperationTag.SIGN_PLAIN_DATA,
            lambda: self.catalog.sign_plain_data(f.alias, f.path, f.key_alias, f.password, f.plain_data),
        )

    async def verify_plain_data(self) -> FormUpdate:
        f = self.form
        return await self._call(
            OperationTag.VERIFY_PLAIN_DATA,
            lambda: self.catalog.verify_plain_data(
                f.alias,
                f.path,
                f.key_alias,
                f.password,
                f.plain_data,
                f.plain_data_signed,
            ),
        )


__all__ = ["NCALayerClient"]
