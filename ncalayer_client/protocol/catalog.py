"""One request builder per middleware operation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ncalayer_client.state.operations import OperationTag
from ncalayer_client.errors import ChannelNotReadyError, MissingArgumentError

from .keys import is_none
from .frames import RequestFrame

if TYPE_CHECKING:
    from ncalayer_client.handlers.correlator import Correlator
    from ncalayer_client.transport.channel import TransportChannel

logger = logging.getLogger(__name__)


def _require(tag: OperationTag, **values: str) -> None:
    for name, value in values.items():
        if not isinstance(value, str) or not value.strip():
            raise MissingArgumentError(tag, name)


def _require_store(tag: OperationTag, alias: str, path: str, password: str) -> None:
    if is_none(alias):
        raise MissingArgumentError(tag, "alias")
    _require(tag, path=path, password=password)


class OperationCatalog:
    """Validate arguments, record the pending tag, then send exactly one frame.

    Every check runs before any I/O so a rejected call never reaches the middleware.
    """

    def __init__(self, channel: TransportChannel, correlator: Correlator) -> None:
        self._channel = channel
        self._correlator = correlator

    async def _send(self, tag: OperationTag, *args: str | int) -> OperationTag:
        if not self._channel.is_ready:
            raise ChannelNotReadyError(self._channel.state)

        frame = RequestFrame(tag.value, args)
        self._correlator.issue(tag)
        try:
            await self._channel.send(frame.encode())
        except Exception:
            self._correlator.withdraw(tag)
            raise
        # Arguments carry passwords; never log them.
        logger.debug("sent %s (%d args)", tag.value, len(args))
        return tag

    async def browse_key_store(self, alias: str, store_type: str, current_path: str) -> OperationTag:
        tag = OperationTag.BROWSE_KEY_STORE
        if is_none(alias):
            raise MissingArgumentError(tag, "alias")
        _require(tag, store_type=store_type)
        return await self._send(tag, alias, store_type, current_path or "")

    async def get_keys(self, alias: str, path: str, password: str, key_type: str) -> OperationTag:
        tag = OperationTag.GET_KEYS
        _require_store(tag, alias, path, password)
        _require(tag, key_type=key_type)
        return await self._send(tag, alias, path, password, key_type)

    async def set_locale(self, lang: str) -> OperationTag:
        tag = OperationTag.SET_LOCALE
        _require(tag, lang=lang)
        return await self._send(tag, lang)

    async def _certificate_field(
        self,
        tag: OperationTag,
        alias: str,
        path: str,
        key_alias: str,
        password: str,
    ) -> OperationTag:
        _require_store(tag, alias, path, password)
        _require(tag, key_alias=key_alias)
        return await self._send(tag, alias, path, key_alias, password)

    async def get_not_before(self, alias: str, path: str, key_alias: str, password: str) -> OperationTag:
        return await self._certificate_field(OperationTag.GET_NOT_BEFORE, alias, path, key_alias, password)

    async def get_not_after(self, alias: str, path: str, key_alias: str, password: str) -> OperationTag:
        return await self._certificate_field(OperationTag.GET_NOT_AFTER, alias, path, key_alias, password)

    async def get_subject_dn(self, alias: str, path: str, key_alias: str, password: str) -> OperationTag:
        return await self._certificate_field(OperationTag.GET_SUBJECT_DN, alias, path, key_alias, password)

    async def get_issuer_dn(self, alias: str, path: str, key_alias: str, password: str) -> OperationTag:
        return await self._certificate_field(OperationTag.GET_ISSUER_DN, alias, path, key_alias, password)

    async def get_rdn_by_oid(
        self,
        alias: str,
        path: str,
        key_alias: str,
        password: str,
        oid: str,
        index: int = 0,
    ) -> OperationTag:
        tag = OperationTag.GET_RDN_BY_OID
        _require_store(tag, alias, path, password)
        _require(tag, key_alias=key_alias, oid=oid)
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise MissingArgumentError(tag, "index")
        return await self._send(tag, alias, path, key_alias, password, oid, index)

    async def sign_plain_data(
        self,
        alias: str,
        path: str,
        key_alias: str,
        password: str,
        data: str,
    ) -> OperationTag:
        tag = OperationTag.SIGN_PLAIN_DATA
        _require_store(tag, alias, path, password)
        _require(tag, key_alias=key_alias)
        return await self._send(tag, alias, path, key_alias, password, data or "")

    async def verify_plain_data(
        self,
        alias: str,
        path: str,
        key_alias: str,
        password: str,
        data: str,
        signature: str,
    ) -> OperationTag:
        tag = OperationTag.VERIFY_PLAIN_DATA
        _require_store(tag, alias, path, password)
        _require(tag, key_alias=key_alias)
        return await self._send(tag, alias, path, key_alias, password, data or "", signature or "")


__all__ = ["OperationCatalog"]
