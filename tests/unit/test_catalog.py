from __future__ import annotations

import orjson
import pytest

from ncalayer_client.handlers.correlator import Correlator
from ncalayer_client.protocol.catalog import OperationCatalog
from ncalayer_client.state.connection import ConnectionState
from ncalayer_client.state.operations import OperationTag, CorrelatorState
from ncalayer_client.errors import ChannelNotReadyError, ProtocolMisuseError, MissingArgumentError


class _FakeChannel:
    def __init__(self, *, ready: bool = True, fail: bool = False) -> None:
        self.state = ConnectionState.READY if ready else ConnectionState.DISCONNECTED
        self.fail = fail
        self.sent: list[str] = []

    @property
    def is_ready(self) -> bool:
        return self.state is ConnectionState.READY

    async def send(self, text: str) -> None:
        if self.fail:
            raise ConnectionError("socket gone")
        self.sent.append(text)


def _catalog(channel: _FakeChannel) -> tuple[OperationCatalog, Correlator]:
    correlator = Correlator()
    for tag in OperationTag:
        if tag is not OperationTag.NONE:
            correlator.register(tag, lambda envelope: None)
    return OperationCatalog(channel, correlator), correlator


def _sent(channel: _FakeChannel) -> list[dict]:
    return [orjson.loads(text) for text in channel.sent]


@pytest.mark.asyncio
async def test_get_keys_frame() -> None:
    channel = _FakeChannel()
    catalog, correlator = _catalog(channel)

    tag = await catalog.get_keys("alias1", "/path/a.p12", "pw", "ALL")

    assert tag is OperationTag.GET_KEYS
    assert _sent(channel) == [{"method": "GetKeys", "args": ["alias1", "/path/a.p12", "pw", "ALL"]}]
    assert correlator.pending_tag is OperationTag.GET_KEYS


@pytest.mark.asyncio
async def test_frames_for_every_operation() -> None:
    calls = [
        (lambda c: c.browse_key_store("PKCS12", "P12", ""), "BrowseKeyStore", ["PKCS12", "P12", ""]),
        (lambda c: c.set_locale("kk"), "SetLocale", ["kk"]),
        (lambda c: c.get_not_before("A", "/p", "k", "pw"), "GetNotBefore", ["A", "/p", "k", "pw"]),
        (lambda c: c.get_not_after("A", "/p", "k", "pw"), "GetNotAfter", ["A", "/p", "k", "pw"]),
        (lambda c: c.get_subject_dn("A", "/p", "k", "pw"), "GetSubjectDN", ["A", "/p", "k", "pw"]),
        (lambda c: c.get_issuer_dn("A", "/p", "k", "pw"), "GetIssuerDN", ["A", "/p", "k", "pw"]),
        (
            lambda c: c.get_rdn_by_oid("A", "/p", "k", "pw", "2.5.4.3", 0),
            "GetRdnByOid",
            ["A", "/p", "k", "pw", "2.5.4.3", 0],
        ),
        (lambda c: c.sign_plain_data("A", "/p", "k", "pw", "hello"), "SignPlainData", ["A", "/p", "k", "pw", "hello"]),
        (
            lambda c: c.verify_plain_data("A", "/p", "k", "pw", "hello", "c2ln"),
            "VerifyPlainData",
            ["A", "/p", "k", "pw", "hello", "c2ln"],
        ),
    ]
    for build, method, args in calls:
        channel = _FakeChannel()
        catalog, correlator = _catalog(channel)
        tag = await build(catalog)
        assert tag.value == method
        assert _sent(channel) == [{"method": method, "args": args}]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("alias", "path", "password", "missing"),
    [
        ("", "/p", "pw", "alias"),
        ("NONE", "/p", "pw", "alias"),
        ("PKCS12", "", "pw", "path"),
        ("PKCS12", "/p", "", "password"),
    ],
)
async def test_missing_arguments_rejected_before_send(alias: str, path: str, password: str, missing: str) -> None:
    channel = _FakeChannel()
    catalog, correlator = _catalog(channel)

    with pytest.raises(MissingArgumentError) as exc:
        await catalog.get_keys(alias, path, password, "ALL")

    assert exc.value.argument == missing
    assert exc.value.operation is OperationTag.GET_KEYS
    assert channel.sent == []
    assert correlator.state is CorrelatorState.IDLE


@pytest.mark.asyncio
async def test_certificate_field_requires_key_alias() -> None:
    channel = _FakeChannel()
    catalog, _ = _catalog(channel)
    with pytest.raises(MissingArgumentError) as exc:
        await catalog.get_subject_dn("PKCS12", "/p", "", "pw")
    assert exc.value.argument == "key_alias"
    assert channel.sent == []


@pytest.mark.asyncio
@pytest.mark.parametrize("index", [-1, True, "0"])
async def test_rdn_rejects_bad_index(index: object) -> None:
    channel = _FakeChannel()
    catalog, _ = _catalog(channel)
    with pytest.raises(MissingArgumentError):
        await catalog.get_rdn_by_oid("PKCS12", "/p", "k", "pw", "2.5.4.3", index)  # type: ignore[arg-type]
    assert channel.sent == []


@pytest.mark.asyncio
async def test_second_call_while_pending_is_not_sent() -> None:
    channel = _FakeChannel()
    catalog, correlator = _catalog(channel)
    await catalog.get_keys("PKCS12", "/p", "pw", "ALL")

    with pytest.raises(ProtocolMisuseError):
        await catalog.get_not_before("PKCS12", "/p", "k", "pw")

    assert len(channel.sent) == 1
    assert correlator.pending_tag is OperationTag.GET_KEYS


@pytest.mark.asyncio
async def test_not_ready_channel_rejects_call() -> None:
    channel = _FakeChannel(ready=False)
    catalog, correlator = _catalog(channel)
    with pytest.raises(ChannelNotReadyError):
        await catalog.set_locale("ru")
    assert correlator.state is CorrelatorState.IDLE


@pytest.mark.asyncio
async def test_failed_send_withdraws_pending_call() -> None:
    channel = _FakeChannel(fail=True)
    catalog, correlator = _catalog(channel)
    with pytest.raises(ConnectionError):
        await catalog.set_locale("ru")
    assert correlator.state is CorrelatorState.IDLE
