"""Per-operation reply handlers: envelope in, form delta out."""

from __future__ import annotations

from collections.abc import Callable

from ncalayer_client.state.form import FormUpdate
from ncalayer_client.protocol.keys import extract_key_alias
from ncalayer_client.state.operations import OperationTag
from ncalayer_client.protocol.envelope import ResponseEnvelope
from ncalayer_client.state.validation import ValidationCategory
from ncalayer_client.config.protocol import SIGNATURE_VALID_MESSAGE, SIGNATURE_INVALID_MESSAGE

ReplyHandler = Callable[[ResponseEnvelope], FormUpdate]

_PASSWORD = frozenset({ValidationCategory.PASSWORD, ValidationCategory.PASSWORD_ATTEMPTS})

ACCEPTED_CATEGORIES: dict[OperationTag, frozenset[ValidationCategory]] = {
    OperationTag.BROWSE_KEY_STORE: frozenset(),
    OperationTag.GET_KEYS: _PASSWORD | {ValidationCategory.KEY_TYPE},
    OperationTag.SET_LOCALE: frozenset(),
    OperationTag.GET_NOT_BEFORE: _PASSWORD,
    OperationTag.GET_NOT_AFTER: _PASSWORD,
    OperationTag.GET_SUBJECT_DN: _PASSWORD,
    OperationTag.GET_ISSUER_DN: _PASSWORD,
    OperationTag.GET_RDN_BY_OID: _PASSWORD | {ValidationCategory.RDN},
    OperationTag.SIGN_PLAIN_DATA: _PASSWORD,
    OperationTag.VERIFY_PLAIN_DATA: _PASSWORD,
}


def _failure(tag: OperationTag, envelope: ResponseEnvelope, **changes: object) -> FormUpdate:
    return FormUpdate(changes=dict(changes), error=envelope.classify_error(ACCEPTED_CATEGORIES[tag]))


def _handle_browse_key_store(envelope: ResponseEnvelope) -> FormUpdate:
    if envelope.is_ok():
        return FormUpdate({"path": envelope.get_result()})
    return _failure(OperationTag.BROWSE_KEY_STORE, envelope)


def _handle_get_keys(envelope: ResponseEnvelope) -> FormUpdate:
    if envelope.is_ok():
        keys = tuple(envelope.get_lines())
        return FormUpdate({"keys": keys, "key_alias": extract_key_alias(keys[0]) if keys else ""})
    return _failure(OperationTag.GET_KEYS, envelope, keys=(), key_alias="")


def _handle_set_locale(envelope: ResponseEnvelope) -> FormUpdate:
    if envelope.is_ok():
        return FormUpdate()
    return _failure(OperationTag.SET_LOCALE, envelope)


def _field_handler(tag: OperationTag, field_name: str) -> ReplyHandler:
    def _handle(envelope: ResponseEnvelope) -> FormUpdate:
        if envelope.is_ok():
            return FormUpdate({field_name: envelope.get_result()})
        return _failure(tag, envelope)

    _handle.__name__ = f"_handle_{field_name}"
    return _handle


def _handle_verify_plain_data(envelope: ResponseEnvelope) -> FormUpdate:
    if envelope.is_ok():
        valid = envelope.get_bool()
        return FormUpdate({
            "plain_data_valid": valid,
            "plain_data_message": SIGNATURE_VALID_MESSAGE if valid else SIGNATURE_INVALID_MESSAGE,
        })
    return _failure(OperationTag.VERIFY_PLAIN_DATA, envelope)


HANDLERS: dict[OperationTag, ReplyHandler] = {
    OperationTag.BROWSE_KEY_STORE: _handle_browse_key_store,
    OperationTag.GET_KEYS: _handle_get_keys,
    OperationTag.SET_LOCALE: _handle_set_locale,
    OperationTag.GET_NOT_BEFORE: _field_handler(OperationTag.GET_NOT_BEFORE, "not_before"),
    OperationTag.GET_NOT_AFTER: _field_handler(OperationTag.GET_NOT_AFTER, "not_after"),
    OperationTag.GET_SUBJECT_DN: _field_handler(OperationTag.GET_SUBJECT_DN, "subject_dn"),
    OperationTag.GET_ISSUER_DN: _field_handler(OperationTag.GET_ISSUER_DN, "issuer_dn"),
    OperationTag.GET_RDN_BY_OID: _field_handler(OperationTag.GET_RDN_BY_OID, "rdn"),
    OperationTag.SIGN_PLAIN_DATA: _field_handler(OperationTag.SIGN_PLAIN_DATA, "plain_data_signed"),
    OperationTag.VERIFY_PLAIN_DATA: _handle_verify_plain_data,
}

__all__ = ["ACCEPTED_CATEGORIES", "HANDLERS", "ReplyHandler"]
