"""Middleware protocol constants: error codes, store types and reply messages."""

from __future__ import annotations

from ncalayer_client.state.validation import ValidationCategory

# errorCode values meaning success.
SUCCESS_CODES: frozenset[int | str] = frozenset({0, "NONE"})

# Synthetic code the correlator attaches to a call that never got a reply.
TIMEOUT_CODE = "TIMEOUT"

# The middleware reports some failures with integer codes and others with symbolic names.
ERROR_CODE_CATEGORIES: dict[int | str, ValidationCategory] = {
    1: ValidationCategory.UNKNOWN,
    "UNKNOWN_ERROR": ValidationCategory.UNKNOWN,
    2: ValidationCategory.KEY_TYPE,
    "EMPTY_KEY_LIST": ValidationCategory.KEY_TYPE,
    "KEY_TYPE_NOT_SUPPORTED": ValidationCategory.KEY_TYPE,
    3: ValidationCategory.PASSWORD,
    "WRONG_PASSWORD": ValidationCategory.PASSWORD,
    4: ValidationCategory.PASSWORD_ATTEMPTS,
    "PASSWORD_ATTEMPTS_EXHAUSTED": ValidationCategory.PASSWORD_ATTEMPTS,
    5: ValidationCategory.RDN,
    "RDN_NOT_FOUND": ValidationCategory.RDN,
    "INVALID_OID": ValidationCategory.RDN,
    TIMEOUT_CODE: ValidationCategory.TIMEOUT,
}

CATEGORY_MESSAGES: dict[ValidationCategory, str] = {
    ValidationCategory.PASSWORD: "wrong password",
    ValidationCategory.PASSWORD_ATTEMPTS: "password attempts exhausted",
    ValidationCategory.KEY_TYPE: "unsupported key type",
    ValidationCategory.RDN: "malformed RDN identifier",
    ValidationCategory.TIMEOUT: "operation timed out",
    ValidationCategory.UNKNOWN: "unknown error",
}

UNCLASSIFIED_MESSAGE = "unclassified failure (code={code})"
ATTEMPTS_LEFT_MESSAGE = "wrong password, {attempts} attempts left"

ENV_NCALAYER_STORE_TYPE = "NCALAYER_STORE_TYPE"
DEFAULT_NCALAYER_STORE_TYPE = "P12"

KEY_TYPES: tuple[str, ...] = ("ALL", "SIGN", "AUTH")

SIGNATURE_VALID_MESSAGE = "valid signature"
SIGNATURE_INVALID_MESSAGE = "invalid signature"

__all__ = [
    "ATTEMPTS_LEFT_MESSAGE",
    "CATEGORY_MESSAGES",
    "DEFAULT_NCALAYER_STORE_TYPE",
    "ENV_NCALAYER_STORE_TYPE",
    "ERROR_CODE_CATEGORIES",
    "KEY_TYPES",
    "SIGNATURE_INVALID_MESSAGE",
    "SIGNATURE_VALID_MESSAGE",
    "SUCCESS_CODES",
    "TIMEOUT_CODE",
    "UNCLASSIFIED_MESSAGE",
]
