"""Observable caller state and the deltas reply handlers produce."""

from __future__ import annotations

from typing import Any
from dataclasses import field, fields, replace, dataclass

from .validation import Classification

NONE_ALIAS = "NONE"


@dataclass(frozen=True, slots=True)
class FormState:
    alias: str = NONE_ALIAS
    path: str = ""
    password: str = ""
    key_type: str = "ALL"
    key_alias: str = ""
    keys: tuple[str, ...] = ()
    lang: str = "ru"
    not_before: str = ""
    not_after: str = ""
    subject_dn: str = ""
    issuer_dn: str = ""
    oid: str = "2.5.4.3"
    rdn: str = ""
    plain_data: str = ""
    plain_data_signed: str = ""
    plain_data_valid: bool = False
    plain_data_message: str = "not verified"
    error_message: str | None = None

    def apply(self, update: FormUpdate) -> FormState:
        changes = dict(update.changes)
        changes["error_message"] = update.error.message if update.error is not None else None
        return replace(self, **changes)

    def with_input(self, **changes: Any) -> FormState:
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise TypeError(f"unknown form fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)


@dataclass(frozen=True, slots=True)
class FormUpdate:
    changes: dict[str, Any] = field(default_factory=dict)
    error: Classification | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


__all__ = ["FormState", "FormUpdate", "NONE_ALIAS"]
