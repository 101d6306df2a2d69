"""Helpers for key-list replies and storage aliases."""

from __future__ import annotations

from ncalayer_client.state.form import NONE_ALIAS

KEY_FIELD_SEPARATOR = "|"
KEY_ALIAS_FIELD_INDEX = 3


def is_none(alias: str | None) -> bool:
    return not alias or alias.strip().upper() == NONE_ALIAS


def extract_key_alias(line: str) -> str:
    """Return the key alias from a key-list line (``type|owner|serial|alias``).

    Lines without the separated fields are used as the alias verbatim.
    """
    parts = line.split(KEY_FIELD_SEPARATOR)
    if len(parts) > KEY_ALIAS_FIELD_INDEX:
        return parts[KEY_ALIAS_FIELD_INDEX].strip()
    return line.strip()


__all__ = ["extract_key_alias", "is_none"]
