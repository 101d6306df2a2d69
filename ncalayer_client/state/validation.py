"""Validation categories and classification results (dataclasses only)."""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass


class ValidationCategory(str, Enum):
    PASSWORD = "password"
    PASSWORD_ATTEMPTS = "password_attempts"
    KEY_TYPE = "key_type"
    RDN = "rdn"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Classification:
    category: ValidationCategory
    message: str
    # False when the caller did not declare the category as recoverable.
    expected: bool
    error_code: int | str | None = None


__all__ = ["Classification", "ValidationCategory"]
