"""Map middleware error codes onto caller-declared validation categories.

Each call site declares which categories it treats as recoverable. A code whose
category is accepted yields that category's message; anything else yields a
generic "unclassified" message and is logged, since the caller did not
anticipate it.
"""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Iterable

from ncalayer_client.state.validation import Classification, ValidationCategory
from ncalayer_client.config.protocol import (
    CATEGORY_MESSAGES,
    UNCLASSIFIED_MESSAGE,
    ATTEMPTS_LEFT_MESSAGE,
    ERROR_CODE_CATEGORIES,
)

logger = logging.getLogger(__name__)


def resolve_category(error_code: int | str | None) -> ValidationCategory:
    if error_code is None:
        return ValidationCategory.UNKNOWN
    return ERROR_CODE_CATEGORIES.get(error_code, ValidationCategory.UNKNOWN)


def _remaining_attempts(result: Any) -> int | None:
    """Return the attempt count a WRONG_PASSWORD reply carries in its result, if any."""
    if isinstance(result, bool) or result is None:
        return None
    if isinstance(result, int):
        return result if result >= 0 else None
    if isinstance(result, str):
        text = result.strip()
        if text.isdecimal():
            return int(text)
    return None


def classify_error(
    error_code: int | str | None,
    accepted: Iterable[ValidationCategory],
    *,
    result: Any = None,
) -> Classification:
    accepted_set = frozenset(accepted)
    category = resolve_category(error_code)

    # Not something a caller can opt out of.
    if category is ValidationCategory.TIMEOUT:
        return Classification(category, CATEGORY_MESSAGES[category], expected=True, error_code=error_code)

    if category is ValidationCategory.PASSWORD and ValidationCategory.PASSWORD_ATTEMPTS in accepted_set:
        attempts = _remaining_attempts(result)
        if attempts == 0:
            category = ValidationCategory.PASSWORD_ATTEMPTS
        elif attempts is not None and category in accepted_set:
            return Classification(
                category,
                ATTEMPTS_LEFT_MESSAGE.format(attempts=attempts),
                expected=True,
                error_code=error_code,
            )

    if category in accepted_set:
        return Classification(category, CATEGORY_MESSAGES[category], expected=True, error_code=error_code)

    logger.warning(
        "unclassified middleware error code=%r category=%s accepted=%s",
        error_code,
        category.value,
        sorted(c.value for c in accepted_set),
    )
    return Classification(
        category,
        UNCLASSIFIED_MESSAGE.format(code=error_code),
        expected=False,
        error_code=error_code,
    )


__all__ = ["classify_error", "resolve_category"]
