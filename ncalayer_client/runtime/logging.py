"""Logging initialization."""

from __future__ import annotations

import logging

from ncalayer_client.config.logging import LOG_LEVEL, LOG_FORMAT

from .third_party_log_filters import configure as configure_third_party


def configure_logging(level: str | None = None) -> None:
    configure_third_party()
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)


__all__ = ["configure_logging"]
