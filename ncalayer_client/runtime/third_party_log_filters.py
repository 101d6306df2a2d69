"""Log noise filters for third-party libraries."""

from __future__ import annotations

import os
import logging

from ncalayer_client.config.logging import ENV_SHOW_WEBSOCKETS_LOGS


def configure() -> None:
    # websockets logs every heartbeat frame at DEBUG. Keep it tame unless explicitly enabled.
    if (os.getenv(ENV_SHOW_WEBSOCKETS_LOGS) or "").strip().lower() not in {"1", "true", "yes"}:
        logging.getLogger("websockets").setLevel(logging.WARNING)
        logging.getLogger("websockets.client").setLevel(logging.WARNING)


__all__ = ["configure"]
