"""TLS context for the middleware's loopback listener."""

from __future__ import annotations

import ssl

from ncalayer_client.state.settings import TlsSettings


def build_ssl_context(tls: TlsSettings, url: str) -> ssl.SSLContext | None:
    if not url.lower().startswith("wss://"):
        return None
    if tls.ca_file is None and tls.verify:
        # websockets builds a default verifying context itself.
        return None

    context = ssl.create_default_context(cafile=str(tls.ca_file) if tls.ca_file is not None else None)
    if not tls.verify:
        # The middleware ships a self-signed certificate for 127.0.0.1.
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


__all__ = ["build_ssl_context"]
