from .tls import build_ssl_context
from .channel import FrameHandler, ReadyListener, TransportChannel

__all__ = ["FrameHandler", "ReadyListener", "TransportChannel", "build_ssl_context"]
