"""Transport layer for fluent_http."""

from .protocols import Transport, TransportError, TransportErrorKind, TransportResponse
from .transport import AiohttpTransport

__all__ = [
    "AiohttpTransport",
    "Transport",
    "TransportError",
    "TransportErrorKind",
    "TransportResponse",
]
