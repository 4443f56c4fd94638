"""Protocol definitions for the transport abstraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol


@dataclass(frozen=True)
class TransportResponse:
    """
    Immutable result of a single HTTP exchange.

    Attributes:
        status_code: HTTP status code (200, 404, etc.)
        content: Raw response content as bytes
        headers: All response headers
        url: Final URL after any redirects
    """

    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""


class TransportErrorKind(str, Enum):
    """Classification of connectivity failures."""

    TIMED_OUT = "timed_out"
    CONNECTION_LOST = "connection_lost"
    CANNOT_CONNECT_TO_HOST = "cannot_connect_to_host"
    DNS_LOOKUP_FAILED = "dns_lookup_failed"
    OTHER = "other"


TRANSIENT_KINDS = frozenset(
    {
        TransportErrorKind.TIMED_OUT,
        TransportErrorKind.CONNECTION_LOST,
        TransportErrorKind.CANNOT_CONNECT_TO_HOST,
        TransportErrorKind.DNS_LOOKUP_FAILED,
    }
)


class TransportError(Exception):
    """
    A request could not be completed at the connection level.

    The underlying library exception, if any, is available as ``__cause__``.
    """

    def __init__(self, kind: TransportErrorKind, message: str = "") -> None:
        self.kind = kind
        super().__init__(message or kind.value.replace("_", " "))

    def __reduce__(self):
        return (type(self), (self.kind, str(self)))

    @property
    def is_transient(self) -> bool:
        """True when the failure may succeed on another attempt."""
        return self.kind in TRANSIENT_KINDS


class Transport(Protocol):
    """
    Protocol for HTTP transports.

    This abstraction allows for:
    - Mock implementations in tests
    - Different backends (aiohttp, httpx, etc.)
    """

    async def execute(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        body: Optional[bytes] = None,
        timeout: float = 30.0,
    ) -> TransportResponse:
        """
        Perform a single HTTP request.

        Args:
            method: HTTP method name
            url: Absolute URL including query string
            headers: Request headers
            body: Optional request body
            timeout: Total timeout in seconds (0 disables it)

        Returns:
            TransportResponse with status, content, and headers

        Raises:
            TransportError on connectivity failures
        """
        ...
